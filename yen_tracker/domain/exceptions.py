"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RateSourceError(DomainException):
    """Rate API returned an error or is unavailable"""

    pass


class RateUnavailableError(DomainException):
    """No live rate and nothing cached to fall back to"""

    pass


class ConversionNotFoundError(DomainException):
    """Conversion record does not exist"""

    pass


class InvalidMonthError(DomainException):
    """Month token is not a valid YYYY-MM value"""

    pass
