"""Frankfurter API HTTP client for GBP/JPY rates"""

import httpx
from datetime import date, datetime, timezone
from typing import Dict
from yen_tracker.domain.models import RateInfo
from yen_tracker.domain.exceptions import RateSourceError
from yen_tracker.config import settings
from yen_tracker.utils.date_utils import is_rate_stale

RATE_SOURCE = "frankfurter"
_QUERY = {"base": "GBP", "symbols": "JPY"}


class RateClient:
    """Client for the Frankfurter exchange rate API"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or settings.rate_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds

    async def _get_json(self, path: str) -> dict:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", params=_QUERY)
                response.raise_for_status()
                return response.json()
            except httpx.TimeoutException as e:
                raise RateSourceError(f"Rate API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise RateSourceError(f"Rate API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RateSourceError(f"Rate API unreachable: {e}") from e
            except ValueError as e:
                raise RateSourceError(f"Rate API returned invalid JSON: {e}") from e

    async def fetch_current_rate(self, today: date | None = None) -> RateInfo:
        """
        Fetch the latest published GBP/JPY rate.

        The rate is flagged stale when its publication date is not today
        and today is a weekday (no rates are published at weekends).

        Raises:
            RateSourceError: On timeout, HTTP errors, or invalid response
        """
        data = await self._get_json("/latest")
        today = today or date.today()

        try:
            published = date.fromisoformat(data["date"])
            rate = float(data["rates"]["JPY"])
        except (KeyError, ValueError, TypeError) as e:
            raise RateSourceError(f"Invalid rate data from API: {e}") from e

        return RateInfo(
            rate=rate,
            date=published,
            source=RATE_SOURCE,
            is_stale=is_rate_stale(published, today),
            fetched_at=datetime.now(timezone.utc),
        )

    async def fetch_historical_rates(self, start: date, end: date) -> Dict[date, float]:
        """
        Fetch daily GBP/JPY rates between two dates (inclusive).

        Raises:
            RateSourceError: On timeout, HTTP errors, or invalid response
        """
        data = await self._get_json(f"/{start.isoformat()}..{end.isoformat()}")

        try:
            return {
                date.fromisoformat(day): float(rates["JPY"])
                for day, rates in data["rates"].items()
            }
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise RateSourceError(f"Invalid rate history from API: {e}") from e
