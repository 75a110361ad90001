"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class Band(str, Enum):
    """Policy band derived from the live rate"""

    AGGRESSIVE_BUY = "AGGRESSIVE_BUY"
    NORMAL_BUY = "NORMAL_BUY"
    HOLD = "HOLD"
    REVERSE = "REVERSE"


class Direction(str, Enum):
    """Direction of a currency exchange"""

    GBP_TO_JPY = "GBP_TO_JPY"
    JPY_TO_GBP = "JPY_TO_GBP"


class Provider(str, Enum):
    WISE = "WISE"
    REVOLUT = "REVOLUT"
    OTHER = "OTHER"


class AlertType(str, Enum):
    BAND_CHANGE = "band_change"
    CIRCUIT_BREAKER = "circuit_breaker"
    REVERSE_ZONE = "reverse_zone"
    RECALIBRATE = "recalibrate"


@dataclass(frozen=True)
class ConversionRecord:
    """A single historical currency exchange"""

    id: int
    date: date
    direction: Direction
    gbp_amount: int  # pence
    jpy_amount: int  # yen
    exchange_rate: float  # JPY per GBP, stored as logged (may include fees)
    spot_rate: Optional[float] = None
    fee_pct: Optional[float] = None
    provider: Optional[str] = None
    band_at_time: Optional[Band] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StrategySettings:
    """Thermostat configuration, loaded once and passed to every calculation"""

    aggressive_above: float = 200.0
    normal_above: float = 190.0
    hold_above: float = 175.0
    cap_aggressive_gbp: int = 200_000  # £2000 in pence
    cap_normal_gbp: int = 100_000  # £1000 in pence
    total_gbp_savings_pence: int = 5_000_000  # £50k
    max_fx_exposure_pct: int = 80
    monthly_jpy_expenses: int = 250_000
    monthly_jpy_salary_net: int = 300_000
    nisa_monthly_jpy: int = 100_000
    nisa_return_pct: float = 5.0
    circuit_breaker_loss_pence: int = 500_000  # £5000
    gbp_safety_net_months: int = 6
    scenario_best_rate: float = 210.0
    scenario_base_rate: float = 190.0
    scenario_worst_rate: float = 170.0
    last_band_review: Optional[date] = None
    review_interval_days: int = 90


@dataclass(frozen=True)
class RateInfo:
    """Resolved current rate from the rate source or cache"""

    rate: float
    date: date
    source: str
    is_stale: bool
    fetched_at: datetime


@dataclass(frozen=True)
class RateHistoryPoint:
    date: date
    rate: float


@dataclass
class Alert:
    """Advisory notification"""

    id: int
    type: AlertType
    message: str
    rate: Optional[float]
    band: Optional[str]
    acknowledged: bool
    created_at: datetime


@dataclass(frozen=True)
class AlertDraft:
    """Alert the decision rules want persisted"""

    type: AlertType
    message: str
    rate: Optional[float] = None
    band: Optional[str] = None


@dataclass(frozen=True)
class BandThresholds:
    aggressive_above: float
    normal_above: float
    hold_above: float


@dataclass
class BandResult:
    """Output of band classification"""

    band: Band
    rate: float
    thresholds: BandThresholds
    suggestion: str


@dataclass(frozen=True)
class NetPosition:
    """Capital at risk: GBP out minus GBP back, JPY in minus JPY out"""

    net_gbp_deployed: int
    net_jpy_held: int


@dataclass
class PortfolioSummary:
    total_gbp_converted: int
    net_gbp_deployed: int
    total_jpy_acquired: int
    weighted_avg_rate: float
    current_rate: float
    current_value_gbp: int
    unrealised_pnl_gbp: int
    unrealised_pnl_pct: float
    conversion_count: int


@dataclass
class ThermostatResult:
    """Monthly conversion budget for the current band"""

    band: Band
    monthly_cap: int
    converted_this_month: int
    remaining_budget: int
    suggested_amount: int
    suggestion: str
    at_cap: bool
    exposure_pct: float
    over_exposed: bool
    exposure_remaining: int


@dataclass
class CircuitBreakerResult:
    triggered: bool
    current_loss: int  # pence, negative = loss
    threshold: int
    loss_pct: float
    message: str


@dataclass
class ScenarioResult:
    label: str
    rate: float
    total_jpy_if_convert_now: int
    monthly_jpy_budget: int  # months of expenses covered
    jpy_per_pound: float


@dataclass
class Scenarios:
    best: ScenarioResult
    base: ScenarioResult
    worst: ScenarioResult


@dataclass
class StrategyResult:
    label: str
    description: str
    total_jpy: int
    avg_rate: float
    risk_level: str


@dataclass
class StrategyComparison:
    lump_sum: StrategyResult
    monthly_drip: StrategyResult
    thermostat: StrategyResult


@dataclass
class NisaYear:
    year: int
    contributed: int  # cumulative JPY
    growth: int  # cumulative JPY
    value: int


@dataclass
class NisaProjection:
    years: List[NisaYear] = field(default_factory=list)
    total_contributed: int = 0
    total_value: int = 0
    total_growth: int = 0
    growth_pct: float = 0.0


@dataclass
class RateRange:
    """Where the current rate sits within the historical range"""

    high: float
    low: float
    high_date: date
    low_date: date
    current: float
    percentile: float
