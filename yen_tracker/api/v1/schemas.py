"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from yen_tracker.domain.models import AlertType, Band, Direction, Provider, StrategySettings


class ConversionCreate(BaseModel):
    """Request body for POST /v1/conversions"""

    date: date
    direction: Direction
    gbp_pence: int = Field(..., gt=0, description="GBP amount in pence")
    jpy_amount: int = Field(..., gt=0, description="JPY amount in yen")
    rate: float = Field(..., gt=0, description="Exchange rate achieved (JPY per GBP)")
    spot_rate: Optional[float] = Field(None, gt=0)
    fee_pct: Optional[float] = Field(None, ge=0, le=100)
    provider: Optional[Provider] = None
    notes: Optional[str] = Field(None, max_length=500)
    band_at_time: Optional[Band] = None


class ConversionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: date
    direction: Direction
    gbp_amount: int
    jpy_amount: int
    exchange_rate: float
    spot_rate: Optional[float] = None
    fee_pct: Optional[float] = None
    provider: Optional[str] = None
    band_at_time: Optional[Band] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class SettingsUpdate(BaseModel):
    """Request body for PUT /v1/settings - a full replacement"""

    aggressive_above: float = Field(..., gt=0)
    normal_above: float = Field(..., gt=0)
    hold_above: float = Field(..., gt=0)
    cap_aggressive_gbp: int = Field(..., gt=0)
    cap_normal_gbp: int = Field(..., gt=0)
    total_gbp_savings_pence: int = Field(..., gt=0)
    max_fx_exposure_pct: int = Field(..., ge=0, le=100)
    monthly_jpy_expenses: int = Field(..., ge=0)
    monthly_jpy_salary_net: int = Field(..., ge=0)
    nisa_monthly_jpy: int = Field(..., ge=0)
    nisa_return_pct: float = Field(..., ge=0, le=100)
    circuit_breaker_loss_pence: int = Field(..., gt=0)
    gbp_safety_net_months: int = Field(..., ge=1)
    scenario_best_rate: float = Field(..., gt=0)
    scenario_base_rate: float = Field(..., gt=0)
    scenario_worst_rate: float = Field(..., gt=0)
    review_interval_days: int = Field(..., ge=1)
    last_band_review: Optional[date] = None

    @model_validator(mode="after")
    def check_threshold_order(self) -> "SettingsUpdate":
        if self.hold_above >= self.normal_above:
            raise ValueError("hold_above must be less than normal_above")
        if self.normal_above > self.aggressive_above:
            raise ValueError("normal_above must be less than or equal to aggressive_above")
        return self

    def to_domain(self) -> StrategySettings:
        return StrategySettings(**self.model_dump())


class SettingsResponse(SettingsUpdate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    updated_at: Optional[datetime] = None


class RateInfoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rate: float
    date: date
    source: str
    is_stale: bool
    fetched_at: datetime


class ThresholdsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    aggressive_above: float
    normal_above: float
    hold_above: float


class BandSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    band: Band
    rate: float
    thresholds: ThresholdsSchema
    suggestion: str


class CircuitBreakerSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    triggered: bool
    current_loss: int
    threshold: int
    loss_pct: float
    message: str


class AlertSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: AlertType
    message: str
    rate: Optional[float] = None
    band: Optional[str] = None
    acknowledged: bool
    created_at: datetime


class RatesResponse(BaseModel):
    """Response for GET /v1/rates"""

    rate: RateInfoSchema
    band: BandSchema
    fallback: bool
    circuit_breaker: CircuitBreakerSchema
    alerts: List[AlertSchema]


class RateHistoryPointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    rate: float


class BackfillResponse(BaseModel):
    start: date
    end: date
    cached: int


class ThermostatSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class ThermostatResponse(BaseModel):
    """Response for GET /v1/thermostat"""

    thermostat: ThermostatSchema
    rate: RateInfoSchema
    band: BandSchema
    fallback: bool


class PortfolioSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_gbp_converted: int
    net_gbp_deployed: int
    total_jpy_acquired: int
    weighted_avg_rate: float
    current_rate: float
    current_value_gbp: int
    unrealised_pnl_gbp: int
    unrealised_pnl_pct: float
    conversion_count: int


class ScenarioSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    rate: float
    total_jpy_if_convert_now: int
    monthly_jpy_budget: int
    jpy_per_pound: float


class ScenariosSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    best: ScenarioSchema
    base: ScenarioSchema
    worst: ScenarioSchema


class StrategySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    description: str
    total_jpy: int
    avg_rate: float
    risk_level: str


class StrategyComparisonSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lump_sum: StrategySchema
    monthly_drip: StrategySchema
    thermostat: StrategySchema


class NisaYearSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    contributed: int
    growth: int
    value: int


class NisaProjectionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    years: List[NisaYearSchema]
    total_contributed: int
    total_value: int
    total_growth: int
    growth_pct: float


class RateRangeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    high: float
    low: float
    high_date: date
    low_date: date
    current: float
    percentile: float


class ProjectionsResponse(BaseModel):
    """Response for GET /v1/projections"""

    scenarios: ScenariosSchema
    break_even_rate: float
    strategy_comparison: StrategyComparisonSchema
    nisa_projection: NisaProjectionSchema
    rate_history: List[RateHistoryPointSchema]
    range_52_week: Optional[RateRangeSchema] = None
    current_rate: float
    portfolio: PortfolioSchema


class AcknowledgeRequest(BaseModel):
    """Request body for POST /v1/alerts/acknowledge: {"id": n} or {"all": true}"""

    id: Optional[int] = None
    all: bool = False


class AcknowledgeResponse(BaseModel):
    success: bool
    message: str


class AlertsResponse(BaseModel):
    alerts: List[AlertSchema]


TaxSystem = Literal["uk", "jp"]
