"""GET /v1/projections and GET /v1/portfolio - P&L and forward-looking figures"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from yen_tracker.api.dependencies import get_rate_client, get_request_id
from yen_tracker.api.v1.rates import resolve_current_rate
from yen_tracker.api.v1.schemas import (
    NisaProjectionSchema,
    PortfolioSchema,
    ProjectionsResponse,
    RateHistoryPointSchema,
    RateRangeSchema,
    ScenariosSchema,
    StrategyComparisonSchema,
)
from yen_tracker.config import settings
from yen_tracker.domain.exceptions import RateUnavailableError
from yen_tracker.domain.nisa import calculate_nisa_projection
from yen_tracker.domain.portfolio import calculate_portfolio_summary
from yen_tracker.domain.projections import (
    calculate_52_week_range,
    calculate_break_even,
    calculate_scenarios,
    compare_strategies,
)
from yen_tracker.infrastructure.clients.frankfurter import RateClient
from yen_tracker.infrastructure.database.repositories import (
    ConversionRepository,
    RateHistoryRepository,
    SettingsRepository,
)
from yen_tracker.infrastructure.database.session import get_db
from yen_tracker.utils.date_utils import days_ago

router = APIRouter()


@router.get("/portfolio", response_model=PortfolioSchema)
async def get_portfolio(
    request: Request,
    db: Session = Depends(get_db),
    rate_client: RateClient = Depends(get_rate_client),
):
    """Portfolio summary valued at the current rate"""
    request_id = get_request_id(request)

    try:
        rate_info, _ = await resolve_current_rate(db, rate_client, request_id)
        records = ConversionRepository(db).list_records()
        db.commit()
    except RateUnavailableError as e:
        db.rollback()
        raise HTTPException(status_code=503, detail=str(e))

    return PortfolioSchema.model_validate(calculate_portfolio_summary(records, rate_info.rate))


@router.get("/projections", response_model=ProjectionsResponse)
async def get_projections(
    request: Request,
    db: Session = Depends(get_db),
    rate_client: RateClient = Depends(get_rate_client),
):
    """
    Everything the projections view needs in one call.

    Flow:
    1. Resolve the current rate and value the portfolio
    2. Remaining GBP = total savings - net deployed (not below 0)
    3. Scenarios, break-even and strategy comparison on the remaining GBP
    4. NISA compound growth and the 52-week rate range
    """
    request_id = get_request_id(request)

    try:
        rate_info, _ = await resolve_current_rate(db, rate_client, request_id)
        current_rate = rate_info.rate

        strategy = SettingsRepository(db).get()
        records = ConversionRepository(db).list_records()
        portfolio = calculate_portfolio_summary(records, current_rate)

        remaining_gbp_pence = max(0, strategy.total_gbp_savings_pence - portfolio.net_gbp_deployed)

        scenarios = calculate_scenarios(strategy, remaining_gbp_pence, strategy.monthly_jpy_expenses)
        break_even = calculate_break_even(portfolio.total_jpy_acquired, portfolio.net_gbp_deployed)
        comparison = compare_strategies(
            remaining_gbp_pence, current_rate, strategy, settings.strategy_comparison_months
        )
        nisa = calculate_nisa_projection(
            strategy.nisa_monthly_jpy, strategy.nisa_return_pct, settings.nisa_projection_years
        )

        history = RateHistoryRepository(db).get_history(since=days_ago(settings.rate_history_days))
        range_52_week = calculate_52_week_range(history, current_rate)

        db.commit()

        return ProjectionsResponse(
            scenarios=ScenariosSchema.model_validate(scenarios),
            break_even_rate=break_even,
            strategy_comparison=StrategyComparisonSchema.model_validate(comparison),
            nisa_projection=NisaProjectionSchema.model_validate(nisa),
            rate_history=[RateHistoryPointSchema.model_validate(p) for p in history],
            range_52_week=RateRangeSchema.model_validate(range_52_week) if range_52_week else None,
            current_rate=current_rate,
            portfolio=PortfolioSchema.model_validate(portfolio),
        )

    except RateUnavailableError as e:
        db.rollback()
        logging.error(f"Rate unavailable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
