"""SQLAlchemy ORM models for conversions, settings, rate history and alerts"""

from sqlalchemy import BigInteger, Boolean, Column, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Conversion(Base):
    """Logged currency exchange (immutable once written)"""

    __tablename__ = "conversions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)
    direction = Column(String(16), nullable=False, default="GBP_TO_JPY")
    gbp_amount = Column(BigInteger, nullable=False)
    jpy_amount = Column(BigInteger, nullable=False)
    exchange_rate = Column(Float, nullable=False)
    spot_rate = Column(Float, nullable=True)
    fee_pct = Column(Float, nullable=True, default=0)
    provider = Column(String(16), nullable=True, default="WISE")
    band_at_time = Column(String(16), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class StrategySettingsRow(Base):
    """Singleton strategy configuration (id is always 1)"""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, default=1)
    aggressive_above = Column(Float, nullable=False, default=200)
    normal_above = Column(Float, nullable=False, default=190)
    hold_above = Column(Float, nullable=False, default=175)
    cap_aggressive_gbp = Column(BigInteger, nullable=False, default=200_000)
    cap_normal_gbp = Column(BigInteger, nullable=False, default=100_000)
    total_gbp_savings_pence = Column(BigInteger, nullable=False, default=5_000_000)
    max_fx_exposure_pct = Column(Integer, nullable=False, default=80)
    monthly_jpy_expenses = Column(BigInteger, nullable=False, default=250_000)
    monthly_jpy_salary_net = Column(BigInteger, nullable=False, default=300_000)
    nisa_monthly_jpy = Column(BigInteger, nullable=False, default=100_000)
    nisa_return_pct = Column(Float, nullable=False, default=5.0)
    circuit_breaker_loss_pence = Column(BigInteger, nullable=False, default=500_000)
    gbp_safety_net_months = Column(Integer, nullable=False, default=6)
    scenario_best_rate = Column(Float, nullable=False, default=210)
    scenario_base_rate = Column(Float, nullable=False, default=190)
    scenario_worst_rate = Column(Float, nullable=False, default=170)
    last_band_review = Column(Date, nullable=True)
    review_interval_days = Column(Integer, nullable=False, default=90)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class RateHistory(Base):
    """One cached GBP/JPY rate per calendar day"""

    __tablename__ = "rate_history"

    date = Column(Date, primary_key=True)
    rate = Column(Float, nullable=False)
    source = Column(Text, nullable=False, default="frankfurter")
    fetched_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class AlertRow(Base):
    """Advisory notification; only the acknowledged flag ever changes"""

    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(32), nullable=False, index=True)
    message = Column(Text, nullable=False)
    rate = Column(Float, nullable=True)
    band = Column(String(16), nullable=True)
    acknowledged = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
