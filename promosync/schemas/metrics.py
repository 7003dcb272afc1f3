"""
Metrics-related schemas
"""
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Dict, List, Optional
import enum


class MetricsPeriod(str, enum.Enum):
    """Lookback window for the dashboard metrics"""
    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"
    NINETY_DAYS = "90d"
    ONE_YEAR = "1y"
    ALL_TIME = "all"

    def __str__(self):
        return self.value


class DealRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str
    deal_value: float = 0
    created_at: datetime


class ApplicationRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str
    created_at: datetime


class RevenueRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    amount: float
    created_at: datetime


class MetricsRecords(BaseModel):
    """Raw records fed to the aggregator"""
    deals: List[DealRecord] = []
    applications: List[ApplicationRecord] = []
    revenue: List[RevenueRecord] = []
    active_deals: int = 0  # current count, not period-filtered


class TimeSeries(BaseModel):
    labels: List[str]
    data: List[float]


class MetricsSummary(BaseModel):
    """Period-scoped dashboard summary"""
    period: MetricsPeriod
    total_revenue: float
    active_deals: int
    avg_deal_value: float
    acceptance_rate: int
    deal_status: Dict[str, int]
    application_status: Dict[str, int]
    revenue_series: TimeSeries


class MetricsReport(BaseModel):
    """Summary plus whether it was built from a failed fetch"""
    summary: MetricsSummary
    degraded: bool = False
    error: Optional[str] = None
