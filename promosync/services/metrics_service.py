"""
Period-bucketed dashboard metrics
"""
from datetime import datetime, timedelta
from typing import Dict, List
import math
import logging

from promosync.core.clock import SystemClock
from promosync.core.exceptions import PersistenceUnavailable
from promosync.schemas.metrics import (
    MetricsPeriod,
    MetricsRecords,
    MetricsReport,
    MetricsSummary,
    TimeSeries,
)
from promosync.services.persistence import Persistence

logger = logging.getLogger(__name__)

ALL_TIME_START = datetime(1970, 1, 1)

PERIOD_DAYS = {
    MetricsPeriod.SEVEN_DAYS: 7,
    MetricsPeriod.THIRTY_DAYS: 30,
    MetricsPeriod.NINETY_DAYS: 90,
}

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
WEEK_LABELS = ["Week 1", "Week 2", "Week 3", "Week 4"]
MONTH_LABELS = ["Month 1", "Month 2", "Month 3"]
CALENDAR_MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

DEAL_STATUSES = ("active", "pending", "completed", "cancelled")
APPLICATION_STATUSES = ("accepted", "pending", "rejected")


def period_start(period: MetricsPeriod, now: datetime) -> datetime:
    """Earliest timestamp included in the period"""
    period = MetricsPeriod(period)
    if period in PERIOD_DAYS:
        return now - timedelta(days=PERIOD_DAYS[period])
    if period == MetricsPeriod.ONE_YEAR:
        try:
            return now.replace(year=now.year - 1)
        except ValueError:
            # Feb 29 has no counterpart last year
            return now.replace(year=now.year - 1, month=3, day=1)
    return ALL_TIME_START


def bucket_labels(period: MetricsPeriod) -> List[str]:
    period = MetricsPeriod(period)
    if period == MetricsPeriod.SEVEN_DAYS:
        return list(WEEKDAY_LABELS)
    if period == MetricsPeriod.THIRTY_DAYS:
        return list(WEEK_LABELS)
    if period == MetricsPeriod.NINETY_DAYS:
        return list(MONTH_LABELS)
    return list(CALENDAR_MONTH_LABELS)


def bucket_index(period: MetricsPeriod, timestamp: datetime, now: datetime) -> int:
    """
    Slot of a record in the period's label set

    7d buckets by weekday, so anything older than a week lands on the same
    label as the matching recent weekday. 1y/all bucket by calendar month and
    fold every year into the same twelve slots. 30d and 90d count back from
    now with the most recent slot last.
    """
    period = MetricsPeriod(period)
    days_ago = max(0, (now - timestamp).days)
    if period == MetricsPeriod.SEVEN_DAYS:
        return timestamp.weekday()
    if period == MetricsPeriod.THIRTY_DAYS:
        return 3 - min(days_ago // 7, 3)
    if period == MetricsPeriod.NINETY_DAYS:
        return 2 - min(days_ago // 30, 2)
    return timestamp.month - 1


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _count_statuses(records, statuses) -> Dict[str, int]:
    counts = {status: 0 for status in statuses}
    for record in records:
        if record.status in counts:
            counts[record.status] += 1
    return counts


def summarize(records: MetricsRecords, period: MetricsPeriod, now: datetime) -> MetricsSummary:
    """
    Aggregate raw records into a period-scoped summary

    Args:
        records: Deals, applications and revenue plus the current active deal count
        period: Lookback window
        now: Reference instant for the cutoff and the buckets

    Returns:
        MetricsSummary whose series always has the period's full label set
    """
    period = MetricsPeriod(period)
    cutoff = period_start(period, now)

    deals = [deal for deal in records.deals if deal.created_at >= cutoff]
    applications = [app for app in records.applications if app.created_at >= cutoff]
    revenue = [entry for entry in records.revenue if entry.created_at >= cutoff]

    labels = bucket_labels(period)
    data = [0.0] * len(labels)
    for entry in revenue:
        data[bucket_index(period, entry.created_at, now)] += entry.amount

    deal_status = _count_statuses(deals, DEAL_STATUSES)
    application_status = _count_statuses(applications, APPLICATION_STATUSES)

    total_applications = len(applications)
    acceptance_rate = 0
    if total_applications:
        acceptance_rate = _round_half_up(application_status["accepted"] / total_applications * 100)

    completed_values = [deal.deal_value for deal in deals if deal.status == "completed"]
    avg_deal_value = sum(completed_values) / len(completed_values) if completed_values else 0.0

    return MetricsSummary(
        period=period,
        total_revenue=round(sum(entry.amount for entry in revenue), 2),
        active_deals=records.active_deals,
        avg_deal_value=round(avg_deal_value, 2),
        acceptance_rate=acceptance_rate,
        deal_status=deal_status,
        application_status=application_status,
        revenue_series=TimeSeries(labels=labels, data=[round(value, 2) for value in data]),
    )


def empty_summary(period: MetricsPeriod, now: datetime) -> MetricsSummary:
    """Zero-valued summary with the period's full label set"""
    return summarize(MetricsRecords(), period, now)


class MetricsService:
    """Service for dashboard metrics"""

    @classmethod
    async def load_records(cls, store: Persistence, user_id: str) -> MetricsRecords:
        """
        Fetch everything the aggregator needs for a subscriber

        Raises:
            PersistenceUnavailable: If any collection cannot be read
        """
        deals = await store.query("contracts", {"user_id": user_id})
        applications = await store.query("applications", {"user_id": user_id})
        revenue = await store.query("revenue", {"user_id": user_id})
        metrics = await store.get("user_metrics", user_id) or {}

        return MetricsRecords(
            deals=deals,
            applications=applications,
            revenue=revenue,
            active_deals=metrics.get("active_deals") or 0,
        )

    @classmethod
    async def get_report(
        cls,
        store: Persistence,
        user_id: str,
        period: MetricsPeriod,
        clock=None,
    ) -> MetricsReport:
        """
        Build the metrics report for a subscriber

        A failing store never raises here: the report carries a zeroed
        summary and degraded=True instead.
        """
        now = (clock or SystemClock()).now()
        try:
            records = await cls.load_records(store, user_id)
        except PersistenceUnavailable as e:
            logger.warning(f"Metrics fetch failed for user {user_id}: {e}")
            return MetricsReport(
                summary=empty_summary(period, now),
                degraded=True,
                error=str(e),
            )

        return MetricsReport(summary=summarize(records, period, now))
