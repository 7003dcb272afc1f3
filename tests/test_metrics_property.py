"""
Property-based tests for metrics aggregation

Feature: promosync-dashboard
"""
from hypothesis import given, strategies as st, settings as hyp_settings
from datetime import datetime, timedelta

from promosync.schemas.metrics import ApplicationRecord, MetricsPeriod, MetricsRecords, RevenueRecord
from promosync.services.metrics_service import bucket_labels, period_start, summarize

NOW = datetime(2024, 6, 15, 12, 0, 0)

revenue_records = st.lists(
    st.builds(
        RevenueRecord,
        amount=st.integers(min_value=0, max_value=10_000).map(float),
        created_at=st.integers(min_value=0, max_value=3 * 365 * 24).map(lambda hours: NOW - timedelta(hours=hours)),
    ),
    max_size=40,
)

application_records = st.lists(
    st.builds(
        ApplicationRecord,
        status=st.sampled_from(["accepted", "pending", "rejected", "withdrawn"]),
        created_at=st.integers(min_value=0, max_value=400).map(lambda days: NOW - timedelta(days=days)),
    ),
    max_size=40,
)


# Property 1: Series shape never depends on input
@given(records=revenue_records, period=st.sampled_from(list(MetricsPeriod)))
@hyp_settings(max_examples=200, deadline=None)
def test_property_series_shape_is_fixed(records, period):
    summary = summarize(MetricsRecords(revenue=records), period, NOW)

    assert summary.revenue_series.labels == bucket_labels(period)
    assert len(summary.revenue_series.data) == len(bucket_labels(period))


# Property 2: Buckets partition the filtered revenue
@given(records=revenue_records, period=st.sampled_from(list(MetricsPeriod)))
@hyp_settings(max_examples=200, deadline=None)
def test_property_buckets_sum_to_total(records, period):
    summary = summarize(MetricsRecords(revenue=records), period, NOW)
    cutoff = period_start(period, NOW)

    expected = sum(record.amount for record in records if record.created_at >= cutoff)
    assert abs(sum(summary.revenue_series.data) - expected) < 1e-6
    assert abs(summary.total_revenue - expected) < 1e-6


# Property 3: Acceptance rate is a bounded percentage
@given(records=application_records, period=st.sampled_from(list(MetricsPeriod)))
@hyp_settings(max_examples=200, deadline=None)
def test_property_acceptance_rate_bounded(records, period):
    summary = summarize(MetricsRecords(applications=records), period, NOW)

    assert 0 <= summary.acceptance_rate <= 100
    if summary.application_status["accepted"] == 0:
        assert summary.acceptance_rate == 0


# Property 4: Active deal count passes through untouched
@given(active=st.integers(min_value=0, max_value=500), period=st.sampled_from(list(MetricsPeriod)))
@hyp_settings(max_examples=50, deadline=None)
def test_property_active_deals_unfiltered(active, period):
    assert summarize(MetricsRecords(active_deals=active), period, NOW).active_deals == active
