"""
Tests for the opened/closed bucket series
"""
from datetime import date, timedelta

import pytest

from helpdesk_engine.models import (
    ALL_TYPES,
    Granularity,
    ResolvedWindow,
    TicketStatus,
    TicketType,
    TimeRange,
)
from helpdesk_engine.services import BucketSeriesBuilder, TimeWindowResolver

from tests.conftest import make_closed, make_ticket, utc


@pytest.fixture
def builder(settings):
    return BucketSeriesBuilder(settings)


@pytest.fixture
def resolver(settings):
    return TimeWindowResolver(settings)


class TestDailyBuckets:

    def test_one_bucket_per_day_with_labels(self, builder, resolver):
        window = resolver.resolve(TimeRange.CUSTOM, start=date(2024, 5, 1), end=date(2024, 5, 3))

        buckets = builder.build(window, [])

        assert [b.label for b in buckets] == ["01/05", "02/05", "03/05"]
        assert all(b.opened == 0 and b.closed == 0 for b in buckets)

    def test_counts_opened_by_creation_and_closed_by_update(self, builder, resolver):
        window = resolver.resolve(TimeRange.CUSTOM, start=date(2024, 5, 1), end=date(2024, 5, 3))
        tickets = [
            make_ticket("t1", utc(2024, 5, 1, 9)),
            make_ticket("t2", utc(2024, 5, 1, 23, 59)),
            make_closed("t3", utc(2024, 5, 1, 10), hours=30),  # closed 2 May 16:00
            # Updated inside the window but not closed
            make_ticket("t4", utc(2024, 4, 20), updated_at=utc(2024, 5, 3, 8)),
        ]

        buckets = builder.build(window, tickets)

        assert [b.opened for b in buckets] == [3, 0, 0]
        assert [b.closed for b in buckets] == [0, 1, 0]

    def test_midnight_belongs_to_the_new_day(self, builder, resolver):
        window = resolver.resolve(TimeRange.CUSTOM, start=date(2024, 5, 1), end=date(2024, 5, 2))
        tickets = [make_ticket("t1", utc(2024, 5, 2))]

        buckets = builder.build(window, tickets)

        assert [b.opened for b in buckets] == [0, 1]

    def test_type_filter_applies_to_both_counts(self, builder, resolver):
        window = resolver.resolve(TimeRange.CUSTOM, start=date(2024, 5, 1), end=date(2024, 5, 1))
        tickets = [
            make_closed("t1", utc(2024, 5, 1, 8), hours=2, type=TicketType.COLLECTIONS),
            make_closed("t2", utc(2024, 5, 1, 8), hours=2, type=TicketType.TECHNICAL_SUPPORT),
        ]

        buckets = builder.build(window, tickets, TicketType.COLLECTIONS)

        assert buckets[0].opened == 1
        assert buckets[0].closed == 1


class TestWeeklyBuckets:

    def test_buckets_align_to_calendar_weeks_when_window_starts_mid_week(self, builder):
        # Wednesday 1 May to Wednesday 22 May (exclusive)
        window = ResolvedWindow(
            start=utc(2024, 5, 1), end=utc(2024, 5, 22), granularity=Granularity.WEEKLY
        )
        tickets = [
            make_ticket("before", utc(2024, 4, 30, 12)),   # Same week, outside window
            make_ticket("sun", utc(2024, 5, 5, 22)),       # Last day of first week
            make_ticket("mon", utc(2024, 5, 6, 0)),        # First day of second week
            make_ticket("last", utc(2024, 5, 21, 23)),     # Inside the clipped last week
            make_ticket("after", utc(2024, 5, 22, 1)),     # Outside window
        ]

        buckets = builder.build(window, tickets)

        assert [b.label for b in buckets] == ["29/04", "06/05", "13/05", "20/05"]
        assert buckets[0].start == utc(2024, 5, 1)
        assert buckets[1].start == utc(2024, 5, 6)
        assert buckets[-1].end == utc(2024, 5, 22)
        assert [b.opened for b in buckets] == [1, 1, 0, 1]

    def test_sunday_first_locale_shifts_week_boundaries(self, en_settings):
        builder = BucketSeriesBuilder(en_settings)
        window = ResolvedWindow(
            start=utc(2024, 5, 5), end=utc(2024, 5, 19), granularity=Granularity.WEEKLY
        )
        tickets = [make_ticket("sun", utc(2024, 5, 12, 9))]

        buckets = builder.build(window, tickets)

        assert [b.label for b in buckets] == ["05/05", "05/12"]
        assert [b.opened for b in buckets] == [0, 1]


class TestMonthlyBuckets:

    def test_month_labels_use_locale_abbreviations(self, builder, resolver):
        window = resolver.resolve(TimeRange.MONTH, now=utc(2024, 2, 10))

        buckets = builder.build(window, [])

        assert len(buckets) == 12
        assert buckets[0].label == "mars 2023"
        assert buckets[-2].label == "janv. 2024"
        assert buckets[-1].label == "févr. 2024"

    def test_english_month_labels(self, en_settings):
        builder = BucketSeriesBuilder(en_settings)
        window = TimeWindowResolver(en_settings).resolve(TimeRange.MONTH, now=utc(2024, 2, 10))

        labels = [b.label for b in builder.build(window, [])]

        assert labels[-1] == "Feb 2024"
        assert labels[0] == "Mar 2023"

    def test_month_buckets_have_calendar_lengths(self, builder, resolver):
        window = resolver.resolve(TimeRange.MONTH, now=utc(2024, 5, 15))

        buckets = builder.build(window, [])
        february = next(b for b in buckets if b.start == utc(2024, 2, 1))

        assert february.end - february.start == timedelta(days=29)


class TestCoverage:

    @pytest.fixture
    def tickets(self):
        types = list(TicketType)
        tickets = []
        instant = utc(2024, 3, 1)
        for i in range(260):
            ticket_type = types[i % len(types)]
            if i % 3 == 0:
                tickets.append(make_closed(f"t{i}", instant, hours=40 + i, type=ticket_type))
            else:
                tickets.append(make_ticket(f"t{i}", instant, status=TicketStatus.NEW, type=ticket_type))
            instant += timedelta(hours=13)
        return tickets

    @pytest.mark.parametrize("start,end", [
        (date(2024, 3, 20), date(2024, 4, 10)),   # daily
        (date(2024, 3, 13), date(2024, 5, 30)),   # weekly, starts mid-week
        (date(2024, 3, 17), date(2024, 7, 20)),   # monthly, starts mid-month
    ])
    @pytest.mark.parametrize("type_filter", [ALL_TYPES, TicketType.BILLING_CHANGE])
    def test_opened_sum_equals_tickets_created_in_window(
        self, builder, resolver, tickets, start, end, type_filter
    ):
        window = resolver.resolve(TimeRange.CUSTOM, start=start, end=end)

        buckets = builder.build(window, tickets, type_filter)

        expected = sum(
            1 for t in tickets
            if window.start <= t.created_at < window.end
            and (type_filter == ALL_TYPES or t.type == type_filter)
        )
        assert sum(b.opened for b in buckets) == expected

    def test_buckets_are_contiguous(self, builder, resolver):
        window = resolver.resolve(TimeRange.CUSTOM, start=date(2024, 3, 13), end=date(2024, 5, 30))

        buckets = builder.build(window, [])

        assert buckets[0].start == window.start
        assert buckets[-1].end == window.end
        for previous, following in zip(buckets, buckets[1:]):
            assert previous.end == following.start
