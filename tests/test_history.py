"""Property-based tests for the price history buffer.

**Feature: idx-live-view**
"""

from datetime import datetime, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from idxwatch.market.history import DEFAULT_CAPACITY, PriceHistoryBuffer
from idxwatch.models import PricePoint


BASE_TIME = datetime(2024, 1, 2, 9, 0, 0)

prices_strategy = st.lists(
    st.floats(min_value=1.0, max_value=100000.0, allow_nan=False, allow_infinity=False),
    min_size=0,
    max_size=120,
)


class TestBoundedCapacity:
    """
    **Feature: idx-live-view, Property 1: Bounded FIFO History**

    *For any* sequence of appends, the buffer never holds more than its
    capacity, and the samples kept are the most recent ones in order.
    """

    @given(prices=prices_strategy)
    @settings(max_examples=100)
    def test_length_never_exceeds_capacity(self, prices: list[float]):
        buffer = PriceHistoryBuffer()

        for i, price in enumerate(prices):
            buffer.append(price, BASE_TIME + timedelta(seconds=i))
            assert len(buffer) <= DEFAULT_CAPACITY

        assert len(buffer) == min(len(prices), DEFAULT_CAPACITY)

    @given(prices=prices_strategy)
    @settings(max_examples=100)
    def test_oldest_samples_are_evicted_first(self, prices: list[float]):
        buffer = PriceHistoryBuffer()

        for i, price in enumerate(prices):
            buffer.append(price, BASE_TIME + timedelta(seconds=i))

        assert buffer.prices() == prices[-DEFAULT_CAPACITY:]

        timestamps = [point.timestamp for point in buffer.snapshot()]
        assert timestamps == sorted(timestamps)

    @given(
        capacity=st.integers(min_value=1, max_value=40),
        count=st.integers(min_value=0, max_value=100),
    )
    @settings(max_examples=50)
    def test_custom_capacity(self, capacity: int, count: int):
        buffer = PriceHistoryBuffer(capacity=capacity)

        for i in range(count):
            buffer.append(float(i), BASE_TIME + timedelta(seconds=i))

        assert len(buffer) == min(count, capacity)
        if count:
            assert buffer.latest.price == float(count - 1)

    def test_default_capacity_is_thirty(self):
        assert DEFAULT_CAPACITY == 30

    def test_invalid_capacity_rejected(self):
        with pytest.raises(ValueError):
            PriceHistoryBuffer(capacity=0)


class TestPlaceholderTransition:
    """
    **Feature: idx-live-view, Property 2: Placeholder to Real Transition**

    *For any* number of placeholder samples, the first real sample discards
    them exactly once; later real samples never clear the buffer.
    """

    def test_real_sample_clears_placeholders(self):
        buffer = PriceHistoryBuffer()
        buffer.append(100.0, BASE_TIME, is_real_sample=False)
        buffer.append(105.0, BASE_TIME, is_real_sample=False)

        buffer.append(110.0, BASE_TIME + timedelta(seconds=5))

        assert buffer.real_data_started
        assert buffer.prices() == [110.0]

    @given(
        placeholders=st.integers(min_value=2, max_value=40),
        real_count=st.integers(min_value=1, max_value=60),
    )
    @settings(max_examples=100)
    def test_transition_happens_exactly_once(self, placeholders: int, real_count: int):
        buffer = PriceHistoryBuffer()
        for i in range(placeholders):
            buffer.append(-1.0, BASE_TIME + timedelta(seconds=i), is_real_sample=False)

        for i in range(real_count):
            buffer.append(float(i), BASE_TIME + timedelta(minutes=1, seconds=i))

        # No placeholder survives and no real sample was dropped by a second clear.
        assert -1.0 not in buffer.prices()
        assert len(buffer) == min(real_count, DEFAULT_CAPACITY)
        assert buffer.prices()[-1] == float(real_count - 1)

    def test_single_placeholder_is_also_cleared(self):
        buffer = PriceHistoryBuffer()
        buffer.append(100.0, BASE_TIME, is_real_sample=False)

        buffer.append(110.0, BASE_TIME + timedelta(seconds=5))
        buffer.append(111.0, BASE_TIME + timedelta(seconds=10))

        assert buffer.real_data_started
        assert buffer.prices() == [110.0, 111.0]

    def test_real_data_without_placeholders_is_kept(self):
        buffer = PriceHistoryBuffer()

        for i in range(5):
            buffer.append(float(i), BASE_TIME + timedelta(seconds=i))

        assert buffer.prices() == [0.0, 1.0, 2.0, 3.0, 4.0]

    def test_placeholders_alone_do_not_start_real_data(self):
        buffer = PriceHistoryBuffer()
        buffer.append(1.0, BASE_TIME, is_real_sample=False)
        buffer.append(2.0, BASE_TIME, is_real_sample=False)

        assert not buffer.real_data_started
        assert len(buffer) == 2


class TestSnapshot:
    """Tests for read access to the buffer."""

    def test_snapshot_is_immutable(self):
        buffer = PriceHistoryBuffer()
        buffer.append(1.0, BASE_TIME)

        snapshot = buffer.snapshot()

        assert isinstance(snapshot, tuple)
        assert snapshot == (PricePoint(timestamp=BASE_TIME, price=1.0),)

    def test_snapshot_does_not_track_later_appends(self):
        buffer = PriceHistoryBuffer()
        buffer.append(1.0, BASE_TIME)
        snapshot = buffer.snapshot()

        buffer.append(2.0, BASE_TIME + timedelta(seconds=1))

        assert len(snapshot) == 1
        assert len(buffer) == 2

    def test_latest_is_none_when_empty(self):
        assert PriceHistoryBuffer().latest is None

    def test_price_points_are_frozen(self):
        point = PricePoint(timestamp=BASE_TIME, price=1.0)

        with pytest.raises(ValidationError):
            point.price = 2.0
