"""Bounded in-memory price history."""

from collections import deque
from datetime import datetime

from idxwatch.models import PricePoint


DEFAULT_CAPACITY = 30


class PriceHistoryBuffer:
    """Chronological, fixed-capacity series of price samples.

    The buffer may be seeded with placeholder samples so a chart shell can
    be drawn before any genuine quote has been observed. The first real
    sample discards the placeholders; after that the buffer behaves as a
    plain FIFO window of the last ``capacity`` samples.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """Initialize an empty buffer.

        Args:
            capacity: Maximum number of samples kept.
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._points: deque[PricePoint] = deque(maxlen=capacity)
        self._real_data_started = False

    @property
    def real_data_started(self) -> bool:
        """Whether a real sample has been appended yet."""
        return self._real_data_started

    def append(self, price: float, at: datetime, is_real_sample: bool = True) -> None:
        """Append a sample, evicting the oldest beyond capacity.

        Args:
            price: Sample price.
            at: Sample timestamp.
            is_real_sample: False for synthetic placeholder samples.
        """
        if is_real_sample and not self._real_data_started:
            # Placeholders never survive the first real observation.
            self._points.clear()
            self._real_data_started = True

        self._points.append(PricePoint(timestamp=at, price=price))

    def snapshot(self) -> tuple[PricePoint, ...]:
        """Return the samples oldest first."""
        return tuple(self._points)

    def prices(self) -> list[float]:
        """Return just the prices, oldest first."""
        return [point.price for point in self._points]

    @property
    def latest(self) -> PricePoint | None:
        return self._points[-1] if self._points else None

    def __len__(self) -> int:
        return len(self._points)
