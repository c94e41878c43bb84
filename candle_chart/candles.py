"""Per-period candle aggregation and ordered candle collections."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple


class EmptyInputError(ValueError):
    """Raised when a period carries no price samples."""


@dataclass(frozen=True)
class Candle:
    """Open/close/low/high summary of one period.

    ``position`` is the candle's coordinate along the time axis.
    """

    position: float
    open: float
    close: float
    low: float
    high: float

    @property
    def down(self) -> bool:
        """True when the period closed below its open; equal prices count as up."""

        return self.open > self.close

    @property
    def body_low(self) -> float:
        return min(self.open, self.close)

    @property
    def body_high(self) -> float:
        return max(self.open, self.close)


def new_candle(position: float, samples: Sequence[float]) -> Candle:
    """Reduce one period's price samples into a :class:`Candle`."""

    if len(samples) == 0:
        raise EmptyInputError("Period has no samples; at least one price is required.")

    low = high = float(samples[0])
    for sample in samples:
        low = min(low, float(sample))
        high = max(high, float(sample))

    return Candle(
        position=float(position),
        open=float(samples[0]),
        close=float(samples[-1]),
        low=low,
        high=high,
    )


class CandleCollection:
    """Ordered candles plus the global price extremes used for axis scaling."""

    def __init__(self, candles: Sequence[Candle]):
        if len(candles) == 0:
            raise EmptyInputError("A candle collection needs at least one candle.")
        self._candles: Tuple[Candle, ...] = tuple(candles)
        self.global_low, self.global_high = self._extremes(self._candles)

    @classmethod
    def build(cls, periods: Sequence[Sequence[float]]) -> "CandleCollection":
        """Build one candle per period; period ``i`` sits at position ``float(i)``."""

        return cls([new_candle(float(i), samples) for i, samples in enumerate(periods)])

    @staticmethod
    def _extremes(candles: Sequence[Candle]) -> Tuple[float, float]:
        low = candles[0].low
        high = candles[0].high
        for candle in candles:
            if candle.low < low:
                low = candle.low
            if candle.high > high:
                high = candle.high
        return low, high

    @property
    def candles(self) -> Tuple[Candle, ...]:
        return self._candles

    def __len__(self) -> int:
        return len(self._candles)

    def __iter__(self) -> Iterator[Candle]:
        return iter(self._candles)

    def __getitem__(self, index: int) -> Candle:
        return self._candles[index]
