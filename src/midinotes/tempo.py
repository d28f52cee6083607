# src/midinotes/tempo.py
from __future__ import annotations
from dataclasses import dataclass
from fractions import Fraction
from typing import Union

from .timediv import DEFAULT_TEMPO, TimeDivision, time_ratios

Number = Union[Fraction, float]

@dataclass(frozen=True)
class Segment:
    """
    One piece of the tick -> time mapping: y = offset + slope * ticks.
    Fractions stay exact (and reduced), floats stay floats.
    """
    offset: Number
    slope: Number

    def at(self, ticks: int) -> Number:
        return self.offset + self.slope * ticks

    def reanchor(self, ticks: int, slope: Number) -> "Segment":
        # keep the curve continuous at `ticks`: offset = y - slope * ticks
        return Segment(self.at(ticks) - slope * ticks, slope)

@dataclass(frozen=True)
class Position:
    ticks: int
    wholes: Fraction
    seconds: float

    def in_unit(self, unit: str):
        return getattr(self, unit)

@dataclass(frozen=True)
class TempoCurve:
    division: TimeDivision
    wholes: Segment
    seconds: Segment

    @classmethod
    def initial(cls, division: TimeDivision, micros_per_quarter: int = DEFAULT_TEMPO) -> "TempoCurve":
        w, s = time_ratios(division, micros_per_quarter)
        return cls(division, Segment(Fraction(0), w), Segment(0.0, s))

    def position(self, ticks: int) -> Position:
        return Position(ticks, self.wholes.at(ticks), self.seconds.at(ticks))

    def retempo(self, ticks: int, micros_per_quarter: int) -> "TempoCurve":
        """New curve for a tempo change at `ticks`; both units stay continuous there."""
        w, s = time_ratios(self.division, micros_per_quarter)
        return TempoCurve(self.division,
                          self.wholes.reanchor(ticks, w),
                          self.seconds.reanchor(ticks, s))
