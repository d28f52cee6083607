# src/midinotes/timesigs.py
from __future__ import annotations
from bisect import bisect_right
from fractions import Fraction
from typing import Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar, Union

from .config import check_unit, parse_upbeat
from .decode import Source, event_list
from .events import FOUR_FOUR, TempoChange, TimeSignature, TimeSignatureChange
from .merge import MergedEvent
from .tempo import TempoCurve
from .timediv import TimeDivision

T = TypeVar("T", int, Fraction, float)

_ZERO = {"ticks": 0, "wholes": Fraction(0), "seconds": 0.0}

class TimeSigMap(Generic[T]):
    """
    Partition of the timeline into half-open intervals [points[i], points[i+1]),
    each labelled with signatures[i]. Always len(points) == len(signatures) + 1.
    """

    def __init__(self, points: List[T], signatures: Optional[List[TimeSignature]] = None):
        self.points: List[T] = list(points)
        self.signatures: List[TimeSignature] = list(signatures or [])
        if len(self.points) != len(self.signatures) + 1:
            raise ValueError("a time signature map needs one more point than signatures")
        if any(a >= b for a, b in zip(self.points, self.points[1:])):
            raise ValueError(f"points must be strictly increasing: {self.points}")

    @property
    def onset(self) -> T:
        return self.points[0]

    @property
    def offset(self) -> T:
        return self.points[-1]

    def split(self, at: T, signature: TimeSignature) -> None:
        """Closes the open end at `at`, labelling the new interval with `signature`."""
        if not at > self.offset:
            raise ValueError(f"cannot close interval at {at}: map already ends at {self.offset}")
        self.points.append(at)
        self.signatures.append(signature)

    def shift_point(self, index: int, by: T) -> None:
        moved = self.points[index] + by
        if index > 0 and not moved > self.points[index - 1]:
            raise ValueError(f"moving point {index} to {moved} breaks the order")
        if index < len(self.points) - 1 and not moved < self.points[index + 1]:
            raise ValueError(f"moving point {index} to {moved} breaks the order")
        self.points[index] = moved

    def signature_at(self, x: T) -> Optional[TimeSignature]:
        if not self.signatures or x < self.onset or x >= self.offset:
            return None
        return self.signatures[bisect_right(self.points, x) - 1]

    def intervals(self) -> Iterator[Tuple[T, T, TimeSignature]]:
        for i, sig in enumerate(self.signatures):
            yield self.points[i], self.points[i + 1], sig

    def __iter__(self) -> Iterator[Tuple[T, TimeSignature]]:
        return iter(zip(self.points, self.signatures))

    def __len__(self) -> int:
        return len(self.signatures)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TimeSigMap):
            return NotImplemented
        return self.points == other.points and self.signatures == other.signatures

    def __repr__(self) -> str:
        sigs = ", ".join(str(s) for s in self.signatures)
        return f"TimeSigMap(points={self.points!r}, signatures=[{sigs}])"

def build_timesig_map(
    events: Iterable[MergedEvent],
    division: TimeDivision,
    unit: str = "wholes",
    upbeat: Union[int, float, Fraction, str] = 0,
) -> TimeSigMap:
    """
    Collects the time signatures of a merged event list into a TimeSigMap in
    `unit` (ticks, wholes or seconds).

    The first point is moved from 0 to -upbeat, so that 0 is the first "1"
    and the pick-up lies before it. For metrical analysis the pick-up can be
    assumed to have the meter of the first full bar.
    """
    check_unit(unit)
    shift = parse_upbeat(upbeat, unit)

    curve = TempoCurve.initial(division)
    pos = curve.position(0)
    timesigs = TimeSigMap([_ZERO[unit]])
    current = FOUR_FOUR  # MIDI default

    for mev in events:
        now = mev.event.time
        ev = mev.event.event
        pos = curve.position(now)

        if isinstance(ev, TempoChange):
            curve = curve.retempo(now, ev.micros_per_quarter)
        elif isinstance(ev, TimeSignatureChange):
            # a change at 0 only sets the first signature
            if now > 0 and pos.in_unit(unit) > timesigs.offset:
                timesigs.split(pos.in_unit(unit), current)
            current = ev.signature

    # close the last interval
    if pos.in_unit(unit) > timesigs.offset:
        timesigs.split(pos.in_unit(unit), current)

    if shift:
        timesigs.shift_point(0, -shift)
    return timesigs

def midifile_timesigs(
    source: Source,
    unit: str = "wholes",
    upbeat: Union[int, float, Fraction, str] = 0,
) -> TimeSigMap:
    """Reads a MIDI file (path or mido.MidiFile) and returns its TimeSigMap in `unit`."""
    check_unit(unit)
    parse_upbeat(upbeat, unit)
    division, events = event_list(source)
    return build_timesig_map(events, division, unit=unit, upbeat=upbeat)
