# src/midinotes/timediv.py
from __future__ import annotations
from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple, Union

DEFAULT_TEMPO = 500_000  # µs per quarter, 120 qpm

@dataclass(frozen=True)
class PulsesPerQuarter:
    ppq: int

@dataclass(frozen=True)
class TicksPerSecond:
    tps: int

    @classmethod
    def from_smpte(cls, fps: int, tpf: int) -> "TicksPerSecond":
        # "29" in the header means drop-frame 29.97
        rate = 29.97 if fps == 29 else fps
        return cls(int(round(tpf * rate)))

TimeDivision = Union[PulsesPerQuarter, TicksPerSecond]

def time_ratios(division: TimeDivision, micros_per_quarter: int) -> Tuple[Fraction, float]:
    """
    Returns (whole notes per tick, seconds per tick) for a tempo in µs per quarter.
    Quarter based units are converted to whole notes.
    """
    if isinstance(division, PulsesPerQuarter):
        return (Fraction(1, 4 * division.ppq),
                micros_per_quarter / (1_000_000.0 * division.ppq))
    if isinstance(division, TicksPerSecond):
        return (Fraction(250_000, division.tps * micros_per_quarter),
                1.0 / division.tps)
    raise TypeError(f"not a time division: {division!r}")

def division_from_word(word: int) -> TimeDivision:
    """
    Interprets the 16 bit division field of a MIDI file header.
    mido reads the field as a signed short, so negative words are SMPTE too.
    """
    word &= 0xFFFF
    if word & 0x8000:
        fps = 256 - (word >> 8)   # high byte is a negative frame rate
        tpf = word & 0xFF
        return TicksPerSecond.from_smpte(fps, tpf)
    return PulsesPerQuarter(int(word))
