# src/midinotes/events.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple, Union

# --- raw events, as handed over by the decoder ---

@dataclass(frozen=True)
class ChannelEvent:
    delta: int
    status: int
    data: Tuple[int, ...]

@dataclass(frozen=True)
class MetaEvent:
    delta: int
    metatype: int
    data: bytes

@dataclass(frozen=True)
class SysExEvent:
    delta: int
    data: bytes

RawEvent = Union[ChannelEvent, MetaEvent, SysExEvent]

META_TEMPO = 0x51
META_TIME_SIGNATURE = 0x58
META_KEY_SIGNATURE = 0x59

# --- signatures ---

@dataclass(frozen=True)
class KeySignature:
    sharps: int = 0      # negative = flats
    major: bool = True

@dataclass(frozen=True)
class TimeSignature:
    numerator: int = 4
    denominator: int = 4

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"

C_MAJOR = KeySignature(0, True)
FOUR_FOUR = TimeSignature(4, 4)

# --- typed events ---

@dataclass(frozen=True)
class NoteOn:
    channel: int
    pitch: int
    velocity: int

@dataclass(frozen=True)
class NoteOff:
    channel: int
    pitch: int
    velocity: int

@dataclass(frozen=True)
class TempoChange:
    micros_per_quarter: int

@dataclass(frozen=True)
class TimeSignatureChange:
    signature: TimeSignature
    metronome_ticks: int
    beat_subdivision: int   # notated 32nd notes per beat

@dataclass(frozen=True)
class KeySignatureChange:
    signature: KeySignature

@dataclass(frozen=True)
class Opaque:
    raw: RawEvent

TypedEvent = Union[NoteOn, NoteOff, TempoChange, TimeSignatureChange, KeySignatureChange, Opaque]

@dataclass(frozen=True)
class TimedEvent:
    time: int           # tick delta, or absolute tick after to_absolute_time()
    event: TypedEvent

# --- upcasting ---

def _signed_byte(b: int) -> int:
    return b - 256 if b > 127 else b

def _channel_event(raw: ChannelEvent) -> TypedEvent:
    kind = raw.status & 0xF0
    channel = raw.status & 0x0F
    if kind == 0x80:
        return NoteOff(channel, raw.data[0], raw.data[1])
    if kind == 0x90:
        # note on with velocity 0 is a note off
        if raw.data[1] == 0:
            return NoteOff(channel, raw.data[0], 0)
        return NoteOn(channel, raw.data[0], raw.data[1])
    return Opaque(raw)

def _meta_event(raw: MetaEvent) -> TypedEvent:
    d = raw.data
    if raw.metatype == META_TEMPO:
        return TempoChange(int.from_bytes(bytes(d[:3]), "big"))
    if raw.metatype == META_TIME_SIGNATURE:
        return TimeSignatureChange(TimeSignature(d[0], 2 ** d[1]), d[2], d[3])
    if raw.metatype == META_KEY_SIGNATURE:
        return KeySignatureChange(KeySignature(_signed_byte(d[0]), d[1] == 0))
    return Opaque(raw)

def upcast(raw: RawEvent) -> TimedEvent:
    """Raw event -> TimedEvent with a semantic event type; unknown events stay Opaque."""
    if isinstance(raw, ChannelEvent):
        inner = _channel_event(raw)
    elif isinstance(raw, MetaEvent):
        inner = _meta_event(raw)
    else:
        inner = Opaque(raw)
    return TimedEvent(raw.delta, inner)

def upcast_track(track: List[RawEvent]) -> List[TimedEvent]:
    return [upcast(ev) for ev in track]
