# src/midinotes/notes.py
from __future__ import annotations
import logging
from collections import deque
from dataclasses import astuple, asdict, dataclass
from fractions import Fraction
from typing import Any, Deque, Dict, Iterable, List, Tuple

from .config import check_orphans, check_overlaps
from .decode import Source, event_list
from .events import KeySignature, NoteOff, NoteOn, TempoChange
from .merge import MergedEvent
from .tempo import TempoCurve
from .timediv import TimeDivision

logger = logging.getLogger(__name__)

NOTE_COLUMNS = (
    "onset_ticks", "offset_ticks",
    "onset_duration", "offset_duration",
    "onset_seconds", "offset_seconds",
    "pitch", "velocity", "track", "channel",
    "key_sharps", "key_major",
)

@dataclass(frozen=True)
class NoteRecord:
    onset_ticks: int
    offset_ticks: int
    onset_duration: Fraction
    offset_duration: Fraction
    onset_seconds: float
    offset_seconds: float
    pitch: int
    velocity: int
    track: int
    channel: int
    key_sharps: int
    key_major: bool

    def as_row(self) -> Tuple[Any, ...]:
        return astuple(self)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass(frozen=True)
class PendingNote:
    ticks: int
    wholes: Fraction
    seconds: float
    velocity: int
    key: KeySignature

NoteKey = Tuple[int, int, int]  # (track, channel, pitch)

def match_notes(
    events: Iterable[MergedEvent],
    division: TimeDivision,
    overlaps: str = "queue",
    warnings: bool = False,
) -> List[NoteRecord]:
    """
    Pairs note-on and note-off events per (track, channel, pitch).

    Overlapping ons of the same key are matched first-on/first-off ("queue")
    or first-on/last-off ("stack"). Offs without a pending on and ons that are
    never switched off are dropped.
    """
    check_overlaps(overlaps)
    take = deque.popleft if overlaps == "queue" else deque.pop

    curve = TempoCurve.initial(division)
    ons: Dict[NoteKey, Deque[PendingNote]] = {}
    out: List[NoteRecord] = []

    for mev in events:
        ev = mev.event.event
        now = mev.event.time

        if isinstance(ev, TempoChange):
            curve = curve.retempo(now, ev.micros_per_quarter)
        elif isinstance(ev, NoteOn):
            pos = curve.position(now)
            notek = (mev.track, ev.channel, ev.pitch)
            pending = ons.setdefault(notek, deque())
            if warnings and pending:
                logger.warning("note is already on: track=%d channel=%d pitch=%d", *notek)
            pending.append(PendingNote(pos.ticks, pos.wholes, pos.seconds, ev.velocity, mev.key))
        elif isinstance(ev, NoteOff):
            notek = (mev.track, ev.channel, ev.pitch)
            pending = ons.get(notek)
            if not pending:
                if warnings:
                    logger.warning("orphan note-off: track=%d channel=%d pitch=%d tick=%d", *notek, now)
                continue
            on = take(pending)
            if not pending:
                del ons[notek]
            pos = curve.position(now)
            out.append(NoteRecord(
                onset_ticks=on.ticks, offset_ticks=pos.ticks,
                onset_duration=on.wholes, offset_duration=pos.wholes,
                onset_seconds=on.seconds, offset_seconds=pos.seconds,
                pitch=ev.pitch, velocity=on.velocity,
                track=mev.track, channel=ev.channel,
                key_sharps=on.key.sharps, key_major=on.key.major,
            ))

    if warnings and ons:
        for notek, pending in ons.items():
            logger.warning("orphan note-on (%d pending): track=%d channel=%d pitch=%d", len(pending), *notek)

    # stable: ties keep match order
    out.sort(key=lambda n: (n.onset_ticks, n.track, n.channel))
    return out

def midifile_notes(
    source: Source,
    overlaps: str = "queue",
    warnings: bool = False,
    orphans: str = "skip",
) -> List[NoteRecord]:
    """
    Reads a MIDI file (path or mido.MidiFile) and returns one NoteRecord per note,
    on- and offsets in ticks, whole notes and seconds.
    """
    check_overlaps(overlaps)
    check_orphans(orphans)
    division, events = event_list(source)
    return match_notes(events, division, overlaps=overlaps, warnings=warnings)
