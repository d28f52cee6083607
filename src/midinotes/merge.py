# src/midinotes/merge.py
from __future__ import annotations
import heapq
from dataclasses import dataclass
from typing import List, Sequence

from .events import C_MAJOR, KeySignature, KeySignatureChange, RawEvent, TimedEvent, upcast_track

@dataclass(frozen=True)
class MergedEvent:
    track: int
    key: KeySignature
    event: TimedEvent   # absolute time

    @property
    def time(self) -> int:
        return self.event.time

def to_absolute_time(track: Sequence[TimedEvent]) -> List[TimedEvent]:
    out = []
    now = 0
    for ev in track:
        now += ev.time
        out.append(TimedEvent(now, ev.event))
    return out

def prepare_track(track: Sequence[TimedEvent], tracknum: int) -> List[MergedEvent]:
    """
    Annotates each event of an absolute-time track with its track number and the
    key signature in force. Key signature events are consumed, not emitted.
    """
    out: List[MergedEvent] = []
    key = C_MAJOR
    for ev in track:
        if isinstance(ev.event, KeySignatureChange):
            key = ev.event.signature
        else:
            out.append(MergedEvent(tracknum, key, ev))
    return out

def merge_tracks(tracks: Sequence[Sequence[MergedEvent]]) -> List[MergedEvent]:
    """
    Merges prepared tracks into one list ordered by absolute tick.
    Events at the same tick come in ascending track position; within a track the
    original order is kept.
    """
    heap = [(t[0].time, ti, 0) for ti, t in enumerate(tracks) if t]
    heapq.heapify(heap)
    out: List[MergedEvent] = []
    while heap:
        _, ti, i = heapq.heappop(heap)
        track = tracks[ti]
        out.append(track[i])
        i += 1
        if i < len(track):
            heapq.heappush(heap, (track[i].time, ti, i))
    return out

def merged_events(raw_tracks: Sequence[Sequence[RawEvent]]) -> List[MergedEvent]:
    """raw tracks -> upcast -> absolute time -> prepared -> merged"""
    prepared = [
        prepare_track(to_absolute_time(upcast_track(list(track))), i)
        for i, track in enumerate(raw_tracks)
    ]
    return merge_tracks(prepared)
