# src/midinotes/decode.py
"""
Adapter between mido and the event model: mido does the binary decoding,
this module only reshapes its messages into raw events.
"""
from __future__ import annotations
from pathlib import Path
from typing import List, Tuple, Union

import mido

from .events import ChannelEvent, MetaEvent, RawEvent, SysExEvent
from .merge import MergedEvent, merged_events
from .timediv import TimeDivision, division_from_word

Source = Union[str, Path, mido.MidiFile]

def load_midifile(source: Source) -> mido.MidiFile:
    """
    Opens a path with mido; MidiFile objects pass through.
    mido's decoding errors propagate: e.g. a single key signature outside
    -7..7 sharps raises KeySignatureError and rejects the whole file.
    """
    if isinstance(source, mido.MidiFile):
        return source
    return mido.MidiFile(str(Path(source).expanduser()))

def time_division(midifile: mido.MidiFile) -> TimeDivision:
    return division_from_word(int(midifile.ticks_per_beat))

def _skip_varlen(data: List[int], i: int) -> int:
    while data[i] & 0x80:
        i += 1
    return i + 1

def raw_event(msg) -> RawEvent:
    """mido message (delta time in ticks) -> raw event"""
    delta = int(msg.time)
    data = msg.bytes()
    if msg.is_meta:
        # 0xFF, type, varlen length, payload
        start = _skip_varlen(data, 2)
        return MetaEvent(delta, data[1], bytes(b & 0xFF for b in data[start:]))
    if msg.type == "sysex":
        return SysExEvent(delta, bytes(data))
    return ChannelEvent(delta, data[0], tuple(data[1:]))

def raw_tracks(midifile: mido.MidiFile) -> List[List[RawEvent]]:
    return [[raw_event(msg) for msg in track] for track in midifile.tracks]

def event_list(source: Source) -> Tuple[TimeDivision, List[MergedEvent]]:
    """Reads a file and returns its time division and the merged event list."""
    midifile = load_midifile(source)
    return time_division(midifile), merged_events(raw_tracks(midifile))
