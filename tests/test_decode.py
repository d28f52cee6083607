import mido
import pytest

from conftest import build_midi, on, tempo
from midinotes.decode import event_list, load_midifile, raw_tracks, time_division
from midinotes.events import ChannelEvent, MetaEvent
from midinotes.timediv import PulsesPerQuarter, TicksPerSecond


def test_load_accepts_path_or_midifile(tmp_path, example_midi):
    assert load_midifile(example_midi) is example_midi
    path = tmp_path / "x.mid"
    example_midi.save(str(path))
    assert isinstance(load_midifile(path), mido.MidiFile)
    assert isinstance(load_midifile(str(path)), mido.MidiFile)


def test_time_division():
    assert time_division(mido.MidiFile(ticks_per_beat=96)) == PulsesPerQuarter(96)
    # header word 0xE728: -25 fps, 40 ticks per frame
    assert time_division(mido.MidiFile(ticks_per_beat=0xE728 - 0x10000)) == TicksPerSecond(1000)


def test_raw_tracks_keep_deltas():
    mid = build_midi([[(0, tempo(400_000)), (30, on(4, 50))]])
    assert raw_tracks(mid) == [[
        MetaEvent(0, 0x51, (400_000).to_bytes(3, "big")),
        ChannelEvent(30, 0x94, (50, 80)),
    ]]


def test_event_list(example_midi):
    division, events = event_list(example_midi)
    assert division == PulsesPerQuarter(480)
    assert [e.time for e in events] == [0, 0, 480, 960, 1920, 3360]


def test_bad_key_signature_rejects_the_file(tmp_path):
    header = b"MThd" + (6).to_bytes(4, "big") + bytes([0, 0, 0, 1, 0x01, 0xE0])
    events = bytes([0x00, 0xFF, 0x59, 0x02, 0x08, 0x00,   # 8 sharps
                    0x00, 0xFF, 0x2F, 0x00])
    path = tmp_path / "badkey.mid"
    path.write_bytes(header + b"MTrk" + len(events).to_bytes(4, "big") + events)
    with pytest.raises(mido.KeySignatureError, match="Could not decode key"):
        event_list(path)
