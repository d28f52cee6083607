import mido
import pytest

from midinotes.events import ChannelEvent, MetaEvent


def build_midi(tracks, ticks_per_beat=480):
    """
    tracks: list of lists of (absolute_tick, mido message) -> in-memory MidiFile
    with delta times, as mido would have read it from disk.
    """
    mid = mido.MidiFile(ticks_per_beat=ticks_per_beat)
    for events in tracks:
        tr = mido.MidiTrack()
        last = 0
        for tick, msg in events:
            tr.append(msg.copy(time=tick - last))
            last = tick
        mid.tracks.append(tr)
    return mid


def on(ch, pitch, vel=80):
    return mido.Message("note_on", channel=ch, note=pitch, velocity=vel)


def off(ch, pitch, vel=0):
    return mido.Message("note_off", channel=ch, note=pitch, velocity=vel)


def tempo(us):
    return mido.MetaMessage("set_tempo", tempo=us)


def timesig(num, den):
    return mido.MetaMessage("time_signature", numerator=num, denominator=den)


def keysig(key):
    return mido.MetaMessage("key_signature", key=key)


def eot():
    return mido.MetaMessage("end_of_track")


def raw_on(delta, ch, pitch, vel=80):
    return ChannelEvent(delta, 0x90 | ch, (pitch, vel))


def raw_off(delta, ch, pitch, vel=0):
    return ChannelEvent(delta, 0x80 | ch, (pitch, vel))


def raw_tempo(delta, us):
    return MetaEvent(delta, 0x51, us.to_bytes(3, "big"))


def raw_timesig(delta, num, power, metro=24, n32=8):
    return MetaEvent(delta, 0x58, bytes([num, power, metro, n32]))


def raw_keysig(delta, sharps, minor=0):
    return MetaEvent(delta, 0x59, bytes([sharps & 0xFF, minor]))


@pytest.fixture
def example_midi():
    """
    480 ppq, tempo 120 at 0, 4/4 at 0, C4 from 480 to 960, 3/4 at 1920,
    end of track at 3360.
    """
    return build_midi([[
        (0, tempo(500_000)),
        (0, timesig(4, 4)),
        (480, on(0, 60, 80)),
        (960, on(0, 60, 0)),
        (1920, timesig(3, 4)),
        (3360, eot()),
    ]])
