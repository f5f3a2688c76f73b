"""Helpers for building event lists and MIDI files in tests."""

import struct

import mido

from midi_analyzer.core import MetaEvent, MetaKind, NoteOn


def tempo_event(tick: int, bpm: float, track_index: int = 0) -> MetaEvent:
    """Set-tempo meta event with a 3-byte payload."""
    us = int(round(60_000_000 / bpm))
    return MetaEvent(
        tick=tick,
        track_index=track_index,
        meta_kind=MetaKind.SET_TEMPO,
        payload=us.to_bytes(3, "big"),
    )


def chord_events(notes, tick: int, channel: int = 0, velocity: int = 80, spread: int = 0):
    """Note-ons for a chord, optionally staggered by ``spread`` ticks each."""
    return [
        NoteOn(tick=tick + i * spread, channel=channel, note=n, velocity=velocity)
        for i, n in enumerate(notes)
    ]


def write_midi(path, tracks, ticks_per_beat: int = 480, file_type: int = 1):
    """Write a MIDI file from lists of (delta, mido message) tracks."""
    mid = mido.MidiFile(type=file_type, ticks_per_beat=ticks_per_beat)
    for messages in tracks:
        track = mido.MidiTrack()
        track.extend(messages)
        mid.tracks.append(track)
    mid.save(str(path))
    return path


def block_chord_messages(chords, beat: int = 480, channel: int = 0):
    """mido messages playing each chord for one beat, back to back."""
    messages = []
    for notes in chords:
        for n in notes:
            messages.append(mido.Message("note_on", note=n, velocity=90, channel=channel, time=0))
        for i, n in enumerate(notes):
            messages.append(mido.Message(
                "note_off", note=n, velocity=0, channel=channel, time=beat if i == 0 else 0
            ))
    messages.append(mido.MetaMessage("end_of_track", time=0))
    return messages


END_OF_TRACK = b"\x00\xff\x2f\x00"


def write_raw_midi(path, track_bodies, division: int = 480, file_type: int = 1):
    """Write an SMF from raw MTrk bodies, bypassing mido's encoder."""
    data = b"MThd" + struct.pack(">LHHh", 6, file_type, len(track_bodies), division)
    for body in track_bodies:
        data += b"MTrk" + struct.pack(">L", len(body)) + body
    path.write_bytes(data)
    return path
