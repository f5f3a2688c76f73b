"""Core types and constants for MIDI Analyzer."""

from .event import (
    Event,
    EventKind,
    MetaKind,
    NoteOn,
    NoteOff,
    NoteAftertouch,
    ControlChange,
    ProgramChange,
    ChannelAftertouch,
    PitchBend,
    SysEx,
    MetaEvent,
    sounding_notes,
)
from .sequence import MidiSequence, merge_tracks
from .constants import (
    PITCH_NAMES,
    DEFAULT_PPQ,
    DEFAULT_TEMPO_US,
    DEFAULT_GROUPING_THRESHOLD_MS,
)

__all__ = [
    "Event",
    "EventKind",
    "MetaKind",
    "NoteOn",
    "NoteOff",
    "NoteAftertouch",
    "ControlChange",
    "ProgramChange",
    "ChannelAftertouch",
    "PitchBend",
    "SysEx",
    "MetaEvent",
    "sounding_notes",
    "MidiSequence",
    "merge_tracks",
    "PITCH_NAMES",
    "DEFAULT_PPQ",
    "DEFAULT_TEMPO_US",
    "DEFAULT_GROUPING_THRESHOLD_MS",
]
