"""Event model - the fundamental unit of a decoded MIDI sequence.

Every decoded message becomes one immutable event variant. Each variant
carries only the fields relevant to its kind and exposes:

- ``kind``: the ``EventKind`` tag used by filters and serializers
- ``values``: up to three positional integers (raw channel message data)
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Optional, Tuple


class EventKind(str, Enum):
    """Event type tags."""

    NOTE_OFF = "noteOff"
    NOTE_ON = "noteOn"
    NOTE_AFTERTOUCH = "noteAftertouch"
    CONTROLLER = "controller"
    PROGRAM_CHANGE = "programChange"
    CHANNEL_AFTERTOUCH = "channelAftertouch"
    PITCH_BEND = "pitchBend"
    SYSEX = "sysEx"
    META = "meta"
    UNKNOWN = "unknown"


class MetaKind(str, Enum):
    """Meta event sub-types, keyed by their SMF type byte."""

    SEQUENCE_NUMBER = "sequenceNumber"
    TEXT = "text"
    COPYRIGHT_NOTICE = "copyrightNotice"
    TRACK_NAME = "trackName"
    INSTRUMENT_NAME = "instrumentName"
    LYRICS = "lyrics"
    MARKER = "marker"
    CUE_POINT = "cuePoint"
    CHANNEL_PREFIX = "channelPrefix"
    END_OF_TRACK = "endOfTrack"
    SET_TEMPO = "setTempo"
    SMPTE_OFFSET = "smpteOffset"
    TIME_SIGNATURE = "timeSignature"
    KEY_SIGNATURE = "keySignature"
    SEQUENCER_SPECIFIC = "sequencerSpecific"
    UNKNOWN = "unknown"

    @classmethod
    def from_type_byte(cls, type_byte: int) -> "MetaKind":
        return _META_TYPE_BYTES.get(type_byte, cls.UNKNOWN)


_META_TYPE_BYTES = {
    0x00: MetaKind.SEQUENCE_NUMBER,
    0x01: MetaKind.TEXT,
    0x02: MetaKind.COPYRIGHT_NOTICE,
    0x03: MetaKind.TRACK_NAME,
    0x04: MetaKind.INSTRUMENT_NAME,
    0x05: MetaKind.LYRICS,
    0x06: MetaKind.MARKER,
    0x07: MetaKind.CUE_POINT,
    0x20: MetaKind.CHANNEL_PREFIX,
    0x2F: MetaKind.END_OF_TRACK,
    0x51: MetaKind.SET_TEMPO,
    0x54: MetaKind.SMPTE_OFFSET,
    0x58: MetaKind.TIME_SIGNATURE,
    0x59: MetaKind.KEY_SIGNATURE,
    0x7F: MetaKind.SEQUENCER_SPECIFIC,
}

TEXT_META_KINDS = frozenset({
    MetaKind.TEXT,
    MetaKind.TRACK_NAME,
    MetaKind.INSTRUMENT_NAME,
    MetaKind.LYRICS,
    MetaKind.MARKER,
    MetaKind.CUE_POINT,
})


@dataclass(frozen=True)
class Event:
    """Base event: an absolute tick position within one track."""

    tick: int
    track_index: int = 0
    channel: Optional[int] = None

    kind: ClassVar[EventKind] = EventKind.UNKNOWN

    @property
    def values(self) -> Tuple[int, ...]:
        """Positional data values (empty for non-channel events)."""
        return ()


@dataclass(frozen=True)
class NoteOn(Event):
    note: int = 0
    velocity: int = 0

    kind: ClassVar[EventKind] = EventKind.NOTE_ON

    @property
    def values(self) -> Tuple[int, ...]:
        return (self.note, self.velocity)

    @property
    def is_sounding(self) -> bool:
        """False for the velocity-0 note-off alias."""
        return self.velocity > 0


@dataclass(frozen=True)
class NoteOff(Event):
    note: int = 0
    velocity: int = 0

    kind: ClassVar[EventKind] = EventKind.NOTE_OFF

    @property
    def values(self) -> Tuple[int, ...]:
        return (self.note, self.velocity)


@dataclass(frozen=True)
class NoteAftertouch(Event):
    note: int = 0
    pressure: int = 0

    kind: ClassVar[EventKind] = EventKind.NOTE_AFTERTOUCH

    @property
    def values(self) -> Tuple[int, ...]:
        return (self.note, self.pressure)


@dataclass(frozen=True)
class ControlChange(Event):
    controller: int = 0
    value: int = 0

    kind: ClassVar[EventKind] = EventKind.CONTROLLER

    @property
    def values(self) -> Tuple[int, ...]:
        return (self.controller, self.value)


@dataclass(frozen=True)
class ProgramChange(Event):
    program: int = 0

    kind: ClassVar[EventKind] = EventKind.PROGRAM_CHANGE

    @property
    def values(self) -> Tuple[int, ...]:
        return (self.program,)


@dataclass(frozen=True)
class ChannelAftertouch(Event):
    pressure: int = 0

    kind: ClassVar[EventKind] = EventKind.CHANNEL_AFTERTOUCH

    @property
    def values(self) -> Tuple[int, ...]:
        return (self.pressure,)


@dataclass(frozen=True)
class PitchBend(Event):
    """Pitch wheel change; ``lsb``/``msb`` are the raw 7-bit data bytes."""

    lsb: int = 0
    msb: int = 64

    kind: ClassVar[EventKind] = EventKind.PITCH_BEND

    @property
    def values(self) -> Tuple[int, ...]:
        return (self.lsb, self.msb)

    @property
    def bend(self) -> int:
        """Signed bend amount (-8192 to 8191, 0 = centre)."""
        return ((self.msb << 7) | self.lsb) - 8192


@dataclass(frozen=True)
class SysEx(Event):
    payload: bytes = b""

    kind: ClassVar[EventKind] = EventKind.SYSEX


@dataclass(frozen=True)
class MetaEvent(Event):
    """Meta event with its raw, undecoded payload.

    Tempo, time signature and key signature payloads are decoded by
    ``MetadataExtractor``; text-like kinds expose ``text``.
    """

    meta_kind: MetaKind = MetaKind.UNKNOWN
    payload: bytes = b""

    kind: ClassVar[EventKind] = EventKind.META

    @property
    def text(self) -> Optional[str]:
        if self.meta_kind not in TEXT_META_KINDS:
            return None
        return self.payload.decode("latin-1")


def sounding_notes(events: List[Event]) -> List[NoteOn]:
    """Note-on events with velocity > 0, in their given order."""
    return [e for e in events if isinstance(e, NoteOn) and e.is_sounding]
