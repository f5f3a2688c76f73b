"""MIDI file loading - decode Standard MIDI Files into the event model."""

import warnings
import mido
from pathlib import Path
from typing import List, Optional

from ..core import (
    ChannelAftertouch,
    ControlChange,
    MetaEvent,
    MetaKind,
    MidiSequence,
    NoteAftertouch,
    NoteOff,
    NoteOn,
    PitchBend,
    ProgramChange,
    SysEx,
)
from ..core.constants import DEFAULT_PPQ, MIDI_EXTENSIONS
from ..core.event import Event
from .smf import RawMeta, SmfReader


class MidiLoadError(RuntimeError):
    """Raised when a MIDI file cannot be decoded."""


class MidiLoader:
    """Handles MIDI file loading and conversion to ``MidiSequence``."""

    SUPPORTED_FORMATS = MIDI_EXTENSIONS

    def __init__(self, default_ppq: int = DEFAULT_PPQ):
        """
        Initialize MidiLoader.

        Args:
            default_ppq: Resolution used when a file declares a non-positive one
        """
        self.default_ppq = default_ppq

    def load(self, path: str) -> MidiSequence:
        """
        Load and decode a MIDI file.

        Args:
            path: Path to MIDI file

        Returns:
            MidiSequence with absolute ticks

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format not supported
            MidiLoadError: If the file cannot be decoded
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.SUPPORTED_FORMATS)}"
            )

        try:
            smf = SmfReader(path.read_bytes()).read()
        except Exception as e:
            raise MidiLoadError(f"Failed to parse MIDI file: {e}") from e

        return self._to_sequence(smf.format, smf.ppq, smf.tracks)

    def from_midi_file(self, midi_file: mido.MidiFile) -> MidiSequence:
        """Convert an in-memory ``mido.MidiFile``."""
        return self._to_sequence(midi_file.type, midi_file.ticks_per_beat, midi_file.tracks)

    def _to_sequence(self, file_format: int, ppq: int, tracks) -> MidiSequence:
        if not ppq or ppq <= 0:
            warnings.warn(
                f"Invalid resolution {ppq} ticks per beat, using {self.default_ppq}"
            )
            ppq = self.default_ppq

        return MidiSequence(
            format=file_format,
            ppq=ppq,
            tracks=[self.convert_track(track, index) for index, track in enumerate(tracks)],
        )

    def convert_track(self, track, index: int = 0) -> List[Event]:
        """Convert one track, summing delta times into absolute ticks."""
        events = []
        tick = 0
        for msg in track:
            tick += msg.time
            event = self.convert_message(msg, tick, index)
            if event is not None:
                events.append(event)
        return events

    def convert_message(self, msg, tick: int, track_index: int = 0) -> Optional[Event]:
        """
        Convert a single track record.

        Args:
            msg: RawMeta record, or mido Message or MetaMessage
            tick: Absolute tick of the message
            track_index: Index of the owning track

        Returns:
            Event variant, or None for messages with no SMF representation
        """
        if isinstance(msg, RawMeta):
            return MetaEvent(
                tick=tick,
                track_index=track_index,
                meta_kind=MetaKind.from_type_byte(msg.type_byte),
                payload=msg.payload,
            )

        if msg.is_meta:
            # In-memory mido meta messages are well formed; re-encode them
            return MetaEvent(
                tick=tick,
                track_index=track_index,
                meta_kind=MetaKind.from_type_byte(self._meta_type_byte(msg)),
                payload=self._meta_payload(msg),
            )

        if msg.type == "sysex":
            return SysEx(tick=tick, track_index=track_index, payload=bytes(msg.data))

        common = dict(tick=tick, track_index=track_index, channel=getattr(msg, "channel", None))
        if msg.type == "note_on":
            return NoteOn(note=msg.note, velocity=msg.velocity, **common)
        if msg.type == "note_off":
            return NoteOff(note=msg.note, velocity=msg.velocity, **common)
        if msg.type == "polytouch":
            return NoteAftertouch(note=msg.note, pressure=msg.value, **common)
        if msg.type == "control_change":
            return ControlChange(controller=msg.control, value=msg.value, **common)
        if msg.type == "program_change":
            return ProgramChange(program=msg.program, **common)
        if msg.type == "aftertouch":
            return ChannelAftertouch(pressure=msg.value, **common)
        if msg.type == "pitchwheel":
            _, lsb, msb = msg.bytes()
            return PitchBend(lsb=lsb, msb=msb, **common)

        # Realtime/system common messages cannot appear in SMF tracks
        return None

    @staticmethod
    def _meta_type_byte(msg) -> int:
        return msg.bytes()[1]

    @staticmethod
    def _meta_payload(msg) -> bytes:
        """Raw payload of a meta message (after type byte and length)."""
        raw = msg.bytes()
        # raw = [0xFF, type, <variable-length size>, payload...]
        pos = 2
        while raw[pos] & 0x80:
            pos += 1
        return bytes(raw[pos + 1:])
