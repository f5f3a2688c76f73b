"""Metadata extraction - tempo, meter and key maps from a sequence.

A single linear scan over the merged event list collects:
- Tempo markers (set tempo meta, 3-byte payload)
- Time signature markers (4-byte payload)
- Key signature markers (2-byte payload)
- Aggregate counts (total ticks, total events)
"""

import warnings
from dataclasses import dataclass, field
from typing import List

from ..core import MetaEvent, MetaKind, MidiSequence, PITCH_NAMES
from ..core.constants import DEFAULT_TEMPO_US, DEFAULT_TIME_SIGNATURE_BYTES
from ..core.event import Event

# Tonic pitch class for each sharps/flats count, from -7 (7 flats) to 7
_MAJOR_TONICS = [11, 6, 1, 8, 3, 10, 5, 0, 7, 2, 9, 4, 11, 6, 1]
_FLAT_NAMES = {1: "Db", 3: "Eb", 6: "Gb", 8: "Ab", 10: "Bb", 11: "Cb"}


@dataclass(frozen=True)
class TempoMarker:
    """Tempo change at an absolute tick."""

    tick: int
    microseconds_per_quarter: int

    @property
    def bpm(self) -> float:
        """Beats per minute, rounded to 2 decimals."""
        return round(60_000_000 / self.microseconds_per_quarter, 2)


@dataclass(frozen=True)
class TimeSignatureMarker:
    """Time signature change at an absolute tick."""

    tick: int
    numerator: int
    denominator: int
    clocks_per_click: int = 24
    notated_32nds_per_quarter: int = 8

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


@dataclass(frozen=True)
class KeySignatureMarker:
    """Key signature change at an absolute tick.

    ``sharps_flats`` is positive for sharps, negative for flats.
    """

    tick: int
    sharps_flats: int
    major: bool = True

    @property
    def name(self) -> str:
        """Key name (e.g., 'D major', 'B minor', 'Eb major')."""
        if not -7 <= self.sharps_flats <= 7:
            return "unknown"
        tonic = _MAJOR_TONICS[self.sharps_flats + 7]
        mode = "major"
        if not self.major:
            tonic = (tonic + 9) % 12
            mode = "minor"
        if self.sharps_flats < 0 and tonic in _FLAT_NAMES:
            root = _FLAT_NAMES[tonic]
        else:
            root = PITCH_NAMES[tonic]
        return f"{root} {mode}"


@dataclass
class SequenceMetadata:
    """Container for metadata extraction results."""

    tempo: List[TempoMarker] = field(default_factory=list)
    time_signature: List[TimeSignatureMarker] = field(default_factory=list)
    key_signature: List[KeySignatureMarker] = field(default_factory=list)
    total_ticks: int = 0
    total_events: int = 0

    def tempo_map(self, default_us: int = DEFAULT_TEMPO_US) -> List[TempoMarker]:
        """Tempo markers, never empty (falls back to a marker at tick 0)."""
        return ensure_tempo_map(self.tempo, default_us)


@dataclass
class MidiSummary:
    """File-level summary."""

    format: int
    ppq: int
    total_ticks: int
    track_count: int
    total_events: int
    tempo_info: List[TempoMarker] = field(default_factory=list)
    time_signature: List[TimeSignatureMarker] = field(default_factory=list)
    key_signature: List[KeySignatureMarker] = field(default_factory=list)


def ensure_tempo_map(
    markers: List[TempoMarker],
    default_us: int = DEFAULT_TEMPO_US,
) -> List[TempoMarker]:
    """Return a consultable tempo map.

    An empty map becomes a single default marker at tick 0. When the first
    marker sits after tick 0, the default tempo is prepended to cover the
    ticks before it.
    """
    ordered = sorted(markers, key=lambda m: m.tick)
    if not ordered or ordered[0].tick > 0:
        ordered.insert(0, TempoMarker(tick=0, microseconds_per_quarter=default_us))
    return ordered


class MetadataExtractor:
    """Extract tempo, time signature and key signature maps from events."""

    def extract(self, events: List[Event]) -> SequenceMetadata:
        """
        Scan events once and collect metadata.

        Args:
            events: Merged event list, ascending by tick

        Returns:
            SequenceMetadata with markers in ascending tick order
        """
        metadata = SequenceMetadata(total_events=len(events))

        for event in events:
            if event.tick > metadata.total_ticks:
                metadata.total_ticks = event.tick

            if not isinstance(event, MetaEvent):
                continue

            if event.meta_kind == MetaKind.SET_TEMPO:
                marker = self.decode_tempo(event)
                if marker is not None:
                    metadata.tempo.append(marker)
            elif event.meta_kind == MetaKind.TIME_SIGNATURE:
                marker = self.decode_time_signature(event)
                if marker is not None:
                    metadata.time_signature.append(marker)
            elif event.meta_kind == MetaKind.KEY_SIGNATURE:
                marker = self.decode_key_signature(event)
                if marker is not None:
                    metadata.key_signature.append(marker)

        return metadata

    def summarize(self, sequence: MidiSequence) -> MidiSummary:
        """Build the file-level summary for a decoded sequence."""
        metadata = self.extract(sequence.events)
        return MidiSummary(
            format=sequence.format,
            ppq=sequence.ppq,
            total_ticks=metadata.total_ticks,
            track_count=sequence.track_count,
            total_events=sequence.total_events,
            tempo_info=metadata.tempo,
            time_signature=metadata.time_signature,
            key_signature=metadata.key_signature,
        )

    @staticmethod
    def decode_tempo(event: MetaEvent):
        """Decode a set-tempo payload; anything but 3 bytes is ignored."""
        data = event.payload
        if len(data) != 3:
            return None
        microseconds = (data[0] << 16) | (data[1] << 8) | data[2]
        if microseconds == 0:
            return None
        return TempoMarker(tick=event.tick, microseconds_per_quarter=microseconds)

    @staticmethod
    def decode_time_signature(event: MetaEvent):
        """Decode a time signature payload, defaulting missing trailing bytes."""
        data = list(event.payload)
        if not data:
            warnings.warn(f"Empty time signature payload at tick {event.tick}, skipped")
            return None
        if len(data) < 4:
            warnings.warn(
                f"Truncated time signature payload at tick {event.tick} "
                f"({len(data)} bytes), using defaults for missing fields"
            )
            data.extend(DEFAULT_TIME_SIGNATURE_BYTES[len(data):])
        numerator, denom_exp, clocks_per_click, notated_32nds = data[:4]
        return TimeSignatureMarker(
            tick=event.tick,
            numerator=numerator,
            denominator=2 ** denom_exp,
            clocks_per_click=clocks_per_click,
            notated_32nds_per_quarter=notated_32nds,
        )

    @staticmethod
    def decode_key_signature(event: MetaEvent):
        """Decode a key signature payload (signed sharps/flats, mode)."""
        data = event.payload
        if not data:
            warnings.warn(f"Empty key signature payload at tick {event.tick}, skipped")
            return None
        sharps_flats = data[0] - 256 if data[0] > 127 else data[0]
        major = data[1] == 0 if len(data) > 1 else True
        return KeySignatureMarker(tick=event.tick, sharps_flats=sharps_flats, major=major)
