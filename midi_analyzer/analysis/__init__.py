"""Analysis layer - Structural information read directly off the events.

This layer extracts file-level structure from a decoded sequence:
- Tempo, time signature and key signature maps
- Tick to wall-clock time conversion
- Per-track summaries
"""

from .metadata import (
    MetadataExtractor,
    SequenceMetadata,
    MidiSummary,
    TempoMarker,
    TimeSignatureMarker,
    KeySignatureMarker,
    ensure_tempo_map,
)
from .tempo import TickClock
from .tracks import TrackAnalyzer, TrackInfo

__all__ = [
    "MetadataExtractor",
    "SequenceMetadata",
    "MidiSummary",
    "TempoMarker",
    "TimeSignatureMarker",
    "KeySignatureMarker",
    "ensure_tempo_map",
    "TickClock",
    "TrackAnalyzer",
    "TrackInfo",
]
