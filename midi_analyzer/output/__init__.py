"""Output layer - Serialization and MIDI rendering."""

from .midi import ProgressionMidiExporter
from .report import (
    summary_to_dict,
    track_to_dict,
    event_to_dict,
    events_to_dicts,
    progression_to_dict,
)

__all__ = [
    "ProgressionMidiExporter",
    "summary_to_dict",
    "track_to_dict",
    "event_to_dict",
    "events_to_dicts",
    "progression_to_dict",
]
