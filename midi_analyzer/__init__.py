"""MIDI Analyzer - Musical structure inference from MIDI sequences.

Architecture Layers:
    1. core/       - Event model and decoded sequence
    2. input/      - MIDI file decoding and loaded file registry
    3. analysis/   - Tempo/meter/key maps, tick clock, track summaries
    4. processing/ - Event filtering
    5. inference/  - Note clustering, chord identification, progressions
    6. output/     - Serialization and MIDI rendering
"""

__version__ = "0.2.0"

# Core types
from .core import Event, EventKind, MetaKind, MidiSequence
from .config import AnalysisConfig

# Input layer
from .input import MidiLoader, MidiLoadError, FileRegistry

# Analysis layer
from .analysis import MetadataExtractor, TickClock, TrackAnalyzer

# Processing layer
from .processing import EventFilter, TimeRange, ValueFilter

# Inference layer
from .inference import (
    NoteClusterer,
    ChordIdentifier,
    ProgressionBuilder,
    ChordProgressionAnalyzer,
)

# Output layer
from .output import ProgressionMidiExporter

# Request layer
from .service import MidiAnalysisService, RequestValidationError

__all__ = [
    # Core
    "Event",
    "EventKind",
    "MetaKind",
    "MidiSequence",
    "AnalysisConfig",
    # Input
    "MidiLoader",
    "MidiLoadError",
    "FileRegistry",
    # Analysis
    "MetadataExtractor",
    "TickClock",
    "TrackAnalyzer",
    # Processing
    "EventFilter",
    "TimeRange",
    "ValueFilter",
    # Inference
    "NoteClusterer",
    "ChordIdentifier",
    "ProgressionBuilder",
    "ChordProgressionAnalyzer",
    # Output
    "ProgressionMidiExporter",
    # Request layer
    "MidiAnalysisService",
    "RequestValidationError",
]
