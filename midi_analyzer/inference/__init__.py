"""Inference layer - Harmonic understanding of note events.

This layer builds a chord progression from note-ons:
- Temporal clustering of simultaneous notes
- Chord identification (root, type, tensions, inversion)
- Progression building (deduplicated chord spans)

Pipeline: Note-ons → Clusters → Chords → Chord spans
"""

from .clustering import NoteClusterer, NoteCluster
from .chords import (
    ChordIdentifier,
    ChordMatch,
    ChordDefinition,
    CHORD_DEFINITIONS,
    TENSION_NAMES,
    stable_unique,
)
from .progression import (
    ProgressionBuilder,
    ChordProgressionAnalyzer,
    ChordProgression,
    ChordSpan,
)

__all__ = [
    # Clustering
    "NoteClusterer",
    "NoteCluster",
    # Chord identification
    "ChordIdentifier",
    "ChordMatch",
    "ChordDefinition",
    "CHORD_DEFINITIONS",
    "TENSION_NAMES",
    "stable_unique",
    # Progression
    "ProgressionBuilder",
    "ChordProgressionAnalyzer",
    "ChordProgression",
    "ChordSpan",
]
