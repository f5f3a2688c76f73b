"""Analysis configuration."""

from dataclasses import dataclass

from .core.constants import (
    DEFAULT_GROUPING_THRESHOLD_MS,
    DEFAULT_PPQ,
    DEFAULT_TEMPO_US,
    MIN_CHORD_NOTES,
)


@dataclass
class AnalysisConfig:
    """Configuration shared by the analysis layers.

    Attributes:
        grouping_threshold_ms: Max gap between consecutive note-ons of one
            cluster, in milliseconds (default: 50)
        default_ppq: Resolution substituted when a file declares a
            non-positive one (default: 480)
        default_tempo_us: Tempo assumed when the file has no tempo marker,
            in microseconds per quarter note (default: 500000, 120 BPM)
        min_chord_notes: Minimum notes in a cluster before chord lookup
            (default: 3)
    """

    grouping_threshold_ms: float = DEFAULT_GROUPING_THRESHOLD_MS
    default_ppq: int = DEFAULT_PPQ
    default_tempo_us: int = DEFAULT_TEMPO_US
    min_chord_notes: int = MIN_CHORD_NOTES
