"""Chord progression - compress labeled clusters into chord spans."""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .chords import ChordIdentifier
from .clustering import NoteCluster, NoteClusterer
from ..analysis.metadata import MetadataExtractor, TempoMarker
from ..analysis.tempo import TickClock
from ..core.constants import DEFAULT_GROUPING_THRESHOLD_MS, DEFAULT_TEMPO_US
from ..core.event import Event

# End tick of a span that has not been closed yet
OPEN_END = -1


@dataclass
class ChordSpan:
    """A contiguous tick range carrying one chord label."""

    start_tick: int
    end_tick: int
    name: str
    notes: List[int] = field(default_factory=list)

    @property
    def duration_ticks(self) -> int:
        return self.end_tick - self.start_tick


@dataclass
class ChordProgression:
    """Container for a chord progression timeline."""

    chords: List[ChordSpan] = field(default_factory=list)

    @property
    def chord_count(self) -> int:
        return len(self.chords)

    @property
    def names(self) -> List[str]:
        """Chord labels in order."""
        return [c.name for c in self.chords]


class ProgressionBuilder:
    """Turn identified clusters into a deduplicated span timeline."""

    def __init__(self, identifier: Optional[ChordIdentifier] = None):
        self.identifier = identifier or ChordIdentifier()

    def build(
        self,
        clusters: List[NoteCluster],
        identify: Optional[Callable[[List[int]], Optional[str]]] = None,
    ) -> List[ChordSpan]:
        """
        Build chord spans from clusters.

        Clusters without a chord are dropped. A chord equal to the last kept
        span is skipped without extending it. Each new span closes the
        previous one at its own start tick; the final span ends at the tick
        of the last note-on.

        Args:
            clusters: Clusters in ascending start tick order
            identify: Chord label lookup (defaults to this builder's identifier)

        Returns:
            List of ChordSpan
        """
        identify = identify or self.identifier.identify_name
        spans: List[ChordSpan] = []

        for cluster in clusters:
            name = identify(cluster.notes)
            if name is None:
                continue

            if spans:
                if spans[-1].name == name:
                    continue
                spans[-1].end_tick = cluster.start_tick

            spans.append(ChordSpan(
                start_tick=cluster.start_tick,
                end_tick=OPEN_END,
                name=name,
                notes=list(cluster.notes),
            ))

        if spans:
            spans[-1].end_tick = clusters[-1].last_tick

        return spans


class ChordProgressionAnalyzer:
    """End-to-end chord progression analysis over an event list.

    Pipeline: events -> tempo map -> tick clock -> clusters -> chords -> spans
    """

    def __init__(
        self,
        threshold_ms: float = DEFAULT_GROUPING_THRESHOLD_MS,
        identifier: Optional[ChordIdentifier] = None,
        default_tempo_us: int = DEFAULT_TEMPO_US,
    ):
        """
        Initialize ChordProgressionAnalyzer.

        Args:
            threshold_ms: Note grouping threshold in milliseconds
            identifier: Chord identifier to use
            default_tempo_us: Tempo assumed before the first tempo marker
        """
        self.threshold_ms = threshold_ms
        self.identifier = identifier or ChordIdentifier()
        self.default_tempo_us = default_tempo_us

    def analyze(
        self,
        events: List[Event],
        ppq: int,
        tempo_map: Optional[List[TempoMarker]] = None,
        threshold_ms: Optional[float] = None,
    ) -> ChordProgression:
        """
        Analyze the chord progression of an event list.

        Args:
            events: Events ascending by tick (any kinds)
            ppq: Pulses per quarter note
            tempo_map: Tempo markers; extracted from events when None
            threshold_ms: Override the grouping threshold

        Returns:
            ChordProgression with deduplicated spans
        """
        if tempo_map is None:
            tempo_map = MetadataExtractor().extract(events).tempo
        clock = TickClock(tempo_map, ppq, self.default_tempo_us)

        clusterer = NoteClusterer(
            threshold_ms=self.threshold_ms if threshold_ms is None else threshold_ms
        )
        clusters = clusterer.cluster(events, clock)
        spans = ProgressionBuilder(self.identifier).build(clusters)
        return ChordProgression(chords=spans)
