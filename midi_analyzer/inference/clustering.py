"""Note clustering - group note-ons that sound together."""

import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional

from ..analysis.tempo import TickClock
from ..core import sounding_notes
from ..core.constants import DEFAULT_GROUPING_THRESHOLD_MS
from ..core.event import Event


@dataclass
class NoteCluster:
    """Note numbers judged simultaneous, in arrival order."""

    start_tick: int
    notes: List[int] = field(default_factory=list)
    last_tick: Optional[int] = None

    def __post_init__(self):
        if self.last_tick is None:
            self.last_tick = self.start_tick


class NoteClusterer:
    """Group ascending note-on events into simultaneous clusters.

    A note joins the current cluster when it starts less than
    ``threshold_ms`` after the previous note (not the cluster start), so a
    fast arpeggio can chain into one cluster.
    """

    def __init__(self, threshold_ms: float = DEFAULT_GROUPING_THRESHOLD_MS):
        """
        Initialize NoteClusterer.

        Args:
            threshold_ms: Maximum gap between consecutive notes of a cluster
        """
        self.threshold_ms = threshold_ms

    def cluster(self, events: List[Event], clock: TickClock) -> List[NoteCluster]:
        """
        Cluster note-on events.

        Args:
            events: Events, any kinds; only note-ons with velocity > 0 are used
            clock: Tick clock for the sequence

        Returns:
            Clusters in ascending start tick order
        """
        notes = sorted(sounding_notes(events), key=lambda e: e.tick)
        if not notes:
            return []

        times = clock.ticks_to_ms_array([n.tick for n in notes])
        gaps = np.diff(times)

        clusters = []
        current = NoteCluster(start_tick=notes[0].tick, notes=[notes[0].note])
        for note, gap in zip(notes[1:], gaps):
            if gap < self.threshold_ms:
                current.notes.append(note.note)
                current.last_tick = note.tick
            else:
                clusters.append(current)
                current = NoteCluster(start_tick=note.tick, notes=[note.note])
        clusters.append(current)

        return clusters
