"""MidiSequence - a fully decoded, tick-stamped multi-track sequence."""

from dataclasses import dataclass, field
from typing import List

from .constants import DEFAULT_PPQ
from .event import Event


@dataclass
class MidiSequence:
    """Decoded sequence handed to the analysis layers.

    Attributes:
        format: SMF format type (0, 1 or 2)
        ppq: Pulses per quarter note
        tracks: Per-track event lists with absolute ticks
    """

    format: int = 1
    ppq: int = DEFAULT_PPQ
    tracks: List[List[Event]] = field(default_factory=list)

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    @property
    def total_events(self) -> int:
        return sum(len(track) for track in self.tracks)

    @property
    def events(self) -> List[Event]:
        """Merged view of all tracks, ascending by tick.

        The sort is stable, so events sharing a tick keep their per-track
        order and lower track indices come first.
        """
        return merge_tracks(self.tracks)

    def track_events(self, indices: List[int]) -> List[Event]:
        """Merged view restricted to the given track indices."""
        wanted = set(indices)
        return merge_tracks(
            [track for i, track in enumerate(self.tracks) if i in wanted]
        )


def merge_tracks(tracks: List[List[Event]]) -> List[Event]:
    """Concatenate tracks in order and stable-sort by tick."""
    merged = [event for track in tracks for event in track]
    return sorted(merged, key=lambda e: e.tick)
