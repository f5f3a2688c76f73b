"""Per-track analysis - names, channel, program and note counts."""

from dataclasses import dataclass
from typing import List, Optional

from ..core import MetaEvent, MetaKind, NoteOn, ProgramChange
from ..core.event import Event


@dataclass
class TrackInfo:
    """Summary of a single track."""

    index: int
    event_count: int = 0
    note_count: int = 0
    start_tick: int = 0
    end_tick: int = 0
    name: Optional[str] = None
    instrument: Optional[str] = None
    channel: Optional[int] = None
    program: Optional[int] = None


class TrackAnalyzer:
    """Summarize tracks of a decoded sequence."""

    def analyze(self, events: List[Event], index: int) -> TrackInfo:
        """
        Analyze one track.

        Args:
            events: Events of the track, in track order
            index: Track index within the file

        Returns:
            TrackInfo for the track
        """
        info = TrackInfo(index=index, event_count=len(events))
        if events:
            info.start_tick = events[0].tick

        for event in events:
            if isinstance(event, MetaEvent):
                if event.meta_kind == MetaKind.TRACK_NAME:
                    info.name = event.text
                elif event.meta_kind == MetaKind.INSTRUMENT_NAME:
                    info.instrument = event.text
            elif isinstance(event, NoteOn) and event.is_sounding:
                info.note_count += 1
                if info.channel is None:
                    info.channel = event.channel
            elif isinstance(event, ProgramChange):
                info.program = event.program

            if event.tick > info.end_tick:
                info.end_tick = event.tick

        return info

    def analyze_all(self, tracks: List[List[Event]]) -> List[TrackInfo]:
        """Analyze every track in order."""
        return [self.analyze(events, i) for i, events in enumerate(tracks)]
