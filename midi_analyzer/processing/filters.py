"""Event filtering - narrow event lists and track lists.

Each filter is an independent predicate; ``EventFilter.apply`` chains any
subset of them in a fixed order:
- Time range (inclusive tick bounds)
- Event type
- Channel
- Positional values
- Meta type
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from ..analysis.tracks import TrackInfo
from ..core import MetaEvent
from ..core.event import Event


@dataclass(frozen=True)
class TimeRange:
    """Inclusive tick range."""

    start_tick: int
    end_tick: int

    def contains(self, tick: int) -> bool:
        return self.start_tick <= tick <= self.end_tick


@dataclass(frozen=True)
class ValueFilter:
    """Positional value equalities; None means any value."""

    value1: Optional[int] = None
    value2: Optional[int] = None
    value3: Optional[int] = None

    def matches(self, values) -> bool:
        for position, expected in enumerate((self.value1, self.value2, self.value3)):
            if expected is None:
                continue
            if position >= len(values) or values[position] != expected:
                return False
        return True


def _tags(items: Iterable[str]) -> Set[str]:
    """Plain string tags; accepts enum members or their values."""
    return {getattr(item, "value", item) for item in items}


class EventFilter:
    """Predicate filters over event lists."""

    @staticmethod
    def by_time_range(events: List[Event], time_range: TimeRange) -> List[Event]:
        return [e for e in events if time_range.contains(e.tick)]

    @staticmethod
    def by_type(events: List[Event], event_types: Iterable[str]) -> List[Event]:
        wanted = _tags(event_types)
        return [e for e in events if e.kind.value in wanted]

    @staticmethod
    def by_channel(events: List[Event], channels: Iterable[int]) -> List[Event]:
        """Keep events on the given channels; events without a channel never match."""
        wanted = set(channels)
        return [e for e in events if e.channel is not None and e.channel in wanted]

    @staticmethod
    def by_value(events: List[Event], value_filter: ValueFilter) -> List[Event]:
        return [e for e in events if value_filter.matches(e.values)]

    @staticmethod
    def by_meta_type(events: List[Event], meta_types: Iterable[str]) -> List[Event]:
        wanted = _tags(meta_types)
        return [
            e for e in events
            if isinstance(e, MetaEvent) and e.meta_kind.value in wanted
        ]

    @classmethod
    def apply(
        cls,
        events: List[Event],
        time_range: Optional[TimeRange] = None,
        event_types: Optional[Iterable[str]] = None,
        channels: Optional[Iterable[int]] = None,
        value_filter: Optional[ValueFilter] = None,
        meta_types: Optional[Iterable[str]] = None,
    ) -> List[Event]:
        """
        Apply any subset of filters.

        Empty type, channel and meta type collections mean "no filter".

        Args:
            events: Events to filter
            time_range: Inclusive tick range
            event_types: Event type tags (e.g., "noteOn", "controller")
            channels: MIDI channels (0-15)
            value_filter: Positional value equalities
            meta_types: Meta type tags (e.g., "setTempo", "marker")

        Returns:
            Filtered events, original order preserved
        """
        filtered = list(events)

        if time_range is not None:
            filtered = cls.by_time_range(filtered, time_range)
        if event_types:
            filtered = cls.by_type(filtered, event_types)
        if channels:
            filtered = cls.by_channel(filtered, channels)
        if value_filter is not None:
            filtered = cls.by_value(filtered, value_filter)
        if meta_types:
            filtered = cls.by_meta_type(filtered, meta_types)

        return filtered

    @staticmethod
    def tracks_by_channel(tracks: List[TrackInfo], channel: int) -> List[TrackInfo]:
        return [t for t in tracks if t.channel == channel]

    @staticmethod
    def tracks_by_program(tracks: List[TrackInfo], program: int) -> List[TrackInfo]:
        return [t for t in tracks if t.program == program]

    @classmethod
    def apply_track_filters(
        cls,
        tracks: List[TrackInfo],
        channel: Optional[int] = None,
        program: Optional[int] = None,
    ) -> List[TrackInfo]:
        """Filter track summaries by first channel and/or program."""
        filtered = list(tracks)
        if channel is not None:
            filtered = cls.tracks_by_channel(filtered, channel)
        if program is not None:
            filtered = cls.tracks_by_program(filtered, program)
        return filtered
