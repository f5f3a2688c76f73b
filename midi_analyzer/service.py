"""Request layer - the MIDI analysis operations exposed to callers.

Each operation accepts either the id of an already loaded file or a file
path (loaded on demand) and returns plain analysis objects:
- load_midi_file: decode and register a file
- get_midi_summary: format, resolution, tempo/meter/key maps
- get_tracks_list: per-track summaries, optionally filtered
- get_track_details: one track's summary and filtered events
- get_midi_events: merged, filtered events across tracks
- get_chord_progression: deduplicated chord spans
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from .analysis import MidiSummary, TrackInfo
from .config import AnalysisConfig
from .core.event import Event
from .inference import ChordIdentifier, ChordProgression, ChordProgressionAnalyzer
from .input import FileRegistry, LoadedMidiFile, MidiLoader
from .processing import EventFilter, TimeRange, ValueFilter


class RequestValidationError(ValueError):
    """Raised when a request violates the operation's contract."""


class MidiAnalysisService:
    """Stateful front end over the registry and the analysis layers."""

    def __init__(
        self,
        registry: Optional[FileRegistry] = None,
        loader: Optional[MidiLoader] = None,
        config: Optional[AnalysisConfig] = None,
    ):
        self.config = config or AnalysisConfig()
        self.registry = registry or FileRegistry()
        self.loader = loader or MidiLoader(default_ppq=self.config.default_ppq)
        self.identifier = ChordIdentifier(min_notes=self.config.min_chord_notes)

    def load_midi_file(self, file_path: str) -> Dict[str, Any]:
        """
        Decode and register a MIDI file.

        Returns:
            Dict with fileId, filePath, format, trackCount, ppq, totalEvents
        """
        loaded = self.registry.register(str(file_path), self.loader.load(file_path))
        return {
            "fileId": loaded.id,
            "filePath": loaded.file_path,
            "format": loaded.summary.format,
            "trackCount": loaded.summary.track_count,
            "ppq": loaded.summary.ppq,
            "totalEvents": loaded.summary.total_events,
        }

    def resolve(
        self, file_id: Optional[str] = None, file_path: Optional[str] = None
    ) -> LoadedMidiFile:
        """
        Find a loaded file by id, or by path (loading it if needed).

        Raises:
            RequestValidationError: If neither selector is given or the id is unknown
        """
        if file_id:
            loaded = self.registry.get(file_id)
            if loaded is None:
                raise RequestValidationError(f"No loaded file found with ID: {file_id}")
            return loaded

        if file_path:
            loaded = self.registry.get_by_path(str(file_path))
            if loaded is None:
                loaded = self.registry.get(self.load_midi_file(file_path)["fileId"])
            return loaded

        raise RequestValidationError("Either file_id or file_path must be provided")

    def get_midi_summary(
        self, file_id: Optional[str] = None, file_path: Optional[str] = None
    ) -> MidiSummary:
        return self.resolve(file_id, file_path).summary

    def get_tracks_list(
        self,
        file_id: Optional[str] = None,
        file_path: Optional[str] = None,
        channel_filter: Optional[int] = None,
        program_filter: Optional[int] = None,
    ) -> List[TrackInfo]:
        loaded = self.resolve(file_id, file_path)
        return EventFilter.apply_track_filters(
            loaded.tracks, channel=channel_filter, program=program_filter
        )

    def get_track_details(
        self,
        track_index: int,
        file_id: Optional[str] = None,
        file_path: Optional[str] = None,
        time_range: Optional[TimeRange] = None,
        event_type_filter: Optional[Iterable[str]] = None,
        value_filter: Optional[ValueFilter] = None,
    ) -> Tuple[TrackInfo, List[Event]]:
        """
        Summary and filtered events of one track.

        Raises:
            RequestValidationError: If the track index is out of range
        """
        loaded = self.resolve(file_id, file_path)
        self._check_track_indices(loaded, [track_index])

        events = EventFilter.apply(
            loaded.sequence.tracks[track_index],
            time_range=time_range,
            event_types=event_type_filter,
            value_filter=value_filter,
        )
        return loaded.tracks[track_index], events

    def get_midi_events(
        self,
        file_id: Optional[str] = None,
        file_path: Optional[str] = None,
        time_range: Optional[TimeRange] = None,
        event_type_filter: Optional[Iterable[str]] = None,
        track_filter: Optional[List[int]] = None,
        value_filter: Optional[ValueFilter] = None,
        meta_type_filter: Optional[Iterable[str]] = None,
        channel_filter: Optional[Iterable[int]] = None,
    ) -> List[Event]:
        """Merged events of the selected tracks (all when None), filtered."""
        loaded = self.resolve(file_id, file_path)
        events = self._select_events(loaded, track_filter)
        return EventFilter.apply(
            events,
            time_range=time_range,
            event_types=event_type_filter,
            channels=channel_filter,
            value_filter=value_filter,
            meta_types=meta_type_filter,
        )

    def get_chord_progression(
        self,
        file_id: Optional[str] = None,
        file_path: Optional[str] = None,
        track_filter: Optional[List[int]] = None,
        grouping_threshold_ms: Optional[float] = None,
    ) -> ChordProgression:
        """
        Chord progression of the selected tracks.

        The tempo map always comes from the whole file, so excluding the
        conductor track does not change the timing.
        """
        loaded = self.resolve(file_id, file_path)
        events = self._select_events(loaded, track_filter)

        analyzer = ChordProgressionAnalyzer(
            threshold_ms=self.config.grouping_threshold_ms,
            identifier=self.identifier,
            default_tempo_us=self.config.default_tempo_us,
        )
        return analyzer.analyze(
            events,
            ppq=loaded.sequence.ppq,
            tempo_map=loaded.summary.tempo_info,
            threshold_ms=grouping_threshold_ms,
        )

    def _select_events(
        self, loaded: LoadedMidiFile, track_filter: Optional[List[int]]
    ) -> List[Event]:
        if not track_filter:
            return loaded.sequence.events
        self._check_track_indices(loaded, track_filter)
        return loaded.sequence.track_events(track_filter)

    @staticmethod
    def _check_track_indices(loaded: LoadedMidiFile, indices: Iterable[int]) -> None:
        count = loaded.sequence.track_count
        for index in indices:
            if index < 0 or index >= count:
                raise RequestValidationError(
                    f"Track index {index} is out of range. File has {count} tracks."
                )
