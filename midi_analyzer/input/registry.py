"""Loaded file registry - assign identifiers and cache per-file analysis."""

import hashlib
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from ..analysis import MetadataExtractor, MidiSummary, TrackAnalyzer, TrackInfo
from ..core import MidiSequence


@dataclass
class LoadedMidiFile:
    """A decoded file with its load-time summary and track list."""

    id: str
    file_path: str
    sequence: MidiSequence
    summary: MidiSummary
    tracks: List[TrackInfo] = field(default_factory=list)
    loaded_at: datetime = field(default_factory=datetime.now)


class FileRegistry:
    """In-memory registry of loaded MIDI files."""

    def __init__(self):
        self._files: Dict[str, LoadedMidiFile] = {}
        self._extractor = MetadataExtractor()
        self._track_analyzer = TrackAnalyzer()

    def register(self, file_path: str, sequence: MidiSequence) -> LoadedMidiFile:
        """
        Register a decoded sequence under a fresh identifier.

        Args:
            file_path: Path the sequence was loaded from
            sequence: Decoded sequence

        Returns:
            LoadedMidiFile entry
        """
        file_id = hashlib.md5(f"{file_path}{time.time_ns()}".encode()).hexdigest()
        loaded = LoadedMidiFile(
            id=file_id,
            file_path=str(file_path),
            sequence=sequence,
            summary=self._extractor.summarize(sequence),
            tracks=self._track_analyzer.analyze_all(sequence.tracks),
        )
        self._files[file_id] = loaded
        return loaded

    def get(self, file_id: str) -> Optional[LoadedMidiFile]:
        return self._files.get(file_id)

    def get_by_path(self, file_path: str) -> Optional[LoadedMidiFile]:
        for loaded in self._files.values():
            if loaded.file_path == str(file_path):
                return loaded
        return None

    def all(self) -> List[LoadedMidiFile]:
        return list(self._files.values())

    def remove(self, file_id: str) -> bool:
        return self._files.pop(file_id, None) is not None

    def __len__(self) -> int:
        return len(self._files)
