"""Input layer - MIDI file decoding and the loaded file registry."""

from .loader import MidiLoader, MidiLoadError
from .registry import FileRegistry, LoadedMidiFile
from .smf import RawMeta, SmfData, SmfReader

__all__ = [
    "MidiLoader",
    "MidiLoadError",
    "FileRegistry",
    "LoadedMidiFile",
    "RawMeta",
    "SmfData",
    "SmfReader",
]
