"""Chord identification - name a cluster of notes.

Implements first-fit dictionary matching:
- Pitch classes deduplicated in first-occurrence order
- Each pitch class tried as root, in that order
- Chord definitions tried from most complex to simplest
- Leftover intervals named as tensions
- Slash notation when the lowest note is not the root
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Optional, Tuple, TypeVar

from ..core import PITCH_NAMES
from ..core.constants import MIN_CHORD_NOTES

T = TypeVar("T")


@dataclass(frozen=True)
class ChordDefinition:
    """Chord type suffix and its intervals above the root (may exceed 11)."""

    suffix: str
    intervals: Tuple[int, ...]

    @property
    def pitch_intervals(self) -> Tuple[int, ...]:
        return tuple(i % 12 for i in self.intervals)


# Most complex first: the first definition contained in the notes wins
CHORD_DEFINITIONS: Tuple[ChordDefinition, ...] = (
    # 9th chords (14 = 9th, an octave above 2)
    ChordDefinition("maj9", (0, 4, 7, 11, 14)),
    ChordDefinition("9", (0, 4, 7, 10, 14)),
    ChordDefinition("min9", (0, 3, 7, 10, 14)),
    # 7th chords
    ChordDefinition("maj7", (0, 4, 7, 11)),
    ChordDefinition("min7", (0, 3, 7, 10)),
    ChordDefinition("7", (0, 4, 7, 10)),
    ChordDefinition("m7b5", (0, 3, 6, 10)),
    ChordDefinition("dim7", (0, 3, 6, 9)),
    # Triads
    ChordDefinition("maj", (0, 4, 7)),
    ChordDefinition("min", (0, 3, 7)),
    ChordDefinition("dim", (0, 3, 6)),
    ChordDefinition("aug", (0, 4, 8)),
    ChordDefinition("sus4", (0, 5, 7)),
    ChordDefinition("sus2", (0, 2, 7)),
)

TENSION_NAMES = MappingProxyType({
    1: "b9",
    2: "9",
    3: "#9",
    5: "11",
    6: "#11",
    8: "b13",
    9: "13",
})


def stable_unique(items: Iterable[T]) -> List[T]:
    """Remove duplicates, keeping the first occurrence of each item in order."""
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


@dataclass(frozen=True)
class ChordMatch:
    """An identified chord."""

    root_pitch_class: int
    type_name: str
    bass_pitch_class: int
    tensions: Tuple[str, ...] = ()

    @property
    def root(self) -> str:
        return PITCH_NAMES[self.root_pitch_class]

    @property
    def bass(self) -> Optional[str]:
        """Bass note name if different from root (inversions)."""
        if self.bass_pitch_class == self.root_pitch_class:
            return None
        return PITCH_NAMES[self.bass_pitch_class]

    @property
    def name(self) -> str:
        """Chord label (e.g., 'Cmaj7', 'Cmaj(9)', 'G7/B')."""
        label = f"{self.root}{self.type_name}"
        if self.tensions:
            label += f"({','.join(self.tensions)})"
        if self.bass:
            label += f"/{self.bass}"
        return label

    def __str__(self) -> str:
        return self.name


class ChordIdentifier:
    """Identify chords from MIDI note numbers."""

    def __init__(
        self,
        definitions: Tuple[ChordDefinition, ...] = CHORD_DEFINITIONS,
        min_notes: int = MIN_CHORD_NOTES,
    ):
        """
        Initialize ChordIdentifier.

        Args:
            definitions: Chord definitions in priority order
            min_notes: Clusters with fewer notes are never chords
        """
        self.definitions = tuple(definitions)
        self.min_notes = min_notes

    def identify(self, notes: List[int]) -> Optional[ChordMatch]:
        """
        Identify the chord formed by simultaneous notes.

        Args:
            notes: MIDI note numbers in arrival order (duplicates allowed)

        Returns:
            ChordMatch, or None when no definition fits
        """
        if len(notes) < self.min_notes:
            return None

        pitch_classes = stable_unique(n % 12 for n in notes)
        bass_pc = min(notes) % 12

        for root in pitch_classes:
            intervals = sorted((pc - root + 12) % 12 for pc in pitch_classes)
            present = set(intervals)

            for definition in self.definitions:
                chord_intervals = definition.pitch_intervals
                if not all(i in present for i in chord_intervals):
                    continue

                tensions = tuple(
                    TENSION_NAMES[i]
                    for i in intervals
                    if i not in chord_intervals and i in TENSION_NAMES
                )
                return ChordMatch(
                    root_pitch_class=root,
                    type_name=definition.suffix,
                    tensions=tensions,
                    bass_pitch_class=bass_pc,
                )

        return None

    def identify_name(self, notes: List[int]) -> Optional[str]:
        """Chord label for the notes, or None."""
        match = self.identify(notes)
        return match.name if match else None
