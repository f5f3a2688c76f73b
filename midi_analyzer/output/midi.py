"""MIDI export of chord progressions."""

import pretty_midi
from pathlib import Path

from ..analysis import TickClock
from ..inference import ChordProgression


class ProgressionMidiExporter:
    """Render a chord progression as sustained block chords."""

    def __init__(
        self,
        instrument_name: str = "Acoustic Grand Piano",
        instrument_program: int = 0,
        velocity: int = 80,
    ):
        """
        Initialize ProgressionMidiExporter.

        Args:
            instrument_name: MIDI instrument name
            instrument_program: MIDI program number (0-127)
            velocity: Velocity for every chord tone
        """
        self.instrument_name = instrument_name
        self.instrument_program = instrument_program
        self.velocity = velocity

    def to_pretty_midi(
        self, progression: ChordProgression, clock: TickClock
    ) -> pretty_midi.PrettyMIDI:
        """
        Convert a progression to a PrettyMIDI object without saving.

        Span ticks are converted to seconds with the sequence's tick clock,
        so tempo changes of the source are honoured. Zero-length spans are
        skipped.
        """
        initial_bpm = 60_000_000 / clock.tempo_map[0].microseconds_per_quarter
        midi = pretty_midi.PrettyMIDI(resolution=clock.ppq, initial_tempo=initial_bpm)

        instrument = pretty_midi.Instrument(
            program=self.instrument_program,
            name=self.instrument_name,
        )

        for span in progression.chords:
            start = clock.ticks_to_seconds(span.start_tick)
            end = clock.ticks_to_seconds(span.end_tick)
            if end <= start:
                continue
            for pitch in sorted(set(span.notes)):
                instrument.notes.append(pretty_midi.Note(
                    velocity=self.velocity,
                    pitch=pitch,
                    start=start,
                    end=end,
                ))

        midi.instruments.append(instrument)
        return midi

    def export(
        self, progression: ChordProgression, clock: TickClock, output_path: str
    ) -> None:
        """
        Export a progression to a MIDI file.

        Args:
            progression: Chord progression to render
            clock: Tick clock of the analyzed sequence
            output_path: Path to output MIDI file
        """
        midi = self.to_pretty_midi(progression, clock)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(str(output_path))
