"""Tests for note clustering."""

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from midi_analyzer.analysis import TempoMarker, TickClock
from midi_analyzer.core import ControlChange, NoteOff, NoteOn, sounding_notes
from midi_analyzer.inference import NoteClusterer

from helpers import chord_events


@pytest.fixture
def clock():
    # 120 BPM, 480 PPQ: 1 tick ~= 1.04 ms, 48 ticks = 50 ms
    return TickClock([TempoMarker(0, 500_000)], ppq=480)


class TestNoteClusterer:
    """Tests for NoteClusterer."""

    def test_no_notes(self, clock):
        assert NoteClusterer().cluster([], clock) == []

    def test_only_ineligible_events(self, clock):
        events = [
            NoteOn(tick=0, channel=0, note=60, velocity=0),
            NoteOff(tick=10, channel=0, note=60, velocity=64),
            ControlChange(tick=10, channel=0, controller=64, value=127),
        ]
        assert NoteClusterer().cluster(events, clock) == []

    def test_simultaneous_notes_form_one_cluster(self, clock):
        events = chord_events([60, 64, 67], tick=0)
        clusters = NoteClusterer().cluster(events, clock)
        assert len(clusters) == 1
        assert clusters[0].start_tick == 0
        assert clusters[0].notes == [60, 64, 67]

    def test_separate_chords(self, clock):
        events = chord_events([60, 64, 67], tick=0) + chord_events([65, 69, 72], tick=480)
        clusters = NoteClusterer().cluster(events, clock)
        assert [c.start_tick for c in clusters] == [0, 480]
        assert clusters[1].notes == [65, 69, 72]

    def test_velocity_zero_note_on_excluded(self, clock):
        events = chord_events([60, 64, 67], tick=0) + [
            NoteOn(tick=0, channel=0, note=71, velocity=0),
        ]
        clusters = NoteClusterer().cluster(events, clock)
        assert clusters[0].notes == [60, 64, 67]

    def test_gap_measured_from_previous_note(self, clock):
        # Each note 40 ticks (~41.7 ms) after the previous one: the chain
        # stays together although the last note is 160 ticks after the first
        events = chord_events([60, 64, 67, 71, 74], tick=0, spread=40)
        clusters = NoteClusterer(threshold_ms=50).cluster(events, clock)
        assert len(clusters) == 1
        assert clusters[0].start_tick == 0
        assert clusters[0].last_tick == 160

    def test_gap_equal_to_threshold_splits(self):
        clock = TickClock([TempoMarker(0, 500_000)], ppq=500)  # 1 tick = 1 ms
        events = [
            NoteOn(tick=0, channel=0, note=60, velocity=90),
            NoteOn(tick=50, channel=0, note=64, velocity=90),
        ]
        clusters = NoteClusterer(threshold_ms=50).cluster(events, clock)
        assert len(clusters) == 2

    def test_duplicates_and_arrival_order_kept(self, clock):
        events = [
            NoteOn(tick=0, channel=0, note=67, velocity=90),
            NoteOn(tick=0, channel=1, note=60, velocity=90),
            NoteOn(tick=1, channel=2, note=67, velocity=90),
        ]
        clusters = NoteClusterer().cluster(events, clock)
        assert clusters[0].notes == [67, 60, 67]

    def test_unsorted_input_is_ordered_stably(self, clock):
        events = chord_events([65, 69], tick=480) + chord_events([60, 64], tick=0)
        clusters = NoteClusterer().cluster(events, clock)
        assert [c.notes for c in clusters] == [[60, 64], [65, 69]]

    def test_tempo_change_affects_grouping(self):
        # 30 ticks apart: 31 ms at 120 BPM, 125 ms at 30 BPM
        events = [
            NoteOn(tick=0, channel=0, note=60, velocity=90),
            NoteOn(tick=30, channel=0, note=64, velocity=90),
            NoteOn(tick=960, channel=0, note=60, velocity=90),
            NoteOn(tick=990, channel=0, note=64, velocity=90),
        ]
        tempo_map = [TempoMarker(0, 500_000), TempoMarker(960, 2_000_000)]
        clusters = NoteClusterer().cluster(events, TickClock(tempo_map, ppq=480))
        assert [c.notes for c in clusters] == [[60, 64], [60], [64]]

    @pytest.mark.parametrize("low,high", [(10, 50), (50, 120), (120, 400), (1, 1000)])
    def test_threshold_monotonic(self, clock, low, high):
        ticks = [0, 5, 30, 90, 95, 200, 400, 410, 470, 900, 1500, 1530]
        events = [
            NoteOn(tick=t, channel=0, note=60 + i % 12, velocity=90)
            for i, t in enumerate(ticks)
        ]
        narrow = NoteClusterer(threshold_ms=low).cluster(events, clock)
        wide = NoteClusterer(threshold_ms=high).cluster(events, clock)

        assert len(wide) <= len(narrow)
        # Every narrow cluster lies inside one wide cluster
        wide_starts = [c.start_tick for c in wide]
        for cluster in narrow:
            owner = max(s for s in wide_starts if s <= cluster.start_tick)
            wide_cluster = wide[wide_starts.index(owner)]
            assert cluster.last_tick <= wide_cluster.last_tick
            assert len(cluster.notes) <= len(wide_cluster.notes)


class TestSoundingNotes:
    """Note-on selection used by the clusterer."""

    def test_keeps_order_and_drops_silent(self):
        events = [
            NoteOn(tick=5, channel=0, note=64, velocity=70),
            NoteOff(tick=5, channel=0, note=60, velocity=0),
            NoteOn(tick=0, channel=0, note=60, velocity=0),
            NoteOn(tick=0, channel=0, note=67, velocity=1),
        ]
        assert [n.note for n in sounding_notes(events)] == [64, 67]
