"""Tests for metadata extraction (tempo, time and key signature maps)."""

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from midi_analyzer.analysis import (
    MetadataExtractor,
    KeySignatureMarker,
    TempoMarker,
    ensure_tempo_map,
)
from midi_analyzer.core import MetaEvent, MetaKind, MidiSequence, NoteOn


def meta(tick, kind, payload):
    return MetaEvent(tick=tick, meta_kind=kind, payload=bytes(payload))


class TestTempoExtraction:
    """Set-tempo payload decoding."""

    @pytest.mark.parametrize("payload", [
        [0x07, 0xA1, 0x20],  # 500000
        [0x0F, 0x42, 0x40],  # 1000000
        [0x06, 0x1A, 0x80],  # 400000
        [0x00, 0x00, 0x01],
        [0xFF, 0xFF, 0xFF],
    ])
    def test_bpm_from_three_byte_payload(self, payload):
        b0, b1, b2 = payload
        metadata = MetadataExtractor().extract([meta(0, MetaKind.SET_TEMPO, payload)])

        assert len(metadata.tempo) == 1
        marker = metadata.tempo[0]
        assert marker.microseconds_per_quarter == (b0 << 16) | (b1 << 8) | b2
        assert marker.bpm == round(60_000_000 / marker.microseconds_per_quarter, 2)

    def test_default_tempo_is_120_bpm(self):
        metadata = MetadataExtractor().extract([meta(0, MetaKind.SET_TEMPO, [0x07, 0xA1, 0x20])])
        assert metadata.tempo[0].bpm == 120.0

    @pytest.mark.parametrize("payload", [[], [0x07], [0x07, 0xA1], [0x07, 0xA1, 0x20, 0x00]])
    def test_wrong_length_payload_is_ignored(self, payload):
        metadata = MetadataExtractor().extract([meta(0, MetaKind.SET_TEMPO, payload)])
        assert metadata.tempo == []

    def test_map_grows_only_for_well_formed_payloads(self):
        events = [
            meta(0, MetaKind.SET_TEMPO, [0x07, 0xA1, 0x20]),
            meta(10, MetaKind.SET_TEMPO, [0x07, 0xA1]),
            meta(20, MetaKind.SET_TEMPO, [0x06, 0x1A, 0x80]),
        ]
        metadata = MetadataExtractor().extract(events)
        assert [m.tick for m in metadata.tempo] == [0, 20]

    def test_bpm_rounding(self):
        marker = TempoMarker(tick=0, microseconds_per_quarter=700000)
        assert marker.bpm == 85.71


class TestTimeSignatureExtraction:
    """Time signature payload decoding."""

    def test_full_payload(self):
        metadata = MetadataExtractor().extract([meta(0, MetaKind.TIME_SIGNATURE, [6, 3, 36, 8])])
        ts = metadata.time_signature[0]
        assert (ts.numerator, ts.denominator) == (6, 8)
        assert ts.clocks_per_click == 36
        assert ts.notated_32nds_per_quarter == 8
        assert str(ts) == "6/8"

    def test_truncated_payload_uses_defaults(self):
        with pytest.warns(UserWarning, match="Truncated time signature"):
            metadata = MetadataExtractor().extract([meta(0, MetaKind.TIME_SIGNATURE, [3, 2])])
        ts = metadata.time_signature[0]
        assert (ts.numerator, ts.denominator) == (3, 4)
        assert ts.clocks_per_click == 24
        assert ts.notated_32nds_per_quarter == 8

    def test_empty_payload_is_skipped(self):
        with pytest.warns(UserWarning, match="Empty time signature"):
            metadata = MetadataExtractor().extract([meta(0, MetaKind.TIME_SIGNATURE, [])])
        assert metadata.time_signature == []


class TestKeySignatureExtraction:
    """Key signature payload decoding."""

    @pytest.mark.parametrize("raw,expected", [
        (0, 0), (1, 1), (7, 7), (127, 127), (128, -128), (249, -7), (255, -1),
    ])
    def test_signed_sharps_flats(self, raw, expected):
        metadata = MetadataExtractor().extract([meta(0, MetaKind.KEY_SIGNATURE, [raw, 0])])
        assert metadata.key_signature[0].sharps_flats == expected

    def test_mode_byte(self):
        events = [
            meta(0, MetaKind.KEY_SIGNATURE, [2, 0]),
            meta(10, MetaKind.KEY_SIGNATURE, [2, 1]),
        ]
        major, minor = MetadataExtractor().extract(events).key_signature
        assert major.major is True
        assert minor.major is False

    def test_missing_mode_defaults_to_major(self):
        metadata = MetadataExtractor().extract([meta(0, MetaKind.KEY_SIGNATURE, [255])])
        ks = metadata.key_signature[0]
        assert ks.sharps_flats == -1
        assert ks.major is True

    def test_empty_payload_is_skipped(self):
        with pytest.warns(UserWarning, match="Empty key signature"):
            metadata = MetadataExtractor().extract([meta(0, MetaKind.KEY_SIGNATURE, [])])
        assert metadata.key_signature == []

    @pytest.mark.parametrize("sharps_flats,major,name", [
        (0, True, "C major"),
        (0, False, "A minor"),
        (2, True, "D major"),
        (2, False, "B minor"),
        (-1, True, "F major"),
        (-3, False, "C minor"),
        (-6, True, "Gb major"),
        (6, True, "F# major"),
    ])
    def test_key_names(self, sharps_flats, major, name):
        assert KeySignatureMarker(tick=0, sharps_flats=sharps_flats, major=major).name == name


class TestAggregates:
    """Total ticks, total events and the file summary."""

    def test_totals(self):
        events = [
            NoteOn(tick=0, channel=0, note=60, velocity=90),
            NoteOn(tick=960, channel=0, note=62, velocity=90),
            meta(1920, MetaKind.END_OF_TRACK, []),
        ]
        metadata = MetadataExtractor().extract(events)
        assert metadata.total_ticks == 1920
        assert metadata.total_events == 3

    def test_empty_events(self):
        metadata = MetadataExtractor().extract([])
        assert metadata.total_ticks == 0
        assert metadata.total_events == 0
        assert metadata.tempo == []

    def test_markers_in_ascending_tick_order_across_tracks(self):
        sequence = MidiSequence(format=1, ppq=480, tracks=[
            [meta(0, MetaKind.SET_TEMPO, [0x07, 0xA1, 0x20]),
             meta(1920, MetaKind.SET_TEMPO, [0x06, 0x1A, 0x80])],
            [meta(960, MetaKind.SET_TEMPO, [0x0F, 0x42, 0x40])],
        ])
        summary = MetadataExtractor().summarize(sequence)
        assert [m.tick for m in summary.tempo_info] == [0, 960, 1920]
        assert summary.track_count == 2
        assert summary.total_events == 3
        assert summary.total_ticks == 1920
        assert summary.ppq == 480


class TestTempoMapFallback:
    """The tempo map is never empty when consulted."""

    def test_empty_map_gets_default_marker(self):
        tempo_map = ensure_tempo_map([])
        assert tempo_map == [TempoMarker(tick=0, microseconds_per_quarter=500000)]

    def test_late_first_marker_gets_default_before_it(self):
        tempo_map = ensure_tempo_map([TempoMarker(tick=480, microseconds_per_quarter=250000)])
        assert [m.tick for m in tempo_map] == [0, 480]
        assert tempo_map[0].microseconds_per_quarter == 500000

    def test_map_starting_at_zero_is_unchanged(self):
        markers = [TempoMarker(tick=0, microseconds_per_quarter=600000)]
        assert ensure_tempo_map(markers) == markers
