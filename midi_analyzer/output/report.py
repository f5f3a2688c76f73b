"""Plain-dict serializers for analysis results (JSON ready)."""

from typing import Any, Dict, List

from ..analysis import MidiSummary, TrackInfo
from ..core import MetaEvent, NoteOff, NoteOn, SysEx
from ..core.event import Event
from ..inference import ChordProgression


def summary_to_dict(summary: MidiSummary) -> Dict[str, Any]:
    return {
        "format": summary.format,
        "ppq": summary.ppq,
        "totalTicks": summary.total_ticks,
        "trackCount": summary.track_count,
        "totalEvents": summary.total_events,
        "tempoInfo": [
            {
                "tick": t.tick,
                "bpm": t.bpm,
                "microsecondsPerBeat": t.microseconds_per_quarter,
            }
            for t in summary.tempo_info
        ],
        "timeSignature": [
            {
                "tick": ts.tick,
                "numerator": ts.numerator,
                "denominator": ts.denominator,
                "clocksPerClick": ts.clocks_per_click,
                "notesPerQuarter": ts.notated_32nds_per_quarter,
            }
            for ts in summary.time_signature
        ],
        "keySignature": [
            {"tick": ks.tick, "sharpsFlats": ks.sharps_flats, "major": ks.major}
            for ks in summary.key_signature
        ],
    }


def track_to_dict(track: TrackInfo) -> Dict[str, Any]:
    """Track info; optional fields are omitted when unknown."""
    data = {"index": track.index}
    for key, value in (
        ("name", track.name),
        ("instrument", track.instrument),
        ("channel", track.channel),
        ("program", track.program),
    ):
        if value is not None:
            data[key] = value
    data.update({
        "eventCount": track.event_count,
        "noteCount": track.note_count,
        "startTick": track.start_tick,
        "endTick": track.end_tick,
    })
    return data


def event_to_dict(event: Event) -> Dict[str, Any]:
    """Event details: tick, type, track and whatever payload the kind has."""
    data: Dict[str, Any] = {
        "tick": event.tick,
        "type": event.kind.value,
        "trackIndex": event.track_index,
    }
    if event.channel is not None:
        data["channel"] = event.channel

    for i, value in enumerate(event.values[:3], start=1):
        data[f"value{i}"] = value
    if isinstance(event, (NoteOn, NoteOff)):
        data["note"] = event.note
        data["velocity"] = event.velocity

    if isinstance(event, MetaEvent):
        data["metaType"] = event.meta_kind.value
        data["data"] = list(event.payload)
        if event.text is not None:
            data["text"] = event.text
    elif isinstance(event, SysEx):
        data["data"] = list(event.payload)

    return data


def events_to_dicts(events: List[Event]) -> List[Dict[str, Any]]:
    return [event_to_dict(e) for e in events]


def progression_to_dict(progression: ChordProgression) -> Dict[str, Any]:
    return {
        "chordCount": progression.chord_count,
        "chords": [
            {
                "name": span.name,
                "startTick": span.start_tick,
                "endTick": span.end_tick,
                "durationTicks": span.duration_ticks,
                "notes": list(span.notes),
            }
            for span in progression.chords
        ],
    }
