"""Command-line interface for MIDI Analyzer.

Provides commands for:
- summary: Format, resolution, tempo, time and key signatures
- tracks: Per-track summaries
- events: Filtered event listing
- chords: Chord progression analysis
- render: Write the chord progression as a MIDI file
"""

import typer
from pathlib import Path
from typing import List, Optional
from rich.console import Console
from rich.table import Table

from .analysis import TickClock
from .core.constants import DEFAULT_GROUPING_THRESHOLD_MS
from .input import LoadedMidiFile, MidiLoadError
from .output import (
    ProgressionMidiExporter,
    events_to_dicts,
    progression_to_dict,
    summary_to_dict,
    track_to_dict,
)
from .processing import TimeRange, ValueFilter
from .service import MidiAnalysisService

app = typer.Typer(
    name="midi-analyzer",
    help="MIDI structure and chord progression analysis",
    rich_markup_mode="markdown",
)
console = Console()


def _load(service: MidiAnalysisService, input_file: Path) -> LoadedMidiFile:
    """Load a file through the service, exiting with a message on failure."""
    try:
        return service.resolve(file_path=str(input_file))
    except (FileNotFoundError, ValueError, MidiLoadError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def summary(
    input_file: Path = typer.Argument(..., help="Input MIDI file"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
):
    """Show format, resolution, tempo, time and key signatures."""
    service = MidiAnalysisService()
    loaded = _load(service, input_file)
    info = loaded.summary

    if json_output:
        console.print_json(data=summary_to_dict(info))
        return

    console.print(f"\n[bold]MIDI Info:[/bold] {input_file.name}")
    console.print(f"  Format: {info.format}")
    console.print(f"  PPQ: {info.ppq}")
    console.print(f"  Tracks: {info.track_count}")
    console.print(f"  Events: {info.total_events:,}")
    console.print(f"  Total ticks: {info.total_ticks:,}")

    if info.tempo_info:
        tempos = ", ".join(f"{t.bpm} BPM @ {t.tick}" for t in info.tempo_info)
        console.print(f"  Tempo: {tempos}")
    else:
        console.print("  Tempo: [dim]none (120 BPM assumed)[/dim]")
    for ts in info.time_signature:
        console.print(f"  Time signature: {ts} @ {ts.tick}")
    for ks in info.key_signature:
        console.print(f"  Key signature: {ks.name} @ {ks.tick}")


@app.command()
def tracks(
    input_file: Path = typer.Argument(..., help="Input MIDI file"),
    channel: Optional[int] = typer.Option(
        None, "-c", "--channel", min=0, max=15, help="Only tracks on this channel"
    ),
    program: Optional[int] = typer.Option(
        None, "-p", "--program", min=0, max=127, help="Only tracks with this program"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
):
    """List tracks with names, channels, programs and note counts."""
    service = MidiAnalysisService()
    loaded = _load(service, input_file)
    track_list = service.get_tracks_list(
        file_id=loaded.id, channel_filter=channel, program_filter=program
    )

    if json_output:
        console.print_json(data={"tracks": [track_to_dict(t) for t in track_list]})
        return

    table = Table(title="Tracks")
    table.add_column("#", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Channel", style="yellow")
    table.add_column("Program", style="yellow")
    table.add_column("Notes", style="magenta")
    table.add_column("Ticks", style="blue")

    for track in track_list:
        table.add_row(
            str(track.index),
            track.name or "",
            "" if track.channel is None else str(track.channel),
            "" if track.program is None else str(track.program),
            str(track.note_count),
            f"{track.start_tick}-{track.end_tick}",
        )

    console.print(table)


@app.command()
def events(
    input_file: Path = typer.Argument(..., help="Input MIDI file"),
    start: Optional[int] = typer.Option(None, "--start", help="First tick (inclusive)"),
    end: Optional[int] = typer.Option(None, "--end", help="Last tick (inclusive)"),
    types: Optional[List[str]] = typer.Option(
        None, "-t", "--type", help="Event type, e.g. noteOn, controller (repeatable)"
    ),
    track: Optional[List[int]] = typer.Option(
        None, "--track", help="Track index (repeatable)"
    ),
    channel: Optional[List[int]] = typer.Option(
        None, "-c", "--channel", help="MIDI channel (repeatable)"
    ),
    meta: Optional[List[str]] = typer.Option(
        None, "-m", "--meta", help="Meta type, e.g. setTempo, marker (repeatable)"
    ),
    value1: Optional[int] = typer.Option(None, "--value1", help="First data value"),
    value2: Optional[int] = typer.Option(None, "--value2", help="Second data value"),
    limit: int = typer.Option(50, "-n", "--limit", help="Rows to show (table mode)"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
):
    """List events, filtered by tick range, type, track, channel, value or meta type."""
    service = MidiAnalysisService()
    loaded = _load(service, input_file)

    time_range = None
    if start is not None or end is not None:
        time_range = TimeRange(
            start_tick=start if start is not None else 0,
            end_tick=end if end is not None else loaded.summary.total_ticks,
        )
    value_filter = None
    if value1 is not None or value2 is not None:
        value_filter = ValueFilter(value1=value1, value2=value2)

    try:
        selected = service.get_midi_events(
            file_id=loaded.id,
            time_range=time_range,
            event_type_filter=types,
            track_filter=track,
            value_filter=value_filter,
            meta_type_filter=meta,
            channel_filter=channel,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print_json(data={"events": events_to_dicts(selected)})
        return

    table = Table(title=f"Events ({len(selected)})")
    table.add_column("Tick", style="cyan")
    table.add_column("Track", style="blue")
    table.add_column("Type", style="green")
    table.add_column("Channel", style="yellow")
    table.add_column("Values", style="magenta")

    for row in events_to_dicts(selected[:limit]):
        details = row.get("text") or row.get("metaType") or " ".join(
            str(row[k]) for k in ("value1", "value2", "value3") if k in row
        )
        table.add_row(
            str(row["tick"]),
            str(row["trackIndex"]),
            row["type"],
            str(row.get("channel", "")),
            details,
        )

    console.print(table)
    if len(selected) > limit:
        console.print(f"   [dim]... and {len(selected) - limit} more events[/dim]")


@app.command()
def chords(
    input_file: Path = typer.Argument(..., help="Input MIDI file"),
    track: Optional[List[int]] = typer.Option(
        None, "--track", help="Track index to analyze (repeatable, default: all)"
    ),
    threshold: float = typer.Option(
        DEFAULT_GROUPING_THRESHOLD_MS, "--threshold", help="Note grouping threshold in milliseconds"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
):
    """Analyze the chord progression."""
    service = MidiAnalysisService()
    loaded = _load(service, input_file)

    try:
        progression = service.get_chord_progression(
            file_id=loaded.id, track_filter=track, grouping_threshold_ms=threshold
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print_json(data=progression_to_dict(progression))
        return

    if not progression.chords:
        console.print("[yellow]No chords detected![/yellow]")
        return

    clock = TickClock(loaded.summary.tempo_info, loaded.sequence.ppq)
    _show_chords_table(progression, clock)
    console.print(f"\n   [green]Progression: {' - '.join(progression.names)}[/green]")


@app.command()
def render(
    input_file: Path = typer.Argument(..., help="Input MIDI file"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Output MIDI file path"
    ),
    track: Optional[List[int]] = typer.Option(
        None, "--track", help="Track index to analyze (repeatable, default: all)"
    ),
    threshold: float = typer.Option(
        DEFAULT_GROUPING_THRESHOLD_MS, "--threshold", help="Note grouping threshold in milliseconds"
    ),
):
    """Write the detected chord progression as block chords to a MIDI file."""
    if output is None:
        output = input_file.with_name(f"{input_file.stem}_chords.mid")

    service = MidiAnalysisService()
    loaded = _load(service, input_file)
    try:
        progression = service.get_chord_progression(
            file_id=loaded.id, track_filter=track, grouping_threshold_ms=threshold
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"   Detected {progression.chord_count} chords")
    clock = TickClock(loaded.summary.tempo_info, loaded.sequence.ppq)
    console.print(f"[blue]Exporting to:[/blue] {output}")
    ProgressionMidiExporter().export(progression, clock, str(output))
    console.print("[green]Render complete![/green]")


def _show_chords_table(progression, clock):
    """Display chords in a table."""
    table = Table(title="Detected Chords")
    table.add_column("Chord", style="cyan")
    table.add_column("Ticks", style="green")
    table.add_column("Time", style="yellow")
    table.add_column("Notes", style="magenta")

    for span in progression.chords:
        table.add_row(
            span.name,
            f"{span.start_tick}-{span.end_tick}",
            f"{clock.ticks_to_seconds(span.start_tick):.2f}-"
            f"{clock.ticks_to_seconds(span.end_tick):.2f}s",
            " ".join(str(n) for n in span.notes),
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
