"""Command-line interface for miditxt.

Provides commands for:
- convert: Convert a folder of MIDI files to text scores
- inspect: Preview the shift and statistics for one MIDI file
"""

from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from .core.constants import (
    DEFAULT_FULL_DIR,
    DEFAULT_INPUT_DIR,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PERFECT_DIR,
    DEFAULT_STATS_FILE,
    DEFAULT_TOLERANCE_MS,
    EXTENDED_MIDI_PATTERNS,
    MIDI_PATTERNS,
)

app = typer.Typer(
    name="miditxt",
    help="MIDI to playable-range text score converter",
    rich_markup_mode="markdown",
)
console = Console()


def _shift_config(no_shift_bonus, octave_bonus, max_shift_penalty, playable_weight):
    from .processing import ShiftConfig

    return ShiftConfig(
        no_shift_bonus=no_shift_bonus,
        octave_bonus=octave_bonus,
        max_shift_penalty=max_shift_penalty,
        playable_weight=playable_weight,
    )


def _print_result(result) -> None:
    """One console line per file."""
    from .pipeline import FileStatus

    if result.status is FileStatus.CONVERTED:
        console.print(f"[green]Converted:[/green] {result.file_name}")
    elif result.status is FileStatus.EMPTY:
        console.print(f"[yellow]No valid notes found in {result.file_name}. Skipping file.[/yellow]")
    else:
        console.print(f"[red]Error reading file {result.file_name}: {result.message}[/red]")


@app.command()
def convert(
    input_dir: Path = typer.Argument(
        Path(DEFAULT_INPUT_DIR), help="Directory containing .mid files"
    ),
    output_dir: Path = typer.Option(
        Path(DEFAULT_OUTPUT_DIR), "-o", "--output", help="Directory for text scores"
    ),
    stats_file: Path = typer.Option(
        Path(DEFAULT_STATS_FILE), "--stats", help="Statistics log file (overwritten)"
    ),
    tolerance: int = typer.Option(
        DEFAULT_TOLERANCE_MS, "-t", "--tolerance", min=0, help="Chord merge window in ms"
    ),
    workers: int = typer.Option(
        1, "-w", "--workers", min=1, help="Parallel worker threads"
    ),
    full_dir: Path = typer.Option(
        Path(DEFAULT_FULL_DIR), "--full-dir", help="Copies of 100% in-range scores"
    ),
    perfect_dir: Path = typer.Option(
        Path(DEFAULT_PERFECT_DIR), "--perfect-dir", help="Copies of unshifted 100% scores"
    ),
    tiers: bool = typer.Option(
        True, "--tiers/--no-tiers", help="Copy scores into tier directories"
    ),
    suffix: str = typer.Option(
        "", "--suffix", help="Extension for output files, e.g. .txt"
    ),
    midi_ext: bool = typer.Option(
        False, "--midi-ext", help="Also convert .midi files (stems must stay unique)"
    ),
    no_shift_bonus: float = typer.Option(0.11, "--no-shift-bonus", help="Bonus for shift 0"),
    octave_bonus: float = typer.Option(0.15, "--octave-bonus", help="Bonus for octave shifts"),
    max_shift_penalty: float = typer.Option(
        0.3, "--max-shift-penalty", help="Penalty at the largest shift"
    ),
    playable_weight: float = typer.Option(
        2.2, "--playable-weight", help="Weight of the playable fraction"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Show a statistics table"
    ),
):
    """Convert every MIDI file in a folder to a text score.

    **Examples:**

        miditxt convert

        miditxt convert midi/ -o songs/ --workers 4

        miditxt convert midi/ --stats stats.txt --no-tiers
    """
    from .input import discover_midi_files
    from .output import StatsLog
    from .pipeline import ConversionConfig, FileStatus, convert_batch

    if not input_dir.is_dir():
        console.print(f"[red]Error: Directory not found: {input_dir}[/red]")
        raise typer.Exit(1)

    files = discover_midi_files(input_dir, EXTENDED_MIDI_PATTERNS if midi_ext else MIDI_PATTERNS)

    config = ConversionConfig(
        tolerance_ms=tolerance,
        shift=_shift_config(no_shift_bonus, octave_bonus, max_shift_penalty, playable_weight),
        output_dir=output_dir,
        full_dir=full_dir,
        perfect_dir=perfect_dir,
        suffix=suffix,
        place_tiers=tiers,
    )
    if not json_output:
        parallel_msg = f" with {workers} workers" if workers > 1 else ""
        console.print(f"[blue]Converting {len(files)} file(s){parallel_msg}...[/blue]")

    with StatsLog(stats_file).create() as stats_log:
        if json_output:
            results = convert_batch(files, config, stats_log, workers=workers)
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TimeElapsedColumn(),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Converting", total=len(files))

                def on_result(result):
                    _print_result(result)
                    progress.advance(task)

                results = convert_batch(
                    files, config, stats_log, workers=workers, on_result=on_result
                )

    if json_output:
        console.print_json(
            data={
                "input": str(input_dir),
                "output": str(output_dir),
                "stats_file": str(stats_file),
                "files": [
                    {
                        "file": r.file_name,
                        "status": r.status.value,
                        "message": r.message,
                        "output": str(r.output_path) if r.output_path else None,
                        "stats": r.stats.to_dict() if r.stats else None,
                    }
                    for r in results
                ],
            }
        )
        return

    if verbose:
        _show_stats_table([r for r in results if r.status is FileStatus.CONVERTED])

    counts = {status: sum(1 for r in results if r.status is status) for status in FileStatus}
    console.print(
        f"  {counts[FileStatus.CONVERTED]} converted, "
        f"{counts[FileStatus.EMPTY]} empty, {counts[FileStatus.ERROR]} failed"
    )
    console.print(f"[green]Conversion complete. Statistics written to {stats_file}[/green]")


@app.command()
def inspect(
    input_file: Path = typer.Argument(..., help="Input MIDI file"),
    tolerance: int = typer.Option(
        DEFAULT_TOLERANCE_MS, "-t", "--tolerance", min=0, help="Chord merge window in ms"
    ),
    lines: int = typer.Option(10, "-n", "--lines", help="Score lines to preview"),
    no_shift_bonus: float = typer.Option(0.11, "--no-shift-bonus", help="Bonus for shift 0"),
    octave_bonus: float = typer.Option(0.15, "--octave-bonus", help="Bonus for octave shifts"),
    max_shift_penalty: float = typer.Option(
        0.3, "--max-shift-penalty", help="Penalty at the largest shift"
    ),
    playable_weight: float = typer.Option(
        2.2, "--playable-weight", help="Weight of the playable fraction"
    ),
):
    """Show the optimal shift and statistics for one MIDI file without writing anything."""
    from .core import DecodeError, EmptyResultError
    from .output import format_line
    from .pipeline import ConversionConfig, Converter

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    converter = Converter(
        ConversionConfig(
            tolerance_ms=tolerance,
            shift=_shift_config(no_shift_bonus, octave_bonus, max_shift_penalty, playable_weight),
        )
    )
    try:
        result = converter.analyze(input_file)
    except DecodeError as e:
        console.print(f"[red]Error reading file {input_file.name}: {e.message}[/red]")
        raise typer.Exit(1)
    except EmptyResultError:
        console.print(f"[yellow]No valid notes found in {input_file.name}.[/yellow]")
        return

    console.print(f"\n[bold]MIDI Info:[/bold] {input_file.name}")
    console.print(f"  Score lines: {len(result.lines)}")
    console.print(f"  Shift score: {result.shift.score:.4f}")
    _show_stats_table([result])

    if lines > 0 and result.lines:
        console.print("\n[bold]Score preview:[/bold]")
        for line in result.lines[:lines]:
            console.print(f"  {format_line(line)}")
        if len(result.lines) > lines:
            console.print(f"  [dim]... and {len(result.lines) - lines} more lines[/dim]")


def _show_stats_table(results: List) -> None:
    """Display per-file statistics in a table."""
    table = Table(title="Conversion Statistics")
    table.add_column("File", style="cyan")
    table.add_column("Shift", style="green")
    table.add_column("Notes", style="yellow")
    table.add_column("Omitted", style="red")
    table.add_column("In range", style="magenta")
    table.add_column("Tiers", style="blue")

    for result in results:
        stats = result.stats
        table.add_row(
            stats.file_name,
            str(stats.shift),
            str(stats.total_notes),
            f"{stats.omitted_notes} ({stats.omitted_percentage:.2f}%)",
            f"{stats.in_range_notes} ({stats.in_range_percentage:.2f}%)",
            ", ".join(sorted(tier.value for tier in stats.tiers)) or "-",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
