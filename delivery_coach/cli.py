"""CLI interface for the delivery coach."""

import warnings
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from . import __version__
from .analyzer import FixedVoiceMetrics, SpeechAnalyzer
from .audio import discover_audio_files, SUPPORTED_EXTENSIONS
from .coaching import build_spoken_feedback
from .config import AnalysisConfig, DEFAULT_MINIMUM_PAUSE, DEFAULT_SILENCE_THRESHOLD
from .formatters import FORMATTERS, EXTENSIONS
from .lexicon import FILLER_WORDS
from .ratings import RatingTone, tone_for
from .session import FeedbackSession
from .transcript import SidecarTranscripts, find_sidecar
from .types import AnalysisResult, FeedbackCategory, VoiceMetrics

app = typer.Typer(
    name="coach",
    help="Rate the delivery of recorded speeches and suggest improvements.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

TONE_STYLES = {
    RatingTone.POSITIVE: "green",
    RatingTone.NEUTRAL: "blue",
    RatingTone.CAUTION: "yellow",
    RatingTone.NEGATIVE: "red",
}


def parse_formats(format_str: str) -> list[str]:
    """Parse comma-separated format string into list of formats."""
    formats = []
    for part in format_str.split(","):
        fmt = part.strip().lower()
        if fmt == "all":
            return list(FORMATTERS.keys())
        if fmt and fmt in FORMATTERS:
            formats.append(fmt)
        elif fmt:
            err_console.print(f"[yellow]Warning: Unknown format '{fmt}', ignoring[/yellow]")
    return formats or ["txt"]  # Default to txt if nothing valid


def version_callback(value: bool) -> None:
    if value:
        console.print(f"coach {__version__}")
        raise typer.Exit()


def list_fillers_callback(value: bool) -> None:
    """Print the filler lexicon and exit."""
    if value:
        console.print("[bold]Filler words:[/bold]")
        for word in sorted(FILLER_WORDS):
            console.print(f"  {word}")
        raise typer.Exit()


def _build_voice_metrics(
    pitch: float | None,
    pitch_variability: float | None,
    jitter: float | None,
    shimmer: float | None,
) -> VoiceMetrics | None:
    """Voice metrics from CLI options, or None when none were given."""
    if pitch is None and pitch_variability is None and jitter is None and shimmer is None:
        return None
    return VoiceMetrics(
        pitch_hz=pitch,
        pitch_variability=pitch_variability,
        jitter=jitter,
        shimmer=shimmer,
    )


def print_result(result: AnalysisResult, console: Console, top: int) -> None:
    """Print a rich summary of one result."""
    session = FeedbackSession(result)
    console.print(f"[bold]Overall score: {result.overall_score}/100[/bold]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Category")
    table.add_column("Rating")
    table.add_column("Score", justify="right")
    for category in FeedbackCategory:
        rating = result.rating_for(category)
        style = TONE_STYLES[tone_for(category, rating.label)]
        table.add_row(category.display_name, f"[{style}]{rating.label}[/{style}]", str(rating.score))
    console.print(table)

    for point in session.top_feedback(top):
        console.print(f"  • {point.text}")
    suggestions = session.prioritized_suggestions()
    if suggestions:
        console.print(f"  [cyan]Tip:[/cyan] {suggestions[0].text}")


def _write_outputs(
    result: AnalysisResult,
    audio_path: Path,
    formats: list[str],
    output: Path | None,
    console: Console,
    verbose: bool,
) -> None:
    """Write one report per requested format."""
    out_dir = output or audio_path.parent

    for fmt in formats:
        out_file = out_dir / (audio_path.stem + EXTENSIONS[fmt])
        content = FORMATTERS[fmt](result)
        out_file.write_text(content, encoding="utf-8")

        if verbose:
            console.print(f"  [green]✓[/green] {out_file}")


def _show_dry_run(
    audio_files: list[Path],
    formats: list[str],
    output: Path | None,
    transcript: Path | None,
    console: Console,
) -> None:
    """List recordings, their transcripts and the reports that would be written."""
    console.print(f"[bold]Would analyze {len(audio_files)} file(s):[/bold]")
    for audio_path in audio_files:
        source = transcript or find_sidecar(audio_path)
        label = str(source) if source else "[red]no transcript found[/red]"
        console.print(f"  {audio_path} (transcript: {label})")
        out_dir = output or audio_path.parent
        for fmt in formats:
            out_file = out_dir / (audio_path.stem + EXTENSIONS[fmt])
            console.print(f"    → {out_file}")


def _process_file(
    audio_path: Path,
    analyzer: SpeechAnalyzer,
    formats: list[str],
    output: Path | None,
    top: int,
    script: bool,
    speaking_rate: float | None,
    console: Console,
    err_console: Console,
    verbose: bool,
) -> bool:
    """Analyze a single audio file. Returns True on success, False on error."""
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = analyzer.analyze_file(audio_path, speaking_rate=speaking_rate)
        for warning in caught:
            err_console.print(f"[yellow]Warning ({audio_path.name}): {warning.message}[/yellow]")

        console.print(f"\n[bold cyan]{audio_path.name}[/bold cyan]")
        print_result(result, console, top)
        if script:
            console.print(f"\n[dim]{build_spoken_feedback(result)}[/dim]")
        _write_outputs(result, audio_path, formats, output, console, verbose)
        return True
    except Exception as e:
        err_console.print(f"[red]Error processing {audio_path}: {e}[/red]")
        return False


def _process_files(
    audio_files: list[Path],
    analyzer: SpeechAnalyzer,
    formats: list[str],
    output: Path | None,
    top: int,
    script: bool,
    speaking_rate: float | None,
    verbose: bool,
    fail_fast: bool,
) -> tuple[int, int]:
    """Analyze every recording. Returns (success_count, error_count)."""
    success_count = 0
    error_count = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        disable=not verbose and len(audio_files) == 1,
    ) as progress:
        task = progress.add_task("Analyzing...", total=len(audio_files))

        for audio_path in audio_files:
            progress.update(task, description=f"[cyan]{audio_path.name}[/cyan]")

            if _process_file(
                audio_path,
                analyzer,
                formats,
                output,
                top,
                script,
                speaking_rate,
                console,
                err_console,
                verbose,
            ):
                success_count += 1
            else:
                error_count += 1
                if fail_fast:
                    raise typer.Exit(1)

            progress.advance(task)

    return success_count, error_count


def _print_summary(
    audio_files: list[Path],
    success_count: int,
    error_count: int,
    verbose: bool,
    console: Console,
) -> None:
    """Print how many recordings were analyzed."""
    if len(audio_files) > 1 or verbose:
        console.print()
        console.print(
            f"[bold green]✓ {success_count} file(s) analyzed[/bold green]"
            + (f", [bold red]{error_count} error(s)[/bold red]" if error_count else "")
        )


@app.command()
def main(
    inputs: Annotated[
        list[Path],
        typer.Argument(
            help="Audio files or directories to analyze",
            exists=True,
        ),
    ],
    transcript: Annotated[
        Path | None,
        typer.Option(
            "--transcript", "-T",
            help="Transcript file (.txt or .json) for a single input. "
                 "Default: file with the audio's name and a .json or .txt suffix",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output", "-o",
            help="Output directory (default: same as input file)",
        ),
    ] = None,
    format: Annotated[
        str,
        typer.Option(
            "--format", "-f",
            help="Report format(s): txt, json, or 'all'. Comma-separated.",
        ),
    ] = "txt",
    recursive: Annotated[
        bool,
        typer.Option(
            "--recursive", "-r",
            help="Search directories recursively",
        ),
    ] = False,
    min_pause: Annotated[
        float,
        typer.Option(
            "--min-pause",
            help="Shortest silence reported as a pause, in seconds",
        ),
    ] = DEFAULT_MINIMUM_PAUSE,
    silence_threshold: Annotated[
        float,
        typer.Option(
            "--silence-threshold",
            help="RMS level below which audio counts as silence (0-1)",
        ),
    ] = DEFAULT_SILENCE_THRESHOLD,
    pitch: Annotated[
        float | None,
        typer.Option("--pitch", help="Average voice pitch in Hz"),
    ] = None,
    pitch_variability: Annotated[
        float | None,
        typer.Option("--pitch-variability", help="Pitch variability in Hz"),
    ] = None,
    jitter: Annotated[
        float | None,
        typer.Option("--jitter", help="Jitter as a fraction (e.g. 0.015)"),
    ] = None,
    shimmer: Annotated[
        float | None,
        typer.Option("--shimmer", help="Shimmer in dB"),
    ] = None,
    speaking_rate: Annotated[
        float | None,
        typer.Option(
            "--speaking-rate",
            help="Words per minute measured by the transcription service",
        ),
    ] = None,
    top: Annotated[
        int,
        typer.Option("--top", help="Number of top feedback points to print"),
    ] = 3,
    script: Annotated[
        bool,
        typer.Option("--script", help="Print the spoken feedback script"),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show what would be processed without analyzing",
        ),
    ] = False,
    fail_fast: Annotated[
        bool,
        typer.Option(
            "--fail-fast/--continue-on-error",
            help="Stop on first error vs continue processing",
        ),
    ] = False,
    list_fillers_flag: Annotated[
        bool | None,
        typer.Option(
            "--list-fillers",
            callback=list_fillers_callback,
            is_eager=True,
            help="List the filler words that are counted and exit",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose", "-v",
            help="Show detailed progress",
        ),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """Analyze recorded speeches and report delivery ratings and feedback."""
    if top < 0:
        raise typer.BadParameter("Must be >= 0", param_hint="--top")

    try:
        config = AnalysisConfig(
            silence_threshold=silence_threshold,
            minimum_pause_duration=min_pause,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--silence-threshold/--min-pause")

    formats = parse_formats(format)

    audio_files = discover_audio_files(inputs, recursive=recursive)

    if not audio_files:
        err_console.print("[red]No audio files found.[/red]")
        err_console.print(f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}")
        raise typer.Exit(1)

    if transcript and len(audio_files) > 1:
        raise typer.BadParameter(
            "A single transcript can only be used with a single audio file",
            param_hint="--transcript",
        )

    # Reports go next to each input unless -o is given
    if output:
        output.mkdir(parents=True, exist_ok=True)

    # Dry run lists inputs, transcripts and report paths
    if dry_run:
        _show_dry_run(audio_files, formats, output, transcript, console)
        raise typer.Exit(0)

    voice = _build_voice_metrics(pitch, pitch_variability, jitter, shimmer)
    analyzer = SpeechAnalyzer(
        config=config,
        transcript_source=SidecarTranscripts(transcript),
        voice_analyzer=FixedVoiceMetrics(voice) if voice else None,
    )

    if verbose:
        console.print(
            f"[dim]Silence threshold {config.silence_threshold}, "
            f"minimum pause {config.minimum_pause_duration}s[/dim]"
        )

    success_count, error_count = _process_files(
        audio_files,
        analyzer,
        formats,
        output,
        top,
        script,
        speaking_rate,
        verbose,
        fail_fast,
    )

    _print_summary(audio_files, success_count, error_count, verbose, console)

    if error_count and not fail_fast:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
