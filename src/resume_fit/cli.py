"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from resume_fit.clients.llm_client import LLMClient
from resume_fit.config import AppConfig, load_config
from resume_fit.errors import ResumeFitError
from resume_fit.logging.usage_store import UsageStore
from resume_fit.parsers.text_loader import load_text
from resume_fit.pipeline.analyzer import ResumeAnalyzer
from resume_fit.rate_limit import RateLimiter
from resume_fit.service import AnalysisOutcome, AnalysisService
from resume_fit.storage.analysis_store import AnalysisStore

app = typer.Typer(
    name="resume-fit",
    help="Score a resume against a job description",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _build_service(config: AppConfig) -> AnalysisService:
    llm = LLMClient(timeout=config.llm.timeout)
    analyzer = ResumeAnalyzer(
        llm,
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
        max_retries=config.llm.max_retries,
        max_resume_chars=config.prompt.max_resume_chars,
        max_job_description_chars=config.prompt.max_job_description_chars,
    )
    return AnalysisService(
        analyzer,
        store=AnalysisStore(config.storage.resolved_db_path),
        usage_store=UsageStore(config.storage.resolved_usage_db_path),
        rate_limiter=RateLimiter(
            max_requests=config.rate_limit.max_requests,
            window_seconds=config.rate_limit.window_seconds,
        ),
    )


def _print_outcome(outcome: AnalysisOutcome) -> None:
    result = outcome.result
    console.print(
        Panel(
            f"Match: [bold]{result.match_score}[/bold] | ATS: [bold]{result.ats_score}[/bold]\n\n"
            f"{result.role_fit_summary}",
            title="Analysis",
        )
    )

    if result.missing_skills:
        console.print("\n[yellow]Missing skills:[/yellow]")
        for skill in result.missing_skills:
            console.print(f"  - {skill}")

    if result.resume_strengths:
        console.print("\n[green]Strengths:[/green]")
        for strength in result.resume_strengths:
            console.print(f"  - {strength}")

    table = Table(title="Improvements")
    table.add_column("Priority")
    table.add_column("Category")
    table.add_column("Suggestion")
    for item in outcome.legacy.improvements:
        table.add_row(item.priority, item.category, item.description)
    if outcome.legacy.improvements:
        console.print(table)

    for issue in outcome.audit.issues:
        console.print(f"[dim]audit: {issue}[/dim]")
    if outcome.analysis_id:
        console.print(f"\n[dim]Saved as {outcome.analysis_id}[/dim]")


@app.command()
def analyze(
    resume: Path = typer.Option(..., "--resume", help="Resume file (PDF/DOCX/TXT/MD)"),
    jd: Path = typer.Option(..., "--jd", help="Job description file"),
    stream: bool = typer.Option(False, "--stream", help="Show partial results while the model writes"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    legacy: bool = typer.Option(False, "--legacy", help="With --json, print the legacy shape"),
    no_save: bool = typer.Option(False, "--no-save", help="Do not store the result"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Analyze a resume against a job description."""
    _setup_logging(verbose)
    for path, label in ((resume, "Resume"), (jd, "Job description")):
        if not path.exists():
            console.print(f"[red]{label} file not found: {path}[/red]")
            raise typer.Exit(1)

    config = load_config()
    service = _build_service(config)
    try:
        resume_text = load_text(resume)
        jd_text = load_text(jd)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    if verbose:
        console.print(f"[dim]Resume: {len(resume_text)} chars, JD: {len(jd_text)} chars[/dim]")

    try:
        if stream:
            outcome = asyncio.run(_run_stream(service, resume_text, jd_text, not no_save, quiet=as_json))
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task("Analyzing resume...", total=None)
                outcome = asyncio.run(service.analyze(resume_text, jd_text, save=not no_save))
    except ResumeFitError as exc:
        console.print(f"[red]{type(exc).__name__}: {exc}[/red]")
        raise typer.Exit(1)

    if as_json:
        if legacy:
            payload = outcome.legacy.model_dump(mode="json", by_alias=True)
        else:
            payload = outcome.result.model_dump(mode="json")
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        _print_outcome(outcome)


async def _run_stream(
    service: AnalysisService,
    resume_text: str,
    jd_text: str,
    save: bool,
    quiet: bool,
) -> AnalysisOutcome:
    outcome = None
    async for event in service.stream(resume_text, jd_text, save=save):
        if event.status == "complete":
            outcome = event.outcome
        elif not quiet:
            fields = event.partial.model_dump(exclude_none=True)
            console.print(f"[dim]... {', '.join(f'{k}={v!r}' for k, v in fields.items())}[/dim]")
    return outcome


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of entries (max 100)"),
    offset: int = typer.Option(0, "--offset", help="Entries to skip"),
) -> None:
    """List stored analyses, newest first."""
    config = load_config()
    store = AnalysisStore(config.storage.resolved_db_path)
    entries = store.history(limit=limit, offset=offset)
    if not entries:
        console.print("[dim]No analyses stored yet.[/dim]")
        return

    table = Table(title="Analysis history")
    table.add_column("ID", style="dim")
    table.add_column("Position")
    table.add_column("Company")
    table.add_column("Match", justify="right")
    table.add_column("ATS", justify="right")
    table.add_column("Created")
    for entry in entries:
        table.add_row(
            entry.id,
            entry.job_title,
            entry.company or "-",
            str(entry.match_score),
            str(entry.ats_score),
            entry.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command()
def show(
    analysis_id: str = typer.Argument(help="Analysis ID from `history`"),
    legacy: bool = typer.Option(False, "--legacy", help="Print the legacy shape"),
) -> None:
    """Print a stored analysis as JSON."""
    from resume_fit.pipeline.legacy_adapter import to_legacy

    config = load_config()
    store = AnalysisStore(config.storage.resolved_db_path)
    try:
        stored = store.get(analysis_id)
    except ResumeFitError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    if legacy:
        payload = to_legacy(stored.result).model_dump(mode="json", by_alias=True)
    else:
        payload = stored.result.model_dump(mode="json")
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.command()
def usage(
    limit: int = typer.Option(10, "--limit", "-n", help="Recent requests to list"),
) -> None:
    """Show request usage and estimated cost."""
    config = load_config()
    store = UsageStore(config.storage.resolved_usage_db_path)
    summary = store.get_summary()
    console.print(
        Panel(
            f"Requests: {summary['total_requests']} | "
            f"Success: {summary['success_rate']:.1f}%\n"
            f"Tokens: {summary['total_input_tokens']} in / {summary['total_output_tokens']} out\n"
            f"Avg latency: {summary['avg_latency_ms'] or 0} ms | "
            f"Cost: ${summary['total_cost_usd']:.4f}",
            title="Usage",
        )
    )
    for log in store.get_logs(limit=limit):
        status = "[green]ok[/green]" if log.success else f"[red]{log.status_code}[/red]"
        console.print(
            f"{log.timestamp:%Y-%m-%d %H:%M:%S} {log.endpoint:<8} {status} "
            f"{log.latency_ms} ms {log.tokens_used} tok"
        )


if __name__ == "__main__":
    app()
