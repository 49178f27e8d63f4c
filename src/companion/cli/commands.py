"""CLI commands for the school companion.

Commands:
- ask: Answer a curriculum question with note citations
- math: Step-by-step math explanation with practice quiz
- translate: English -> Kannada translation
- summarize: Parent summary of a list of questions
- notes: Match a classification against the curriculum catalog
- progress / practice / reset-progress: Practice streak tracking
- serve: Run the Web API
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from companion.config.app_config import load_app_config
from companion.core.curriculum import (
    ClassificationQuery,
    CurriculumLoadError,
    InMemoryCurriculumRepository,
    load_curriculum,
)
from companion.core.curriculum_qa import CurriculumQAError, ask_curriculum_question
from companion.core.math_explainer import MathExplanationError, explain_math_problem
from companion.core.note_matcher import match_notes
from companion.core.progress_store import ProgressStorageError, storage_from_config
from companion.core.question_summary import SummaryError, summarize_questions
from companion.core.scope_filter import ScopeCheckError, handle_out_of_scope
from companion.core.streak_tracker import StreakTracker
from companion.core.translator import TranslationError, translate_text
from companion.llm.client import LLMClient, LLMConfig

app = typer.Typer(
    name="companion",
    help="Curriculum-grounded study companion for CBSE classes 5-7.",
    no_args_is_help=True,
)

console = Console()


def _make_client(provider: str | None, model: str | None) -> LLMClient:
    """Build an LLM client, honoring CLI overrides."""
    return LLMClient(config=LLMConfig.from_app_config(provider), model=model)


def _load_repository_or_exit() -> InMemoryCurriculumRepository:
    try:
        return load_curriculum(load_app_config().curriculum_path())
    except CurriculumLoadError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)


def _make_tracker_or_exit() -> StreakTracker:
    try:
        return StreakTracker(storage_from_config(load_app_config()))
    except ProgressStorageError as e:
        console.print(f"[red]✗ Progress storage unavailable: {e}[/red]")
        raise typer.Exit(code=1)


def _print_progress(tracker: StreakTracker) -> None:
    record = tracker.progress
    streak = tracker.streak()

    console.print(f"\n[bold]🔥 Streak:[/bold] {streak} day{'s' if streak != 1 else ''}")

    calendar = Table(show_header=True, header_style="bold")
    cells = tracker.streak_data()
    for day in cells:
        calendar.add_column(day.date.strftime("%a"), justify="center")
    calendar.add_row(*("[green]●[/green]" if d.practiced else "[dim]○[/dim]" for d in cells))
    console.print(calendar)

    if record.chapters_practiced:
        console.print("[bold]Chapters practiced:[/bold]")
        for chapter in record.chapters_practiced:
            console.print(f"  - {chapter}")
    else:
        console.print("[dim]No chapters practiced yet.[/dim]")

    if record.last_practiced:
        console.print(f"[dim]Last practiced: {record.last_practiced}[/dim]")


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question about a school subject"),
    provider: str = typer.Option(None, "--provider", "-p", help="LLM provider"),
    model: str = typer.Option(None, "--model", "-m", help="Model name"),
    check_scope: bool = typer.Option(
        False, "--check-scope", help="Check the syllabus first and suggest topics"
    ),
) -> None:
    """Answer a question from the curriculum notes."""
    repository = _load_repository_or_exit()
    client = _make_client(provider, model)

    with console.status("Thinking..."):
        try:
            if check_scope:
                decision = handle_out_of_scope(question, client=client)
                if not decision.is_relevant:
                    console.print(f"[yellow]{decision.response}[/yellow]")
                    for topic in decision.suggested_topics:
                        console.print(f"  - {topic}")
                    return
            result = ask_curriculum_question(question, repository, client=client)
        except (CurriculumQAError, ScopeCheckError) as e:
            console.print(f"[red]✗ Failed to get an answer from the AI: {e}[/red]")
            raise typer.Exit(code=1)

    console.print(Markdown(result.answer))
    if result.citations:
        console.print(f"\n[dim]Sources: {', '.join(result.citations)}[/dim]")
    if result.subject:
        console.print(
            f"[dim]{result.subject} · Class {result.class_level}"
            f"{' · ' + result.chapter if result.chapter else ''}[/dim]"
        )


@app.command()
def math(
    question: str = typer.Argument(..., help="Math problem to explain"),
    provider: str = typer.Option(None, "--provider", "-p", help="LLM provider"),
    model: str = typer.Option(None, "--model", "-m", help="Model name"),
) -> None:
    """Explain a math problem step by step with a practice quiz."""
    client = _make_client(provider, model)

    with console.status("Working it out..."):
        try:
            result = explain_math_problem(question, client=client)
        except MathExplanationError as e:
            console.print(f"[red]✗ {e}[/red]")
            raise typer.Exit(code=1)

    console.print(Markdown(result.explanation))
    if result.practice_quiz:
        console.print("\n[bold]Practice quiz[/bold]")
        for i, item in enumerate(result.practice_quiz, 1):
            console.print(f"  {i}. {item.question}")
            console.print(f"     [dim]Answer: {item.answer}[/dim]")


@app.command()
def translate(
    query: str = typer.Argument(..., help="e.g. \"How do I say 'Good morning' in Kannada?\""),
    provider: str = typer.Option(None, "--provider", "-p", help="LLM provider"),
    model: str = typer.Option(None, "--model", "-m", help="Model name"),
) -> None:
    """Translate a phrase into Kannada with pronunciation."""
    client = _make_client(provider, model)

    try:
        result = translate_text(query, client=client)
    except TranslationError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    if result.refused:
        console.print(f"[yellow]{result.translated_text}[/yellow]")
        return

    console.print(f"[bold]{result.source_text}[/bold]")
    console.print(f"  {result.translated_text}")
    console.print(f"  [dim]{result.pronunciation}[/dim]")


@app.command()
def summarize(
    questions_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Text file with one question per line"
    ),
    provider: str = typer.Option(None, "--provider", "-p", help="LLM provider"),
    model: str = typer.Option(None, "--model", "-m", help="Model name"),
) -> None:
    """Summarize the questions asked today for a parent."""
    questions = questions_file.read_text(encoding="utf-8").splitlines()
    client = _make_client(provider, model)

    try:
        summary = summarize_questions(questions, client=client)
    except SummaryError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(summary)


@app.command()
def notes(
    subject: str = typer.Option(..., "--subject", "-s", help="Subject, e.g. Math"),
    class_level: int = typer.Option(..., "--class", "-c", min=1, help="Class level"),
    chapter: str = typer.Option("", "--chapter", help="Chapter name or part of it"),
    concept: list[str] = typer.Option([], "--concept", help="Concept (repeatable)"),
) -> None:
    """Show the curriculum notes that match a classification."""
    repository = _load_repository_or_exit()
    query = ClassificationQuery(
        subject=subject,
        class_level=class_level,
        chapter=chapter,
        concepts=list(concept),
    )
    matched = match_notes(query, repository)

    if not matched:
        console.print("[yellow]No matching notes.[/yellow]")
        return

    for note in matched:
        console.print(f"[bold cyan]{note.id}[/bold cyan]")
        console.print(f"  {note.content}\n")


@app.command()
def progress() -> None:
    """Show practice streak and chapters practiced."""
    _print_progress(_make_tracker_or_exit())


@app.command()
def practice(
    chapter: str = typer.Argument(..., help="Chapter practiced today"),
) -> None:
    """Record practice of a chapter today."""
    tracker = _make_tracker_or_exit()
    tracker.record_practice(chapter)
    console.print(f"[green]✓ Recorded practice: {chapter}[/green]")
    _print_progress(tracker)


@app.command(name="reset-progress")
def reset_progress(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Erase all practice progress. This cannot be undone."""
    if not yes and not typer.confirm("Erase all progress?"):
        console.print("Cancelled.")
        raise typer.Exit()

    _make_tracker_or_exit().reset_progress()
    console.print("[green]✓ Progress reset[/green]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
) -> None:
    """Run the Web API with uvicorn."""
    import uvicorn

    uvicorn.run("companion.web.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
