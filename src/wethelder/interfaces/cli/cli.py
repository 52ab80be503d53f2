"""Command-line interface for WetHelder verified source search."""

import asyncio
import json
import logging
import os
import sys
from typing import List, Optional

# Set UTF-8 encoding for Windows compatibility
if sys.platform == "win32":
    os.environ["PYTHONIOENCODING"] = "utf-8"

from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ...application.workflow import VerifiedSearchWorkflow, build_workflow
from ...config.settings import get_settings
from ...domain.models import AggregatedResultSet, SourceTag

console = Console(force_terminal=True, legacy_windows=False)
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
    )


def _create_workflow() -> VerifiedSearchWorkflow:
    """Create and configure the workflow with dependency injection."""
    settings = get_settings()
    _configure_logging(settings.log_level)
    return build_workflow(settings)


def _print_error(message: str) -> None:
    console.print(
        Panel(
            f"[red]Error:[/red] {message}",
            title="[bold red]Error[/bold red]",
            border_style="red",
        )
    )


def _print_header(query: str) -> None:
    header = Panel(
        Text(query, style="bold bright_white"),
        title="[bold cyan]Verified Legal Source Search[/bold cyan]",
        border_style="cyan",
        padding=(1, 2),
    )
    console.print(header)
    console.print()


def _result_set_to_dict(results: AggregatedResultSet) -> dict:
    """JSON-ready representation of a result set."""
    payload = results.summary()
    payload.update(
        {
            "query": results.query,
            "evidenceWithheld": results.evidence_withheld,
            "timestamp": results.timestamp.isoformat(),
            "sources": {
                tag.value: [
                    {
                        "title": r.title,
                        "link": r.link,
                        "displayLink": r.display_link,
                        "isCurrentYear": r.is_current_year,
                        "reason": r.validation.reason,
                        "years": list(r.validation.extracted_years),
                    }
                    for r in items
                ]
                for tag, items in results.per_tag_results.items()
            },
            "combinedEvidenceText": results.combined_evidence_text,
        }
    )
    return payload


def _print_result(results: AggregatedResultSet) -> None:
    """Print the result set with rich formatting."""
    stats = Table(
        title="[bold]Search Statistics[/bold]",
        show_header=True,
        header_style="bold yellow",
        border_style="yellow",
        padding=(0, 1),
        box=None,
    )
    stats.add_column("Metric", style="bright_white")
    stats.add_column("Value", style="bright_cyan", justify="right")
    stats.add_row("Total results", str(results.total_count))
    stats.add_row("Current year", str(results.current_year_count))
    stats.add_row("Outdated", str(results.outdated_count))
    stats.add_row("Historical query", "yes" if results.is_historical_query else "no")
    console.print(stats)
    console.print()

    if results.per_tag_results:
        ref_table = Table(
            title="[bold]Sources[/bold]",
            show_header=True,
            header_style="bold magenta",
            border_style="magenta",
            padding=(0, 1),
        )
        ref_table.add_column("Tag", style="dim")
        ref_table.add_column("Title", style="cyan", no_wrap=False)
        ref_table.add_column("URL", style="dim blue", overflow="fold")
        ref_table.add_column("Freshness", no_wrap=False)

        for tag, items in results.per_tag_results.items():
            for r in items:
                style = "green" if r.is_current_year else "red"
                ref_table.add_row(
                    tag.value, r.title, r.link, f"[{style}]{r.validation.reason}[/{style}]"
                )
        console.print(ref_table)
        console.print()

    border = "red" if results.evidence_withheld else "blue"
    console.print(
        Panel(
            Markdown(results.combined_evidence_text)
            if results.evidence_withheld
            else Text(results.combined_evidence_text),
            title="[bold]Evidence[/bold]",
            border_style=border,
            padding=(1, 2),
        )
    )


async def _search(
    query: str,
    tags: Optional[List[SourceTag]] = None,
    json_output: bool = False,
    show_prompt: bool = False,
    ask_model: bool = False,
) -> int:
    """Run the workflow for a query and print results.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    try:
        workflow = _create_workflow()

        if not json_output:
            _print_header(query)

        answer = None
        with console.status("[cyan]Searching verified sources...[/cyan]", spinner="dots"):
            if ask_model:
                if workflow.llm_client is None:
                    _print_error("--answer requires OPENAI_API_KEY")
                    return 1
                outcome, answer = await workflow.answer(query, tags=tags)
            else:
                outcome = await workflow.execute(query, tags=tags)

        if not outcome.success:
            _print_error(outcome.error or "search failed")
            return 1

        if json_output:
            payload = _result_set_to_dict(outcome.search_results)
            if show_prompt:
                payload["prompt"] = outcome.prompt
            if answer is not None:
                payload["answer"] = answer
            console.print_json(json.dumps(payload, ensure_ascii=False))
            return 0

        _print_result(outcome.search_results)
        if show_prompt:
            console.print(Panel(Text(outcome.prompt), title="[bold]Prompt[/bold]", border_style="dim"))
        if answer is not None:
            console.print(
                Panel(Markdown(answer), title="[bold green]Answer[/bold green]", border_style="green")
            )
        return 0
    except Exception as e:
        _print_error(str(e))
        return 1


def _print_help() -> None:
    """Print help message."""
    help_content = Text()
    help_content.append("WetHelder CLI", style="bold cyan")
    help_content.append(" - Verified Dutch legal sources\n\n", style="white")

    help_content.append("Usage:\n", style="bold")
    help_content.append("  wethelder", style="cyan")
    help_content.append(" <query>", style="yellow")
    help_content.append("              Search all verified sources\n", style="dim")
    help_content.append("  wethelder", style="cyan")
    help_content.append(" --tag=<tag> <query>", style="yellow")
    help_content.append("  Restrict to a source category (repeatable)\n", style="dim")
    help_content.append("  wethelder", style="cyan")
    help_content.append(" --json <query>", style="yellow")
    help_content.append("       Output results as JSON\n", style="dim")
    help_content.append("  wethelder", style="cyan")
    help_content.append(" --prompt <query>", style="yellow")
    help_content.append("     Show the assembled model prompt\n", style="dim")
    help_content.append("  wethelder", style="cyan")
    help_content.append(" --answer <query>", style="yellow")
    help_content.append("     Ask the language model for an answer\n\n", style="dim")

    help_content.append("Tags: ", style="bold")
    help_content.append(", ".join(t.value for t in SourceTag) + "\n\n", style="dim")

    help_content.append("Environment Variables:\n", style="bold")
    help_content.append("  GOOGLE_API_KEY", style="yellow")
    help_content.append("   Google Custom Search API key (required)\n", style="dim")
    help_content.append("  GOOGLE_CSE_ID", style="yellow")
    help_content.append("    Programmable Search Engine id (required)\n", style="dim")
    help_content.append("  OPENAI_API_KEY", style="yellow")
    help_content.append("   Model API key (for --answer)\n", style="dim")

    console.print(
        Panel(
            help_content,
            title="[bold bright_blue]Help[/bold bright_blue]",
            border_style="bright_blue",
            padding=(1, 2),
        )
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Usage:
        wethelder <query>               # Search all verified sources
        wethelder --tag=wetten <query>  # Restrict to one category
        wethelder --json <query>        # Output as JSON
        wethelder --help                # Show help

    Returns:
        Exit code (0 for success, 1 for error).
    """
    args = list(sys.argv[1:] if argv is None else argv)

    if not args or args[0] in ("-h", "--help"):
        _print_help()
        return 0

    json_output = show_prompt = ask_model = False
    tags: List[SourceTag] = []
    words: List[str] = []
    for arg in args:
        if arg == "--json":
            json_output = True
        elif arg == "--prompt":
            show_prompt = True
        elif arg == "--answer":
            ask_model = True
        elif arg.startswith("--tag="):
            value = arg.split("=", 1)[1]
            try:
                tags.append(SourceTag(value))
            except ValueError:
                _print_error(f"unknown tag '{value}'")
                return 1
        else:
            words.append(arg)

    query = " ".join(words)
    if not query.strip():
        _print_error("Query cannot be empty")
        return 1

    return asyncio.run(
        _search(
            query,
            tags=tags or None,
            json_output=json_output,
            show_prompt=show_prompt,
            ask_model=ask_model,
        )
    )


if __name__ == "__main__":
    sys.exit(main())
