#!/usr/bin/env python3
"""DeepRabbit CLI - Entry point for guided discovery sessions.

Usage:
    # Interactive session across all eight discovery areas
    python main.py --account "Acme Corp" --icp healthcare_medical \\
        --business-area "patient intake" --context "HIPAA audit findings"

    # Replay notes captured elsewhere and produce the report
    python main.py --account "Acme Corp" --icp construction --business-area "field ops" \\
        --context "failed ERP rollout" --notes ./notes.json

    # Score a set of notes without starting a session
    python main.py --notes ./notes.json --completeness-only
"""

import sys
import json
from pathlib import Path
from typing import Dict, List, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from contracts import ClientICP, CompletenessReport, NextStepGoal, SolutionScope
from elicitation import assess_note_quality, calculate_discovery_completeness
from orchestrator import DiscoverySessionManager
from providers import list_providers as get_available_providers
from research import FirecrawlClient, ResearchError
from config import settings


console = Console()

IMPORTED_QUESTION = "(imported note)"


def _choice_names(enum_cls) -> List[str]:
    return [member.name.lower() for member in enum_cls]


def read_notes_file(notes_path: str) -> Dict[str, List[str]]:
    """Read a JSON map of area name -> list of note strings.

    Raises:
        click.BadParameter: If the file is not such a map
    """
    try:
        data = json.loads(Path(notes_path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{notes_path} is not valid JSON: {e}")

    if not isinstance(data, dict) or not all(
        isinstance(notes, list) and all(isinstance(n, str) for n in notes)
        for notes in data.values()
    ):
        raise click.BadParameter(f"{notes_path} must map area names to lists of notes")
    return data


def print_completeness(report: CompletenessReport, notes_per_area: Dict[str, List[str]]) -> None:
    table = Table(title="Discovery Completeness")
    table.add_column("Area")
    table.add_column("Notes", justify="right")
    table.add_column("Quality")

    for area, notes in notes_per_area.items():
        quality = assess_note_quality(" ".join(notes)).overall_quality.value if notes else "-"
        table.add_row(area, str(len(notes)), quality)

    console.print(table)
    color = {"high": "green", "medium": "yellow"}.get(report.quality.value, "red")
    console.print(
        f"[bold]Completeness:[/bold] [{color}]{report.percentage}% ({report.quality.value})[/{color}]"
    )
    if report.gaps:
        console.print("\n[yellow]Gaps:[/yellow]")
        for gap in report.gaps:
            console.print(f"  - {gap}")


def fetch_research_context(website: str) -> Optional[str]:
    """Scrape the prospect website into report context; None on failure."""
    try:
        context = FirecrawlClient().extract_business_context(website)
    except ResearchError as e:
        console.print(f"[yellow]Website research skipped:[/yellow] {e}")
        return None

    lines = [f"Company: {context.company_name}"]
    if context.description:
        lines.append(f"Description: {context.description}")
    if context.services:
        lines.append(f"Services: {', '.join(context.services)}")
    if context.industries:
        lines.append(f"Industries: {', '.join(context.industries)}")
    lines.append(context.content[: settings.research_content_chars])
    return "\n".join(lines)


def run_interactive(manager: DiscoverySessionManager, verbose: bool) -> None:
    """Ask questions area by area until the heuristics say move on."""
    min_depth = manager.depth_manager.MIN_DEPTH
    for area in manager.areas:
        console.print(f"\n[bold blue]== {area} ==[/bold blue]")
        while manager.should_continue(area):
            result = manager.next_question(area)
            console.print(Panel(result.question, title=f"Q{result.depth + 1}", border_style="cyan"))
            if verbose:
                console.print(f"[dim]Guidance: {result.guidance}[/dim]")
                console.print(f"[dim]Reasoning: {result.reasoning} ({result.source.value})[/dim]")

            answer = click.prompt("Notes", default="", show_default=False)
            if not answer.strip():
                if manager.notes[area].depth >= min_depth:
                    break
                console.print(f"[yellow]At least {min_depth} answers are needed in each area.[/yellow]")
                continue
            manager.record_response(area, result.question, answer.strip())


@click.command()
@click.option("--account", "-a", help="Prospect account name")
@click.option("--contact", default="", help="Contact name")
@click.option("--role", default="", help="Contact role")
@click.option(
    "--icp",
    type=click.Choice(_choice_names(ClientICP)),
    default=None,
    help="Client industry profile"
)
@click.option("--business-area", help="Part of the business under discussion")
@click.option("--context", "discovery_context", help="Catalyst for the conversation")
@click.option(
    "--scope",
    type=click.Choice(_choice_names(SolutionScope)),
    default="custom_development",
    help="Expected solution scope"
)
@click.option(
    "--next-step",
    type=click.Choice(_choice_names(NextStepGoal)),
    default="technical_deep_dive",
    help="Goal for the next meeting"
)
@click.option("--areas", default=None, help="Comma-separated discovery areas (default: all eight)")
@click.option("--website", default=None, help="Prospect website to research for the report")
@click.option(
    "--notes", "notes_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON file mapping area -> list of notes"
)
@click.option("--completeness-only", is_flag=True, help="Only score the --notes file")
@click.option(
    "--max-cost",
    type=float,
    default=None,
    help=f"Maximum LLM cost in USD (default: ${settings.max_cost_per_session_usd})"
)
@click.option("--output", "-o", "output_dir", default=None, help="Output directory (default: ./outputs)")
@click.option(
    "--provider", "-p",
    type=click.Choice(["openai", "anthropic"]),
    default=None,
    help="LLM provider (default: openai)"
)
@click.option("--model", default=None, help="Model name (e.g., gpt-4o, claude-sonnet-4)")
@click.option("--mock", is_flag=True, help="Use template questions and reports, no LLM calls")
@click.option("--list-providers", is_flag=True, help="List available providers and exit")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(
    account: Optional[str],
    contact: str,
    role: str,
    icp: Optional[str],
    business_area: Optional[str],
    discovery_context: Optional[str],
    scope: str,
    next_step: str,
    areas: Optional[str],
    website: Optional[str],
    notes_path: Optional[str],
    completeness_only: bool,
    max_cost: Optional[float],
    output_dir: Optional[str],
    provider: Optional[str],
    model: Optional[str],
    mock: bool,
    list_providers: bool,
    verbose: bool,
):
    """DeepRabbit: guided B2B discovery sessions.

    Proposes the next question per discovery area, decides when an area has
    been explored deeply enough, scores session completeness and writes a
    business report.
    """
    if list_providers:
        console.print("[bold]Available LLM Providers:[/bold]\n")
        for name, available in get_available_providers().items():
            status = "[green]✓ Ready[/green]" if available else "[red]✗ No API key[/red]"
            console.print(f"  {name:12} {status}")
        console.print("\n[dim]Set API keys via environment variables:[/dim]")
        console.print("  OPENAI_API_KEY, ANTHROPIC_API_KEY (or DEEPRABBIT_-prefixed)")
        return

    notes_per_area = read_notes_file(notes_path) if notes_path else None

    if completeness_only:
        if notes_per_area is None:
            console.print("[red]Error: --completeness-only requires --notes[/red]")
            sys.exit(1)
        print_completeness(calculate_discovery_completeness(notes_per_area), notes_per_area)
        return

    missing = [
        flag for flag, value in (
            ("--account", account),
            ("--icp", icp),
            ("--business-area", business_area),
            ("--context", discovery_context),
        ) if not value
    ]
    if missing:
        console.print(f"[red]Error: {', '.join(missing)} required[/red]")
        sys.exit(1)

    if mock:
        settings.mock_ai_responses = True

    console.print(Panel.fit(
        "[bold blue]DeepRabbit[/bold blue]\n"
        "[dim]Guided discovery sessions[/dim]",
        border_style="blue"
    ))
    if provider or model:
        console.print(f"\n[dim]Provider:[/dim] {provider or 'auto-detect'}")
        if model:
            console.print(f"[dim]Model:[/dim] {model}")

    if notes_per_area is not None:
        area_list = list(notes_per_area.keys())
    elif areas:
        area_list = [a.strip() for a in areas.split(",") if a.strip()]
    else:
        area_list = None

    manager = DiscoverySessionManager(
        provider=provider,
        model=model,
        max_cost_usd=max_cost,
        output_dir=output_dir,
    )
    manager.start_session(
        account_name=account,
        client_icp=ClientICP[icp.upper()],
        business_area=business_area,
        discovery_context=discovery_context,
        contact_name=contact,
        contact_role=role,
        solution_scope=SolutionScope[scope.upper()],
        next_step_goal=NextStepGoal[next_step.upper()],
        areas=area_list,
    )

    if notes_per_area is not None:
        for area, notes in notes_per_area.items():
            for note in notes:
                manager.record_response(area, IMPORTED_QUESTION, note)
        console.print(f"[dim]Imported notes for {len(notes_per_area)} areas[/dim]")
    else:
        run_interactive(manager, verbose)

    console.print("\n" + "=" * 60)
    print_completeness(
        manager.completeness(),
        {area: note.note_texts for area, note in manager.notes.items()},
    )

    research_context = fetch_research_context(website) if website else None

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Generating report...", total=None)
        report = manager.generate_report(research_context)
        progress.update(task, completed=True)

    output_path = manager.save()

    console.print(f"\n[green]Report:[/green] {report.source.value}, confidence {report.confidence_score:.0%}")
    cost = manager.cost_controller
    if cost.records:
        console.print("\n[bold]Cost Summary:[/bold]")
        console.print(f"  Input tokens:  {cost.total_input_tokens:,}")
        console.print(f"  Output tokens: {cost.total_output_tokens:,}")
        console.print(f"  Total cost:    ${cost.total_cost_usd:.4f}")
    console.print(f"\n[bold]Output saved to:[/bold] {output_path}")
    console.print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
