"""Main CLI entry point for the wa-leads command."""

import click
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from typing import Optional

from ..core.answers import LeadAnswers, Timeline, CapitalType, CashBand, BondBand
from ..core.scorer import LeadScorer, Priority
from ..intake.errors import AccountCreationError, IntakeValidationError
from ..intake.wizard import IntakeSession, IntakeStep
from ..storage.database import LeadDatabase

console = Console()

PRIORITY_COLORS = {"HOT": "red", "WARM": "yellow", "COLD": "dim"}


def get_db(db_path: Optional[str] = None) -> LeadDatabase:
    """Get database instance."""
    path = Path(db_path) if db_path else None
    return LeadDatabase(path)


def _choice(enum_cls) -> click.Choice:
    return click.Choice([m.value for m in enum_cls])


@click.group()
@click.version_option(version="1.0.0", prog_name="wa-leads")
def cli():
    """Wealth Assist Lead Engine - investor lead scoring.

    \b
    Quick Start:
      wa-leads init                                   # Initialize database
      wa-leads score --timeline IMMEDIATE --cash R5M+ # Try the scorer
      wa-leads register                               # Register an investor
      wa-leads profiles --priority HOT                # View hot investors
    """
    pass


@cli.command()
@click.option("--db", "db_path", help="Custom database path")
def init(db_path: Optional[str]):
    """Initialize the leads database."""
    db = get_db(db_path)

    console.print(Panel.fit(
        f"[green]✓ Database initialized![/green]\n\n"
        f"Location: [cyan]{db.db_path}[/cyan]\n\n"
        f"[bold]Next:[/bold]\n"
        f"• [yellow]wa-leads register[/yellow]  - Register an investor\n"
        f"• [yellow]wa-leads serve[/yellow]     - Run the website API\n\n"
        f"[dim]Run 'wa-leads --help' for all commands[/dim]",
        title="Wealth Assist Lead Engine v1.0"
    ))


@cli.command()
@click.option("--timeline", type=_choice(Timeline), default=Timeline.THREE_PLUS_MONTHS.value,
              help="When the investor plans to start")
@click.option("--portfolio/--no-portfolio", default=False, help="Has an existing portfolio")
@click.option("--capital", "capital_type", type=_choice(CapitalType),
              default=CapitalType.CASH.value, help="Funding mechanism")
@click.option("--cash", "cash_amount", type=_choice(CashBand), help="Available cash band")
@click.option("--bond", "bond_amount", type=_choice(BondBand), help="Bond qualification band")
@click.option("--preapproved", is_flag=True, help="Already pre-approved for a bond")
@click.option("--risk", "risk_appetite", type=click.IntRange(1, 5), default=3,
              help="Risk appetite 1 (conservative) to 5 (aggressive)")
@click.option("--experience", is_flag=True, help="Has prior real estate experience")
def score(
    timeline: str,
    portfolio: bool,
    capital_type: str,
    cash_amount: Optional[str],
    bond_amount: Optional[str],
    preapproved: bool,
    risk_appetite: int,
    experience: bool,
):
    """Score a set of answers without storing anything."""
    answers = LeadAnswers(
        timeline=timeline,
        has_portfolio=portfolio,
        capital_type=capital_type,
        cash_amount=cash_amount,
        bond_amount=bond_amount,
        bond_preapproved=preapproved,
        risk_appetite=risk_appetite,
        has_experience=experience,
    )
    scorer = LeadScorer()
    result = scorer.score(answers)
    color = PRIORITY_COLORS[result.priority.value]
    console.print(Panel.fit(
        scorer.explain_score(result),
        title=f"[{color}]{result.priority.value}[/{color}]",
    ))


def _prompt_enum(label: str, enum_cls, default) -> Optional[str]:
    """Ask for one enum value, offering the current answer (if any) as the default."""
    choices = [m.value for m in enum_cls]
    if default is None:
        return Prompt.ask(label, choices=choices)
    return Prompt.ask(label, choices=choices, default=default.value)


def _run_step(session: IntakeSession):
    step = session.current_step
    if step == IntakeStep.IDENTITY:
        session.update_answer("name", Prompt.ask("Full name", default=session.identity.name or None))
        session.update_answer("email", Prompt.ask("Email", default=session.identity.email or None))
        session.update_answer("password", Prompt.ask("Password", password=True))
    elif step == IntakeStep.INVESTMENT_GOALS:
        session.update_answer(
            "timeline", _prompt_enum("When do you plan to start investing?", Timeline, session.answers.timeline)
        )
        session.update_answer(
            "has_experience", Confirm.ask("Prior real estate experience?", default=session.answers.has_experience)
        )
    elif step == IntakeStep.FINANCIAL_CAPACITY:
        capital = _prompt_enum("How will you fund your investments?", CapitalType, session.answers.capital_type)
        session.update_answer("capital_type", capital)
        capital_type = CapitalType(capital)
        if capital_type.uses_cash:
            session.update_answer(
                "cash_amount", _prompt_enum("Available cash capital", CashBand, session.answers.cash_amount)
            )
        if capital_type.uses_bond:
            session.update_answer(
                "bond_amount",
                _prompt_enum("Estimated bond qualification", BondBand, session.answers.bond_amount),
            )
            session.update_answer(
                "bond_preapproved",
                Confirm.ask("Pre-approved for a bond?", default=session.answers.bond_preapproved or False),
            )
    else:
        session.update_answer(
            "risk_appetite",
            int(Prompt.ask("Risk appetite (1 = conservative, 5 = aggressive)",
                           choices=["1", "2", "3", "4", "5"], default=str(session.answers.risk_appetite))),
        )
        session.update_answer(
            "has_portfolio", Confirm.ask("Existing property portfolio?", default=session.answers.has_portfolio)
        )


@cli.command()
@click.option("--db", "db_path", help="Custom database path")
def register(db_path: Optional[str]):
    """Register an investor through the four-step wizard."""
    db = get_db(db_path)
    session = IntakeSession(credentials=db, profiles=db)
    # Set after a failed account creation: only identity is asked again
    retrying = False

    while True:
        step = session.current_step
        console.print(f"\n[bold]Step {int(step)}/4: {step.title}[/bold]")
        try:
            _run_step(session)
            if step != IntakeStep.RISK_PROFILE and not retrying:
                session.advance()
                continue
            while session.current_step != IntakeStep.RISK_PROFILE:
                session.advance()
            retrying = False
            submission = session.submit()
            break
        except IntakeValidationError as e:
            console.print(f"[red]{e}[/red]")
        except AccountCreationError as e:
            console.print(f"[red]Registration failed:[/red] {e}")
            if not Confirm.ask("Go back and change your details?", default=True):
                raise SystemExit(1)
            while session.current_step != IntakeStep.IDENTITY:
                session.go_back()
            retrying = True
            console.print("[dim]Your investment answers are kept.[/dim]")

    result = submission.result
    color = PRIORITY_COLORS[result.priority.value]
    output = (
        f"[green]✓ Account created[/green]\n\n"
        f"Account: [cyan]{submission.account_id}[/cyan]\n"
        f"Lead score: [bold]{result.score}[/bold] ([{color}]{result.priority.value}[/{color}])"
    )
    if submission.has_warning:
        output += f"\n\n[yellow]Warning:[/yellow] score not saved to profile ({submission.profile_error})"
    console.print(Panel.fit(output, title="Registration complete"))


@cli.command()
@click.option("--priority", "-p", type=_choice(Priority), help="Filter by priority")
@click.option("--limit", "-n", default=20, help="Number of profiles to show")
@click.option("--db", "db_path", help="Custom database path")
def profiles(priority: Optional[str], limit: int, db_path: Optional[str]):
    """Display investor profiles sorted by lead score."""
    db = get_db(db_path)
    rows = db.list_profiles(priority=Priority(priority) if priority else None, limit=limit)

    if not rows:
        console.print("[yellow]No profiles found matching criteria.[/yellow]")
        return

    table = Table(title=f"Investors ({len(rows)})" + (f" - {priority}" if priority else ""))
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Priority", justify="center")
    table.add_column("Name", style="cyan", max_width=25)
    table.add_column("Email", max_width=30)
    table.add_column("Capital")
    table.add_column("Account", style="dim")

    for profile in rows:
        answers = profile.onboarding_answers
        style = PRIORITY_COLORS.get(profile.lead_priority.value, "")
        table.add_row(
            str(profile.lead_score),
            f"[{style}]{profile.lead_priority.value}[/{style}]",
            profile.display_name[:25],
            (profile.email or "")[:30],
            answers.get("capital_type", "-"),
            profile.id[:8],
        )

    console.print(table)


@cli.command()
@click.option("--limit", "-n", default=20, help="Number of leads to show")
@click.option("--db", "db_path", help="Custom database path")
def leads(limit: int, db_path: Optional[str]):
    """Display contact-form leads, newest first."""
    db = get_db(db_path)
    rows = db.list_leads(limit=limit)

    if not rows:
        console.print("[yellow]No contact leads yet.[/yellow]")
        return

    table = Table(title=f"Contact Leads ({len(rows)})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan", max_width=25)
    table.add_column("Email", max_width=30)
    table.add_column("Interest")
    table.add_column("CRM")
    table.add_column("Received")

    for lead in rows:
        table.add_row(
            str(lead.id),
            lead.name[:25],
            lead.email[:30],
            lead.interest or "-",
            lead.crm_status.value,
            lead.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@cli.command()
@click.option("--db", "db_path", help="Custom database path")
def stats(db_path: Optional[str]):
    """Show database statistics."""
    db = get_db(db_path)
    data = db.get_stats()

    console.print(Panel.fit(
        f"[bold]Registered Investors:[/bold] {data['total_profiles']}\n\n"
        f"[bold]By Priority:[/bold]\n"
        f"  Hot:  [red]{data['by_priority'].get('HOT', 0)}[/red]\n"
        f"  Warm: [yellow]{data['by_priority'].get('WARM', 0)}[/yellow]\n"
        f"  Cold: [dim]{data['by_priority'].get('COLD', 0)}[/dim]\n\n"
        f"[bold]Average Score:[/bold] {data['avg_score']}\n"
        f"[bold]Contact Leads:[/bold] {data['total_leads']}\n"
        f"[bold]Opportunities:[/bold] {data['total_opportunities']}",
        title="Database Statistics"
    ))


@cli.command()
@click.option("--host", default=None, help="Bind address (default: WA_API_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: WA_API_PORT)")
def serve(host: Optional[str], port: Optional[int]):
    """Run the website API."""
    import uvicorn
    from ..website_api.config import settings
    from ..website_api.main import create_app

    uvicorn.run(create_app(), host=host or settings.host, port=port or settings.port)


if __name__ == "__main__":
    cli()
