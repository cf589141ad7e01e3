#!/usr/bin/env python3
"""
Compliance Dashboard - command line front end.

Local mode: the session is opened for the profile named by --user,
without contacting the hosted auth backend.
"""

import asyncio
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

import config
from compliance import (
    CollectionQuery,
    ComplianceError,
    RepositoryAuthProvider,
    Session,
    SessionManager,
    StaticStatusSource,
    TrackingLookup,
    category_options,
    resolve_access,
)
from compliance.dashboard import overview, pending_acknowledgements, upcoming_deadlines
from compliance.seed import sample_status_records, seed_repository
from compliance.service import ComplianceService
from compliance.tracking import RepositoryStatusSource
from models import Role
from repositories import JsonRepository

console = Console()

STATUS_STYLES = {
    "completed": "green",
    "in-progress": "cyan",
    "overdue": "red",
    "pending": "yellow",
    "investigating": "blue",
    "resolved": "green",
    "active": "green",
    "expired": "dim",
}


def open_session(repo, email: Optional[str], settings: config.Settings) -> Session:
    """Local sign-in by email. Unknown or missing email gives an anonymous session."""
    if not email:
        return Session.anonymous()
    profile = repo.profiles.get_by_email(email)
    if profile is None:
        console.print(f"[yellow]No profile for {email}[/yellow]")
        return Session.anonymous()
    return Session(user=profile, ttl=settings.session_ttl)


def guard(session: Session, *roles: Role) -> bool:
    """Print where the dashboard would send this session when access is refused."""
    decision = resolve_access(session, roles or None)
    if decision.allowed:
        return True
    console.print(f"[red]Access denied[/red] [dim](redirect to {decision.redirect})[/dim]")
    return False


def styled(value: str) -> str:
    style = STATUS_STYLES.get(value, "white")
    return f"[{style}]{value}[/{style}]"


def show_policies(service: ComplianceService, args) -> None:
    query = CollectionQuery(
        search_text=args.search,
        category=args.category,
        status=args.status,
        sort_field=args.sort,
        sort_direction="desc" if args.desc else "asc",
    )
    policies = service.policies(query)

    table = Table(title="Policies", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Category")
    table.add_column("Effective")
    table.add_column("Updated")
    table.add_column("Status")

    for p in policies:
        badge = f"[red]{p.badge}[/red]" if p.action_required else styled(p.status.value)
        table.add_row(p.id, p.title, p.category, p.effective_date.isoformat(),
                      p.last_updated.isoformat(), badge)

    console.print(table)
    categories = category_options(service.repo.policies.list())
    console.print(f"[dim]Categories: {', '.join(categories)}[/dim]")


def show_tasks(service: ComplianceService) -> None:
    tasks = service.tasks()
    if not tasks:
        console.print("[dim]No tasks.[/dim]")
        return

    for task in tasks:
        lines = [
            f"{task.description}",
            f"Due: {task.due_date:%b %d, %Y}   Category: {task.category}   Priority: {task.priority.value}",
            f"Progress: {task.progress}%",
        ]
        for doc in task.documents:
            mark = "[green]x[/green]" if doc.uploaded else " "
            req = "" if doc.required else " [dim](optional)[/dim]"
            lines.append(f"  [{mark}] {doc.name}{req}")
        console.print(Panel(
            "\n".join(lines),
            title=f"{task.id}: {task.title}",
            subtitle=styled(task.status.value),
        ))


def show_reports(service: ComplianceService, args) -> None:
    query = CollectionQuery(
        search_text=args.search,
        status=args.status,
        sort_field="date_submitted",
        sort_direction="desc",
    )
    table = Table(title="Whistleblowing Reports", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Category")
    table.add_column("Submitted")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("Assigned")
    table.add_column("Tracking", style="dim")

    for r in service.reports(query):
        table.add_row(r.id, r.title, r.category, r.date_submitted.isoformat(),
                      styled(r.status.value), r.priority.value, r.assigned_to or "Unassigned",
                      r.tracking_id)
    console.print(table)


def show_overview(service: ComplianceService, settings: config.Settings) -> None:
    repo = service.repo
    now = datetime.now()
    tasks = service.tasks()
    stats = overview(
        repo.policies.list(),
        tasks,
        repo.reports.list(),
        now=now,
        window_days=settings.upcoming_window_days,
        target=settings.compliance_target,
    )
    trend = "[green]up[/green]" if stats.trend == "up" else "[red]down[/red]"

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_row("Active policies", str(stats.total_policies))
    table.add_row("Compliance rate", f"{stats.compliance_rate}% ({trend})")
    table.add_row("Pending reports", str(stats.pending_reports))
    table.add_row("Upcoming deadlines", str(stats.upcoming_deadlines))
    console.print(Panel(table, title="Overview"))

    for task in upcoming_deadlines(tasks, now, settings.upcoming_window_days):
        console.print(f"  [yellow]{task.due_date:%b %d}[/yellow] {task.title}")
    if service.session.role != Role.EMPLOYEE:
        return
    for policy in pending_acknowledgements(service.policies()):
        console.print(f"  [red]Action required:[/red] {policy.title}")


async def track(repo, tracking_id: str, demo: bool, settings: config.Settings) -> None:
    if demo:
        source = StaticStatusSource(sample_status_records(), delay=settings.lookup_delay_seconds)
    else:
        source = RepositoryStatusSource(repo.reports)

    with console.status("Looking up report..."):
        result = await TrackingLookup(source).lookup(tracking_id)

    if not result.found:
        console.print("[yellow]No report found with this tracking ID[/yellow]")
        return
    record = result.record
    console.print(Panel(
        f"{record.message}\n\n"
        f"Submitted: {record.date_submitted}   Last updated: {record.last_updated}",
        title=f"{record.tracking_id}: {record.title}",
        subtitle=styled(record.status.value),
    ))


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description="Compliance dashboard (local mode)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  compliance seed
  compliance register --email ann@example.com --name "Ann Lee" --password secret-pass --confirm secret-pass
  compliance --user employee@example.com policies --category HR
  compliance --user employee@example.com toggle 1 "GDPR Compliance Form"
  compliance --user admin@example.com reports --status pending
  compliance report --type safety --description "Blocked fire exit on floor 3"
  compliance track TRK-8F72-9D3E
        """
    )
    parser.add_argument("--user", "-u", metavar="EMAIL", help="Profile to act as")
    parser.add_argument("--data", metavar="DIR", help="Data directory")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("seed", help="Write sample data")

    p = sub.add_parser("register", help="Create a local profile")
    p.add_argument("--email", required=True)
    p.add_argument("--name", dest="full_name", required=True)
    p.add_argument("--password", required=True)
    p.add_argument("--confirm", dest="confirm_password", required=True)
    p.add_argument("--role", default="employee", choices=[r.value for r in Role])

    p = sub.add_parser("policies", help="List policies")
    p.add_argument("--search", "-s", default="")
    p.add_argument("--category", "-c", default="all")
    p.add_argument("--status", default="all")
    p.add_argument("--sort", default="title",
                   choices=["title", "category", "effective_date", "last_updated"])
    p.add_argument("--desc", action="store_true")

    sub.add_parser("tasks", help="List compliance tasks")

    p = sub.add_parser("toggle", help="Mark a task document uploaded")
    p.add_argument("task_id")
    p.add_argument("document")
    p.add_argument("--undo", action="store_true", help="Mark as not uploaded")

    p = sub.add_parser("submit-task", help="Submit a completed task")
    p.add_argument("task_id")

    p = sub.add_parser("acknowledge", help="Acknowledge a policy")
    p.add_argument("policy_id")

    p = sub.add_parser("reports", help="List whistleblowing reports (admin)")
    p.add_argument("--search", "-s", default="")
    p.add_argument("--status", default="all")

    p = sub.add_parser("report", help="Submit an anonymous report")
    p.add_argument("--type", dest="incident_type", required=True)
    p.add_argument("--description", required=True)
    p.add_argument("--date", dest="incident_date")
    p.add_argument("--location", default="")
    p.add_argument("--involved", default="")

    p = sub.add_parser("track", help="Track a report by tracking ID")
    p.add_argument("tracking_id")
    p.add_argument("--demo", action="store_true", help="Use the built-in sample records")

    sub.add_parser("overview", help="Dashboard overview")
    return parser


def run(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = config.load_settings()
    if args.data:
        settings.data_dir = Path(args.data)

    repo = JsonRepository(settings.data_dir)
    session = open_session(repo, args.user, settings)
    service = ComplianceService(repo, session)

    try:
        if args.command == "seed":
            counts = seed_repository(repo)
            console.print(f"[green]Seeded[/green] {counts} into {settings.data_dir}")
        elif args.command == "register":
            manager = SessionManager(RepositoryAuthProvider(repo.profiles), ttl=settings.session_ttl)
            new_session = asyncio.run(manager.register(
                args.email, args.password, args.confirm_password, args.full_name, Role(args.role),
            ))
            console.print(f"[green]Registered[/green] {new_session.user.email} [dim](home {new_session.user.home})[/dim]")
        elif args.command == "report":
            submission = {
                "incident_type": args.incident_type,
                "description": args.description,
                "incident_date": date.fromisoformat(args.incident_date) if args.incident_date else None,
                "location": args.location,
                "involved_parties": args.involved,
            }
            tracking_id = asyncio.run(service.submit_report(submission))
            console.print(f"[green]Report submitted.[/green] Your tracking ID is [bold]{tracking_id}[/bold]")
            console.print("[dim]Keep this ID to check the status of your report.[/dim]")
        elif args.command == "track":
            asyncio.run(track(repo, args.tracking_id, args.demo, settings))
        elif args.command == "policies":
            if guard(session):
                show_policies(service, args)
        elif args.command == "tasks":
            if guard(session):
                show_tasks(service)
        elif args.command == "toggle":
            if guard(session, Role.EMPLOYEE):
                task = service.toggle_document(args.task_id, args.document, not args.undo)
                console.print(f"{task.title}: {task.progress}% {styled(task.status.value)}")
        elif args.command == "submit-task":
            if guard(session, Role.EMPLOYEE):
                task = service.submit_task(args.task_id)
                console.print(f"[green]Submitted[/green] {task.title}")
        elif args.command == "acknowledge":
            if guard(session, Role.EMPLOYEE):
                policy = service.acknowledge_policy(args.policy_id)
                console.print(f"[green]Acknowledged[/green] {policy.title}")
        elif args.command == "reports":
            if guard(session, Role.ADMIN):
                show_reports(service, args)
        elif args.command == "overview":
            if guard(session):
                show_overview(service, settings)
    except ComplianceError as e:
        console.print(f"[red]{type(e).__name__}:[/red] {e.message}")
        return 1
    except ValueError as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        return 1

    return 0


def cli():
    """Main CLI entry point"""
    sys.exit(run())


if __name__ == "__main__":
    cli()
