#!/usr/bin/env python3
"""
Investor Data Room CLI

Usage:
    dataroom login investor@fund.com     # Sign in with an emailed code
    dataroom nda                         # Review and sign the NDA
    dataroom docs --search deck          # Browse documents
    dataroom download DOCUMENT_ID        # Save a document locally
    dataroom admin login admin@co.com    # Admin console sign-in
    dataroom --help                      # Show help
"""

import argparse
import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from dataroom import __version__
from dataroom.client.admin_api_client import AdminAPIClient
from dataroom.client.api_client import APIClient
from dataroom.client.config import client_settings
from dataroom.client.errors import APIClientError
from dataroom.client.session import AdminSession, AuthSession, AuthState
from dataroom.client.token_store import FileTokenStore
from dataroom.client.warmup import warm_up_backend
from dataroom.console.access_requests import AccessRequestsScreen
from dataroom.console.account import AccountScreen
from dataroom.console.activity import ActivityScreen, AuditLogScreen, DEFAULT_LOG_LIMIT
from dataroom.console.base import Notifier
from dataroom.console.documents import DocumentsScreen, SORT_FIELDS
from dataroom.console.overview import OverviewScreen
from dataroom.console.permissions import PermissionLevelsScreen
from dataroom.console.qa import QAScreen
from dataroom.console.users import UsersScreen, SUPER_ADMIN_REQUIRED_MESSAGE
from dataroom.flows.access_request import AccessRequestFlow, AccessRequestForm
from dataroom.flows.investor_documents import InvestorDocumentsFlow, load_company_overview
from dataroom.flows.investor_qa import InvestorQAFlow
from dataroom.flows.nda_acceptance import NDAAcceptanceFlow
from dataroom.flows.otp_login import OTPLoginFlow

USER_ROLES = ["user", "admin", "super_admin"]


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="dataroom",
        description="Investor Data Room - secure document sharing for investors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dataroom request-access -e me@fund.com -n "Jane Doe" -c "Acme Capital"
  dataroom login me@fund.com            Sign in with a one-time code
  dataroom nda                          Sign the NDA (required before documents)
  dataroom docs                         List documents
  dataroom download <id> -o ./files     Download a document
  dataroom ask "What is the current burn rate?"
  dataroom admin requests --status pending
        """
    )

    parser.add_argument(
        "--server-url",
        type=str,
        default=client_settings.API_BASE_URL,
        help=f"Backend server URL (default: {client_settings.API_BASE_URL})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("health", help="Check that the backend is reachable")

    login_parser = subparsers.add_parser("login", help="Sign in with an emailed code")
    login_parser.add_argument("email", help="Your registered email")

    subparsers.add_parser("logout", help="Sign out")
    subparsers.add_parser("status", help="Show session status")

    nda_parser = subparsers.add_parser("nda", help="Review and sign the NDA")
    nda_parser.add_argument("--name", help="Full legal name used as signature")

    access_parser = subparsers.add_parser("request-access", help="Request data room access")
    access_parser.add_argument("-e", "--email", required=True)
    access_parser.add_argument("-n", "--name", dest="full_name", required=True)
    access_parser.add_argument("-c", "--company", required=True)
    access_parser.add_argument("--phone")
    access_parser.add_argument("--role-title")
    access_parser.add_argument("--investor-type")
    access_parser.add_argument("-m", "--message")

    check_parser = subparsers.add_parser("check-access", help="Check an access request by email or request id")
    check_parser.add_argument("email_or_id")

    docs_parser = subparsers.add_parser("docs", help="List documents")
    docs_parser.add_argument("--category", help="Category id")
    docs_parser.add_argument("--search", help="Search title and description")
    docs_parser.add_argument("--tags", help="Comma-separated tags")
    docs_parser.add_argument("--list-categories", action="store_true", help="Only list category names")

    download_parser = subparsers.add_parser("download", help="Download a document")
    download_parser.add_argument("document_id")
    download_parser.add_argument("-o", "--output", default=".", help="Target directory")

    ask_parser = subparsers.add_parser("ask", help="Submit a question")
    ask_parser.add_argument("question")
    ask_parser.add_argument("--category", default="General")
    ask_parser.add_argument("--urgent", action="store_true")

    questions_parser = subparsers.add_parser("questions", help="List Q&A threads")
    questions_parser.add_argument("--search", help="Search query (3+ characters)")

    subparsers.add_parser("company", help="Show the company overview")

    # Admin console
    admin_parser = subparsers.add_parser("admin", help="Admin console")
    admin_sub = admin_parser.add_subparsers(dest="admin_command", help="Admin commands")

    admin_login_parser = admin_sub.add_parser("login", help="Admin sign-in")
    admin_login_parser.add_argument("email")

    admin_sub.add_parser("logout", help="Admin sign-out")

    admin_register_parser = admin_sub.add_parser("register", help="Create an admin account")
    admin_register_parser.add_argument("email")
    admin_register_parser.add_argument("--name", help="Full name")

    admin_profile_parser = admin_sub.add_parser("profile", help="Show or edit your admin profile")
    admin_profile_parser.add_argument("--name", help="New full name")

    admin_sub.add_parser("password", help="Change your admin password")
    admin_sub.add_parser("overview", help="Users, admins and pending requests")

    admin_users_parser = admin_sub.add_parser("users", help="List users")
    admin_users_parser.add_argument("--search", help="Match email, name or company")
    admin_users_parser.add_argument("--role", choices=USER_ROLES)
    admin_users_parser.add_argument("--inactive", action="store_true", help="Only deactivated users")

    user_create = admin_sub.add_parser("user-create", help="Create a user (super admin)")
    user_create.add_argument("email")
    user_create.add_argument("--name", required=True, help="Full name")
    user_create.add_argument("--role", choices=USER_ROLES, default="user")
    user_create.add_argument("--level", help="Permission level id")

    user_update = admin_sub.add_parser("user-update", help="Edit a user (super admin)")
    user_update.add_argument("user_id")
    user_update.add_argument("--name", help="Full name")
    user_update.add_argument("--role", choices=USER_ROLES)
    level_group = user_update.add_mutually_exclusive_group()
    level_group.add_argument("--level", help="Permission level id")
    level_group.add_argument("--clear-level", action="store_true", help="Remove the permission level")

    for name, help_text in (
        ("user-deactivate", "Deactivate a user (super admin)"),
        ("user-activate", "Reactivate a user (super admin)"),
        ("user-permissions", "Effective permissions of a user"),
    ):
        admin_sub.add_parser(name, help=help_text).add_argument("user_id")

    admin_sub.add_parser("levels", help="List permission levels")

    level_create = admin_sub.add_parser("level-create", help="Create a permission level")
    _add_level_arguments(level_create)

    level_update = admin_sub.add_parser("level-update", help="Replace a permission level")
    level_update.add_argument("level_id")
    _add_level_arguments(level_update)

    level_delete = admin_sub.add_parser("level-delete", help="Delete a permission level")
    level_delete.add_argument("level_id")
    level_delete.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    admin_requests_parser = admin_sub.add_parser("requests", help="List access requests")
    admin_requests_parser.add_argument("--status", choices=["pending", "approved", "denied"])

    admin_review_parser = admin_sub.add_parser("review", help="Approve or deny an access request")
    admin_review_parser.add_argument("request_id")
    admin_review_parser.add_argument("status", choices=["approved", "denied"])
    admin_review_parser.add_argument("--notes")
    admin_review_parser.add_argument("--expires-at", help="ISO timestamp")

    admin_docs_parser = admin_sub.add_parser("docs", help="List documents grouped by category")
    admin_docs_parser.add_argument("--search")
    admin_docs_parser.add_argument("--categories", help="Comma-separated")
    admin_docs_parser.add_argument("--sort", choices=list(SORT_FIELDS), default="uploaded_at")
    admin_docs_parser.add_argument("--asc", action="store_true", help="Ascending order")

    admin_doc_parser = admin_sub.add_parser("doc", help="Document detail")
    admin_doc_parser.add_argument("document_id")

    admin_sub.add_parser("doc-stats", help="Document counts per category")

    admin_upload_parser = admin_sub.add_parser("upload", help="Upload a document")
    admin_upload_parser.add_argument("file", type=Path)
    admin_upload_parser.add_argument("--categories", required=True, help="Comma-separated")
    admin_upload_parser.add_argument("--description")
    admin_upload_parser.add_argument("--tags")
    admin_upload_parser.add_argument("--title")

    admin_delete_parser = admin_sub.add_parser("delete-doc", help="Delete a document")
    admin_delete_parser.add_argument("document_id")
    admin_delete_parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    admin_activity_parser = admin_sub.add_parser("activity", help="View/download history of a document")
    admin_activity_parser.add_argument("document_id")
    admin_activity_parser.add_argument("--limit", type=int, default=DEFAULT_LOG_LIMIT)

    admin_audit_parser = admin_sub.add_parser("audit", help="Admin audit trail")
    admin_audit_parser.add_argument("--action", help="e.g. user_created")
    admin_audit_parser.add_argument("--target-type", help="e.g. user, document, permission_level")
    admin_audit_parser.add_argument("--limit", type=int, default=DEFAULT_LOG_LIMIT)

    admin_answer_parser = admin_sub.add_parser("answer", help="Answer a question")
    admin_answer_parser.add_argument("thread_id")
    admin_answer_parser.add_argument("answer")
    admin_answer_parser.add_argument("--private", action="store_true")

    admin_sub.add_parser("questions", help="List Q&A threads")

    return parser


def _add_level_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name")
    parser.add_argument("-d", "--description", required=True)
    parser.add_argument("--no-view", dest="can_view", action="store_false", help="Hide documents entirely")
    parser.add_argument("--download", dest="can_download", action="store_true", help="Allow downloads")
    parser.add_argument("--expiry", dest="has_expiry", action="store_true", help="Honour access request expiry")
    parser.add_argument("--max-downloads", type=int, help="Total download allowance")


@dataclass
class CLIContext:
    console: Console
    client: APIClient
    admin_client: AdminAPIClient
    verbose: bool = False

    @property
    def notifier(self) -> Notifier:
        return Notifier(self.console)


def build_context(args: argparse.Namespace, console: Console) -> CLIContext:
    store = FileTokenStore(client_settings.TOKEN_FILE)
    return CLIContext(
        console=console,
        client=APIClient(base_url=args.server_url, token_store=store),
        admin_client=AdminAPIClient(base_url=args.server_url, token_store=store),
        verbose=args.verbose,
    )


# ==================== Investor commands ====================

async def cmd_health(args, ctx: CLIContext) -> int:
    if not await warm_up_backend(args.server_url):
        ctx.console.print("[yellow]Backend is waking up or unreachable[/yellow]")
    data = await ctx.client.health_check()
    ctx.console.print(f"[green]✓[/green] {data.get('app_name', 'backend')} is {data.get('status', 'up')}")
    return 0


async def cmd_login(args, ctx: CLIContext) -> int:
    session = AuthSession(ctx.client)
    flow = OTPLoginFlow(ctx.client, session)

    if not await flow.request_code(args.email):
        ctx.console.print(f"[red]✗ {flow.error}[/red]")
        return 1
    ctx.console.print(f"[green]✓[/green] {flow.message or 'Code sent.'}")

    while not flow.verified:
        code = Prompt.ask("Enter the 6-digit code (or 'r' to resend)")
        if code.strip().lower() == "r":
            await flow.resend()
            ctx.console.print("[cyan]A new code is on its way.[/cyan]")
            continue
        await flow.set_code(code)
        if flow.error:
            ctx.console.print(f"[red]{flow.error}[/red]")
            if not Confirm.ask("Try again?", default=True):
                return 1

    user = session.user or {}
    ctx.console.print(f"\n[green]✓ Signed in as[/green] [bold]{user.get('full_name') or user.get('email')}[/bold]")
    if session.state == AuthState.PENDING_NDA:
        ctx.console.print("Please sign the NDA before accessing documents: [cyan]dataroom nda[/cyan]")
    return 0


async def cmd_logout(args, ctx: CLIContext) -> int:
    AuthSession(ctx.client).logout()
    ctx.console.print("Signed out.")
    return 0


async def cmd_status(args, ctx: CLIContext) -> int:
    session = AuthSession(ctx.client)
    await session.load()
    if session.state == AuthState.ANONYMOUS:
        ctx.console.print("[yellow]Not signed in[/yellow]  [dim]dataroom login <email>[/dim]")
        return 1

    table = Table(show_header=False, box=None)
    table.add_row("Email", session.user.get("email"))
    table.add_row("Name", session.user.get("full_name") or "-")
    table.add_row("NDA", "signed" if session.nda_accepted else "[yellow]pending[/yellow]")
    table.add_row("State", session.state.value)
    permissions = await InvestorDocumentsFlow(ctx.client).load_permissions(session.user.get("id"))
    if permissions:
        table.add_row("Access", _describe_access(permissions))
    ctx.console.print(Panel(table, title="Session"))
    return 0


def _describe_access(permissions) -> str:
    level = permissions.get("permission_level") or {}
    rights = "view and download" if permissions.get("can_download") else (
        "view only" if permissions.get("can_view") else "no document access"
    )
    parts = [level.get("name") or "default", rights]
    if permissions.get("max_downloads") is not None:
        parts.append(f"{permissions.get('downloads_used', 0)}/{permissions['max_downloads']} downloads used")
    return ", ".join(parts)


async def _require_active(ctx: CLIContext) -> Optional[AuthSession]:
    session = AuthSession(ctx.client)
    await session.load()
    redirect = session.require_nda()
    if redirect is None:
        return session
    if redirect.path == "/nda":
        ctx.console.print("[yellow]Sign the NDA first:[/yellow] dataroom nda")
    else:
        ctx.console.print("[yellow]Sign in first:[/yellow] dataroom login <email>")
    return None


async def cmd_nda(args, ctx: CLIContext) -> int:
    session = AuthSession(ctx.client)
    await session.load()
    redirect = session.require_auth()
    if redirect:
        ctx.console.print("[yellow]Sign in first:[/yellow] dataroom login <email>")
        return 1
    if session.nda_accepted:
        ctx.console.print(f"[green]✓ NDA v{session.nda_status.get('version')} already signed[/green]")
        return 0

    flow = NDAAcceptanceFlow(ctx.client, session)
    content = await flow.load_content()
    if content is None:
        ctx.console.print(f"[red]✗ {flow.error}[/red]")
        return 1

    ctx.console.print(Panel(
        Markdown(content.get("content", "")),
        title=f"NDA v{content.get('version')} (effective {content.get('effective_date')})"
    ))
    flow.agreed = Confirm.ask("I have read and agree to the NDA", default=False)
    flow.full_name = args.name or Prompt.ask("Full legal name")

    if not await flow.submit():
        ctx.console.print(f"[red]✗ {flow.error}[/red]")
        return 1
    ctx.console.print("[green]✓ NDA signed. Welcome to the data room.[/green]")
    return 0


async def cmd_request_access(args, ctx: CLIContext) -> int:
    flow = AccessRequestFlow(ctx.client)
    form = AccessRequestForm(
        email=args.email,
        full_name=args.full_name,
        company=args.company,
        phone=args.phone,
        message=args.message,
        role_title=args.role_title,
        investor_type=args.investor_type,
    )
    if not await flow.submit(form):
        ctx.console.print(f"[red]✗ {flow.error}[/red]")
        return 1
    ctx.console.print("[green]✓ Request submitted.[/green] We'll email you once it has been reviewed.")
    return 0


async def cmd_check_access(args, ctx: CLIContext) -> int:
    flow = AccessRequestFlow(ctx.client)
    if "@" in args.email_or_id:
        result = await flow.check_status(args.email_or_id)
    else:
        result = await flow.load(args.email_or_id)
    if result is None:
        ctx.console.print(f"[red]✗ {flow.error}[/red]")
        return 1
    if result.get("exists") is False:
        ctx.console.print("[yellow]No access request found for that email[/yellow]")
        return 1
    ctx.console.print(f"Status: [bold]{result.get('status')}[/bold]")
    if result.get("expires_at"):
        ctx.console.print(f"Access expires: {result['expires_at']}")
    return 0


def _documents_table(documents, title: str = "Documents") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Title", style="bold")
    table.add_column("Category")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    for doc in documents:
        table.add_row(
            doc.get("id"),
            doc.get("title"),
            doc.get("primary_category") or ", ".join(doc.get("categories") or []),
            doc.get("file_type"),
            f"{(doc.get('file_size') or 0) / 1024:.1f} KB",
        )
    return table


async def cmd_docs(args, ctx: CLIContext) -> int:
    if await _require_active(ctx) is None:
        return 1
    flow = InvestorDocumentsFlow(ctx.client)
    if args.list_categories:
        names = await flow.load_category_names()
        if flow.error:
            ctx.console.print(f"[red]✗ {flow.error}[/red]")
            return 1
        for name in names:
            ctx.console.print(name)
        return 0
    if args.category:
        documents = await flow.open_category(args.category)
    else:
        documents = await flow.search(search=args.search, tags=args.tags)
    if flow.error:
        ctx.console.print(f"[red]✗ {flow.error}[/red]")
        return 1
    ctx.console.print(_documents_table(documents))
    return 0


async def cmd_download(args, ctx: CLIContext) -> int:
    if await _require_active(ctx) is None:
        return 1
    flow = InvestorDocumentsFlow(ctx.client)
    path = await flow.download(args.document_id, Path(args.output))
    if path is None:
        ctx.console.print(f"[red]✗ {flow.error}[/red]")
        return 1
    ctx.console.print(f"[green]✓ Saved[/green] {path}")
    return 0


def _threads_table(threads, title: str = "Q&A") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Question")
    table.add_column("Answer")
    table.add_column("Status")
    for thread in threads:
        table.add_row(
            thread.get("id"),
            thread.get("question_text"),
            thread.get("answer_text") or "-",
            thread.get("status"),
        )
    return table


async def cmd_ask(args, ctx: CLIContext) -> int:
    if await _require_active(ctx) is None:
        return 1
    flow = InvestorQAFlow(ctx.client)
    if not await flow.ask(args.question, category=args.category, is_urgent=args.urgent):
        ctx.console.print(f"[red]✗ {flow.error}[/red]")
        return 1
    ctx.console.print("[green]✓ Question submitted[/green]")
    return 0


async def cmd_questions(args, ctx: CLIContext) -> int:
    if await _require_active(ctx) is None:
        return 1
    flow = InvestorQAFlow(ctx.client)
    threads = await flow.search(args.search) if args.search else await flow.load()
    if flow.error:
        ctx.console.print(f"[red]✗ {flow.error}[/red]")
        return 1
    ctx.console.print(_threads_table(threads))
    return 0


async def cmd_company(args, ctx: CLIContext) -> int:
    if await _require_active(ctx) is None:
        return 1
    overview = await load_company_overview(ctx.client)
    summary = overview["summary"]
    ctx.console.print(Panel(summary.get("description") or "", title=summary.get("title", "Company")))

    metrics = Table(title="Key metrics")
    metrics.add_column("Metric")
    metrics.add_column("Value", justify="right")
    metrics.add_column("Change", justify="right")
    for metric in overview["metrics"]:
        metrics.add_row(metric.get("label"), str(metric.get("value")), metric.get("change") or "")
    ctx.console.print(metrics)

    for milestone in overview["milestones"]:
        ctx.console.print(f"[bold]{milestone.get('date')}[/bold]  {milestone.get('title')}")

    for testimonial in overview["testimonials"]:
        byline = ", ".join(part for part in (testimonial.get("role"), testimonial.get("company")) if part)
        ctx.console.print(Panel(
            f"\"{testimonial.get('content')}\"",
            title=testimonial.get("author"),
            subtitle=byline or None,
        ))

    if overview["awards"]:
        awards = Table(title="Awards")
        for column in ("Year", "Award", "Organization"):
            awards.add_column(column)
        for award in overview["awards"]:
            awards.add_row(str(award.get("year") or ""), award.get("title"), award.get("organization") or "")
        ctx.console.print(awards)

    if overview["media"]:
        media = Table(title="In the press")
        for column in ("Date", "Publication", "Headline", "Link"):
            media.add_column(column)
        for item in overview["media"]:
            media.add_row(item.get("date") or "", item.get("publication"), item.get("title"), item.get("url") or "")
        ctx.console.print(media)
    return 0


# ==================== Admin commands ====================

async def _admin_session(ctx: CLIContext) -> Optional[AdminSession]:
    session = AdminSession(ctx.admin_client)
    await session.load()
    if session.require_admin():
        ctx.console.print("[yellow]Admin sign-in required:[/yellow] dataroom admin login <email>")
        return None
    return session


def _confirm(args) -> Callable[[str], bool]:
    if args.yes:
        return lambda prompt: True
    return lambda prompt: Confirm.ask(prompt, default=False)


def _flag(value) -> str:
    return "yes" if value else "no"


async def admin_login(args, ctx: CLIContext) -> int:
    password = Prompt.ask("Password", password=True)
    screen = AccountScreen(AdminSession(ctx.admin_client), ctx.notifier)
    return 0 if await screen.login(args.email, password) else 1


async def admin_logout(args, ctx: CLIContext) -> int:
    AccountScreen(AdminSession(ctx.admin_client), ctx.notifier).logout()
    return 0


async def admin_register(args, ctx: CLIContext) -> int:
    full_name = args.name or Prompt.ask("Full name")
    password = Prompt.ask("Password", password=True)
    confirm = Prompt.ask("Confirm password", password=True)
    screen = AccountScreen(AdminSession(ctx.admin_client), ctx.notifier)
    account = await screen.register(args.email, full_name, password, confirm)
    if account is None:
        return 1
    ctx.console.print(f"Role: [bold]{account.get('role')}[/bold]  [dim]dataroom admin login {account.get('email')}[/dim]")
    return 0


async def admin_profile(args, ctx: CLIContext, session: AdminSession) -> int:
    if args.name and not await AccountScreen(session, ctx.notifier).update_profile(args.name):
        return 1
    admin = session.admin
    table = Table(show_header=False, box=None)
    table.add_row("Email", admin.get("email"))
    table.add_row("Name", admin.get("full_name") or "-")
    table.add_row("Role", admin.get("role"))
    table.add_row("Last login", str(admin.get("last_login") or "-"))
    ctx.console.print(Panel(table, title="Admin profile"))
    return 0


async def admin_password(args, ctx: CLIContext, session: AdminSession) -> int:
    current = Prompt.ask("Current password", password=True)
    new = Prompt.ask("New password", password=True)
    confirm = Prompt.ask("Confirm new password", password=True)
    ok = await AccountScreen(session, ctx.notifier).change_password(current, new, confirm)
    return 0 if ok else 1


async def admin_overview(args, ctx: CLIContext, session: AdminSession) -> int:
    stats = await OverviewScreen(session, ctx.notifier).load()
    if not stats:
        return 1
    ctx.console.print(Panel(
        f"Users: {stats['total_users']}\n"
        f"Admins: {stats['total_admins']}\n"
        f"Pending access requests: {stats['pending_access_requests']}",
        title=f"Signed in as {session.admin.get('email')}"
    ))
    return 0


async def admin_users(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = UsersScreen(ctx.admin_client, session, ctx.notifier)
    await screen.load()
    table = Table(title="Users")
    for column in ("ID", "Email", "Name", "Role", "Level", "Active"):
        table.add_column(column)
    for user in screen.filtered(search=args.search, role=args.role, is_active=False if args.inactive else None):
        level = user.get("permission_level") or {}
        table.add_row(
            user.get("id"), user.get("email"), user.get("full_name") or "-", user.get("role"),
            level.get("name") or "-", _flag(user.get("is_active")),
        )
    ctx.console.print(table)
    return 0 if screen.error is None else 1


async def admin_user_create(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = UsersScreen(ctx.admin_client, session, ctx.notifier)
    if not session.is_super_admin:
        screen.reject(SUPER_ADMIN_REQUIRED_MESSAGE)
        return 1
    password = Prompt.ask("Initial password", password=True)
    ok = await screen.create(args.email, args.name, password, role=args.role, permission_level_id=args.level)
    return 0 if ok else 1


async def admin_user_update(args, ctx: CLIContext, session: AdminSession) -> int:
    changes = {}
    if args.name is not None:
        changes["full_name"] = args.name
    if args.role is not None:
        changes["role"] = args.role
    if args.clear_level:
        changes["permission_level_id"] = None
    elif args.level is not None:
        changes["permission_level_id"] = args.level
    if not changes:
        ctx.console.print("Nothing to update: pass --name, --role, --level or --clear-level")
        return 1
    screen = UsersScreen(ctx.admin_client, session, ctx.notifier)
    return 0 if await screen.update(args.user_id, **changes) else 1


async def admin_user_deactivate(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = UsersScreen(ctx.admin_client, session, ctx.notifier)
    return 0 if await screen.deactivate(args.user_id) else 1


async def admin_user_activate(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = UsersScreen(ctx.admin_client, session, ctx.notifier)
    return 0 if await screen.activate(args.user_id) else 1


async def admin_user_permissions(args, ctx: CLIContext, session: AdminSession) -> int:
    permissions = await UsersScreen(ctx.admin_client, session, ctx.notifier).view_permissions(args.user_id)
    if permissions is None:
        return 1
    ctx.console.print(Panel(_describe_access(permissions), title=permissions.get("email")))
    return 0


async def admin_levels(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = PermissionLevelsScreen(ctx.admin_client, ctx.notifier)
    await screen.load()
    table = Table(title="Permission levels")
    for column in ("ID", "Name", "View", "Download", "Expiry", "Max downloads"):
        table.add_column(column)
    for level in screen.items:
        table.add_row(
            level.get("id"), level.get("name"), _flag(level.get("can_view")),
            _flag(level.get("can_download")), _flag(level.get("has_expiry")),
            str(level.get("max_downloads")) if level.get("max_downloads") is not None else "-",
        )
    ctx.console.print(table)
    return 0 if screen.error is None else 1


def _level_flags(args) -> dict:
    return {
        "can_view": args.can_view,
        "can_download": args.can_download,
        "has_expiry": args.has_expiry,
        "max_downloads": args.max_downloads,
    }


async def admin_level_create(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = PermissionLevelsScreen(ctx.admin_client, ctx.notifier)
    return 0 if await screen.create(args.name, args.description, **_level_flags(args)) else 1


async def admin_level_update(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = PermissionLevelsScreen(ctx.admin_client, ctx.notifier)
    ok = await screen.update(args.level_id, args.name, args.description, **_level_flags(args))
    return 0 if ok else 1


async def admin_level_delete(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = PermissionLevelsScreen(ctx.admin_client, ctx.notifier)
    await screen.load()
    return 0 if await screen.delete(args.level_id, _confirm(args)) else 1


async def admin_requests(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = AccessRequestsScreen(ctx.admin_client, ctx.notifier)
    await screen.filter_by_status(args.status)
    table = Table(title="Access requests")
    for column in ("ID", "Email", "Name", "Company", "Status"):
        table.add_column(column)
    for req in screen.items:
        table.add_row(req.get("id"), req.get("email"), req.get("full_name"), req.get("company"), req.get("status"))
    ctx.console.print(table)
    return 0 if screen.error is None else 1


async def admin_review(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = AccessRequestsScreen(ctx.admin_client, ctx.notifier)
    ok = await screen.review(args.request_id, args.status, admin_notes=args.notes, expires_at=args.expires_at)
    return 0 if ok else 1


async def admin_docs(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = DocumentsScreen(ctx.admin_client, ctx.notifier)
    screen.set_sort(args.sort, descending=not args.asc)
    await screen.apply_filters(categories=args.categories, search=args.search)
    for category, documents in screen.grouped().items():
        ctx.console.print(_documents_table(documents, title=f"{category} ({len(documents)})"))
    return 0 if screen.error is None else 1


async def admin_doc(args, ctx: CLIContext, session: AdminSession) -> int:
    document = await DocumentsScreen(ctx.admin_client, ctx.notifier).detail(args.document_id)
    if document is None:
        return 1
    table = Table(show_header=False, box=None)
    table.add_row("File", document.get("file_name"))
    table.add_row("Categories", ", ".join(document.get("categories") or []))
    table.add_row("Tags", ", ".join(document.get("tags") or []) or "-")
    table.add_row("Size", f"{(document.get('file_size') or 0) / 1024:.1f} KB")
    table.add_row("Uploaded", f"{document.get('uploaded_at')} by {document.get('uploader_name')}")
    table.add_row("Views / downloads", f"{document.get('view_count', 0)} / {document.get('download_count', 0)}")
    table.add_row("View URL", document.get("url") or "-")
    table.add_row("Download URL", document.get("download_url") or "-")
    ctx.console.print(Panel(table, title=document.get("title")))
    if document.get("description"):
        ctx.console.print(document["description"])
    return 0


async def admin_doc_stats(args, ctx: CLIContext, session: AdminSession) -> int:
    stats = await DocumentsScreen(ctx.admin_client, ctx.notifier).category_stats()
    if stats is None:
        return 1
    table = Table(title="Documents by category")
    table.add_column("Category")
    table.add_column("Documents", justify="right")
    for category, count in sorted(stats.items(), key=lambda item: (-item[1], item[0])):
        table.add_row(category, str(count))
    ctx.console.print(table)
    return 0


async def admin_upload(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = DocumentsScreen(ctx.admin_client, ctx.notifier)
    ok = await screen.upload(
        args.file, args.categories, description=args.description, tags=args.tags, title=args.title
    )
    return 0 if ok else 1


async def admin_delete_doc(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = DocumentsScreen(ctx.admin_client, ctx.notifier)
    await screen.load()
    return 0 if await screen.delete(args.document_id, _confirm(args)) else 1


async def admin_activity(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = ActivityScreen(ctx.admin_client, ctx.notifier)
    logs = await screen.show(args.document_id, limit=args.limit)
    table = Table(title="Document activity")
    for column in ("When", "User", "Action", "IP"):
        table.add_column(column)
    for log in logs:
        table.add_row(str(log.get("accessed_at")), log.get("user_email") or log.get("user_id"), log.get("action"), log.get("ip_address") or "-")
    ctx.console.print(table)
    return 0 if screen.error is None else 1


async def admin_audit(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = AuditLogScreen(ctx.admin_client, ctx.notifier)
    entries = await screen.show(action=args.action, target_type=args.target_type, limit=args.limit)
    table = Table(title="Audit trail")
    for column in ("When", "Admin", "Action", "Target"):
        table.add_column(column)
    for entry in entries:
        target = f"{entry.get('target_type')} {entry.get('target_id') or ''}".rstrip()
        table.add_row(str(entry.get("created_at")), entry.get("admin_email") or entry.get("admin_id"), entry.get("action"), target)
    ctx.console.print(table)
    return 0 if screen.error is None else 1


async def admin_answer(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = QAScreen(ctx.admin_client, ctx.notifier)
    ok = await screen.answer(args.thread_id, args.answer, is_public=not args.private)
    return 0 if ok else 1


async def admin_questions(args, ctx: CLIContext, session: AdminSession) -> int:
    screen = QAScreen(ctx.admin_client, ctx.notifier)
    await screen.load()
    counts = screen.counts
    ctx.console.print(_threads_table(
        screen.visible,
        title=f"Q&A ({counts['pending']} pending, {counts['answered']} answered)"
    ))
    return 0 if screen.error is None else 1


# No admin session needed
ADMIN_ACCOUNT_COMMANDS = {
    "login": admin_login,
    "logout": admin_logout,
    "register": admin_register,
}

ADMIN_COMMANDS = {
    "profile": admin_profile,
    "password": admin_password,
    "overview": admin_overview,
    "users": admin_users,
    "user-create": admin_user_create,
    "user-update": admin_user_update,
    "user-deactivate": admin_user_deactivate,
    "user-activate": admin_user_activate,
    "user-permissions": admin_user_permissions,
    "levels": admin_levels,
    "level-create": admin_level_create,
    "level-update": admin_level_update,
    "level-delete": admin_level_delete,
    "requests": admin_requests,
    "review": admin_review,
    "docs": admin_docs,
    "doc": admin_doc,
    "doc-stats": admin_doc_stats,
    "upload": admin_upload,
    "delete-doc": admin_delete_doc,
    "activity": admin_activity,
    "audit": admin_audit,
    "answer": admin_answer,
    "questions": admin_questions,
}


async def cmd_admin(args, ctx: CLIContext) -> int:
    command = args.admin_command
    if command in ADMIN_ACCOUNT_COMMANDS:
        return await ADMIN_ACCOUNT_COMMANDS[command](args, ctx)

    handler = ADMIN_COMMANDS.get(command)
    if handler is None:
        ctx.console.print("Usage: dataroom admin <command>  (see dataroom admin --help)")
        return 1

    session = await _admin_session(ctx)
    if session is None:
        return 1
    return await handler(args, ctx, session)


COMMANDS = {
    "health": cmd_health,
    "login": cmd_login,
    "logout": cmd_logout,
    "status": cmd_status,
    "nda": cmd_nda,
    "request-access": cmd_request_access,
    "check-access": cmd_check_access,
    "docs": cmd_docs,
    "download": cmd_download,
    "ask": cmd_ask,
    "questions": cmd_questions,
    "company": cmd_company,
    "admin": cmd_admin,
}


async def run_command(args: argparse.Namespace, ctx: CLIContext) -> int:
    handler = COMMANDS[args.command]
    try:
        return await handler(args, ctx)
    finally:
        await ctx.client.aclose()
        await ctx.admin_client.aclose()


def main():
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args()
    console = Console()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    ctx = build_context(args, console)

    try:
        sys.exit(asyncio.run(run_command(args, ctx)))
    except KeyboardInterrupt:
        console.print("\n\nGoodbye!")
        sys.exit(0)
    except APIClientError as e:
        console.print(f"\n[red]✗ {e.message}[/red]")
        if e.is_network_error:
            console.print("The data room server is not available. Please try again later.")
        sys.exit(1)


if __name__ == "__main__":
    main()
