from __future__ import annotations

import questionary
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from userbase.models.envelope import ServiceResult
from userbase.models.user import PublicUser, UserCreate, UserUpdate
from userbase.services.user_service import UserService

console = Console()


def _print_result(result: ServiceResult) -> None:
    style = "green bold" if result.success else "red"
    console.print(f"[{style}]{result.message}[/{style}]")
    for field, reason in (result.errors or {}).items():
        console.print(f"[red]  {field}: {reason}[/red]")


def _print_validation_error(exc: ValidationError) -> None:
    console.print("[red]Invalid input:[/red]")
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"])
        console.print(f"[red]  {field}: {err['msg']}[/red]")


def _fetch_users(user_service: UserService) -> list[PublicUser] | None:
    result = user_service.list_users()
    if not result.success:
        _print_result(result)
        return None
    if not result.data:
        console.print("[yellow]No users registered.[/yellow]")
        return None
    return result.data


def _select_user(user_service: UserService, prompt: str) -> PublicUser | None:
    users = _fetch_users(user_service)
    if users is None:
        return None
    labels = {f"#{u.id} {u.username} <{u.email}>": u for u in users}
    choice = questionary.select(prompt, choices=[*labels, "Back"]).ask()
    return labels.get(choice)


def _ask_password(label: str, required: bool) -> str | None:
    """Prompt twice; returns "" for a skipped optional password, None on cancel or mismatch."""
    password = questionary.password(label).ask()
    if password is None or (required and not password):
        console.print("[yellow]Operation cancelled.[/yellow]")
        return None
    if not password:
        return ""
    confirm = questionary.password("Confirm password:").ask()
    if password != confirm:
        console.print("[red]Passwords do not match.[/red]")
        return None
    return password


def list_users(user_service: UserService) -> None:
    users = _fetch_users(user_service)
    if users is None:
        return

    table = Table(title="Users")
    table.add_column("#", style="dim")
    table.add_column("Name")
    table.add_column("Username", style="bold")
    table.add_column("Email")
    table.add_column("Created")
    table.add_column("Updated")

    for u in users:
        created = u.created_at.strftime("%Y-%m-%d %H:%M") if u.created_at else "-"
        updated = u.updated_at.strftime("%Y-%m-%d %H:%M") if u.updated_at else "-"
        table.add_row(str(u.id), u.name, u.username, u.email, created, updated)

    console.print()
    console.print(table)
    console.print()


def create_user(user_service: UserService) -> None:
    console.print()
    console.print("[bold]New User[/bold]", style="cyan")

    name = questionary.text("Name:").ask()
    username = questionary.text("Username:").ask() if name else None
    email = questionary.text("Email:").ask() if username else None
    if not email:
        console.print("[yellow]Operation cancelled.[/yellow]")
        return

    password = _ask_password("Password:", required=True)
    if password is None:
        return

    try:
        payload = UserCreate(name=name, username=username, email=email, password=password)
    except ValidationError as e:
        _print_validation_error(e)
        return

    _print_result(user_service.create_user(payload))


def update_user(user_service: UserService) -> None:
    console.print()
    console.print("[bold]Update User[/bold]", style="cyan")

    user = _select_user(user_service, "Select the user:")
    if user is None:
        return

    name = questionary.text("Name:", default=user.name).ask()
    username = questionary.text("Username:", default=user.username).ask()
    email = questionary.text("Email:", default=user.email).ask()
    if name is None or username is None or email is None:
        console.print("[yellow]Operation cancelled.[/yellow]")
        return

    password = _ask_password("New password (leave empty to keep):", required=False)
    if password is None:
        return

    try:
        payload = UserUpdate(name=name, username=username, email=email, password=password or None)
    except ValidationError as e:
        _print_validation_error(e)
        return

    _print_result(user_service.update_user(user.id, payload))


def delete_user(user_service: UserService) -> None:
    console.print()
    console.print("[bold]Delete User[/bold]", style="cyan")

    user = _select_user(user_service, "Select the user:")
    if user is None:
        return

    if not questionary.confirm(f"Delete '{user.username}'? This cannot be undone.", default=False).ask():
        console.print("[yellow]Operation cancelled.[/yellow]")
        return

    _print_result(user_service.delete_user(user.id))
