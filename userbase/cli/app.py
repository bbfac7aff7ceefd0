import questionary
from rich.console import Console

from userbase.cli.user_menu import create_user, delete_user, list_users, update_user
from userbase.repositories.factory import get_user_repository
from userbase.services.user_service import UserService

console = Console()


def _build_service() -> UserService:
    return UserService(get_user_repository())


def main_menu() -> None:
    user_service = _build_service()

    console.print()
    console.print("[bold]User Administration[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "List Users",
                "Create User",
                "Update User",
                "Delete User",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Bye![/bold]")
            break
        elif choice == "List Users":
            list_users(user_service)
        elif choice == "Create User":
            create_user(user_service)
        elif choice == "Update User":
            update_user(user_service)
        elif choice == "Delete User":
            delete_user(user_service)
