"""Account commands for the entities CLI."""

from cyclopts import App

from entities.models import EntityAccount

account_app = App(name="account", help="Manage entity accounts")


@account_app.command
def create(type: str, account: str) -> None:
    """Create a new account."""
    from entities.cli import run_command

    new_account = EntityAccount(type=type, account=account)
    run_command(lambda manager: manager.save_account(new_account))
    print(f"Created account {new_account.id}: {new_account.account}")


@account_app.command(name="list")
def list_accounts(type: str = "") -> None:
    """List accounts, optionally of one type."""
    from entities.cli import run_command

    accounts = run_command(lambda manager: manager.get_all_accounts(type))

    print(f"Found {len(accounts)} account(s):\n")
    for found in accounts:
        print(f"{found.id} [{found.type}] {found.account}")


@account_app.command
def search(needle: str, type: str = "") -> None:
    """Search accounts."""
    from entities.cli import run_command

    accounts = run_command(lambda manager: manager.search_accounts(needle, type))

    print(f"Found {len(accounts)} account(s):\n")
    for found in accounts:
        print(f"{found.id} [{found.type}] {found.account}")


@account_app.command
def local(user_id: str) -> None:
    """Show the account of a local user."""
    from entities.cli import run_command

    found = run_command(lambda manager: manager.get_local_account(user_id))
    print(f"{found.id} [{found.type}] {found.account}")


@account_app.command
def memberships(account_id: str) -> None:
    """List the entities an account belongs to."""
    from entities.cli import format_member, run_command

    found = run_command(lambda manager: manager.account_belongs_to(manager.get_account(account_id)))

    if not found:
        print(f"No memberships for account {account_id}")
        return

    print(f"Memberships of account {account_id}:\n")
    for member in found:
        print(f"  {format_member(member)}")


@account_app.command
def admin(account_id: str) -> None:
    """Tell whether an account has admin rights."""
    from entities.cli import run_command

    is_admin = run_command(lambda manager: manager.account_has_admin_rights(manager.get_account(account_id)))
    print(f"Account {account_id} {'has' if is_admin else 'does not have'} admin rights")
