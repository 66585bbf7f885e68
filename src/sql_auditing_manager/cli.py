"""Command-line interface for SQL Auditing Manager."""

import functools
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .audit import AuditOperation, audit_event, setup_logging
from .policy import DatabaseAuditingPolicyModel, InvalidEventTypeSetError
from .policy.constants import EVENT_TYPE_CHOICES, STORAGE_KEY_CHOICES
from .service import AuditingPolicyService
from .storage import PolicyNotFoundError, PolicyStoreError, get_policy_store

console = Console()


def print_policy(policy: DatabaseAuditingPolicyModel) -> None:
    """Print a policy as a two-column table."""
    table = Table(title=f"Auditing Policy: {policy.database_name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Resource group", policy.resource_group_name)
    table.add_row("Server", policy.server_name)
    table.add_row("Database", policy.database_name)
    table.add_row("Audit state", policy.audit_state.value)
    table.add_row("Use server default", policy.use_server_default.value)
    table.add_row("Storage account", policy.storage_account_name or "")
    table.add_row("Storage key type", policy.storage_key_type.value)
    table.add_row(
        "Event types", "\n".join(event.value for event in policy.event_type) or "(none)"
    )
    console.print(table)


def print_policies(policies: list[DatabaseAuditingPolicyModel]) -> None:
    """Print one row per stored policy."""
    table = Table(title="Stored Auditing Policies")
    for header in ("Resource group", "Server", "Database", "State", "Storage account", "Events"):
        table.add_column(header, style="cyan")

    for policy in policies:
        table.add_row(
            policy.resource_group_name,
            policy.server_name,
            policy.database_name,
            policy.audit_state.value,
            policy.storage_account_name or "",
            str(len(policy.event_type)),
        )
    console.print(table)


def emit_policy(policy: DatabaseAuditingPolicyModel, as_json: bool) -> None:
    if as_json:
        click.echo(policy.model_dump_json(indent=2))
    else:
        print_policy(policy)


def _not_empty(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise click.BadParameter("must not be empty")
    return value


def database_options(func):
    """Options identifying the target database."""
    func = click.option("--database", "-d", required=True, help="Database name.")(func)
    func = click.option("--server", "-s", required=True, help="Server name.")(func)
    func = click.option(
        "--resource-group", "-g", required=True, help="Resource group of the server."
    )(func)
    return func


def pass_service(func):
    """Set up logging and the policy store, then pass the service to the command.

    Runs when the command body is invoked, so ``--help`` and usage errors
    never touch the log or store directories.
    """

    @click.pass_context
    def wrapper(ctx: click.Context, *args, **kwargs):
        settings = ctx.find_root().obj
        try:
            setup_logging(log_level=settings["log_level"], base_dir=settings["log_dir"])
            store = get_policy_store(settings["store_dir"])
        except (PolicyStoreError, OSError) as e:
            raise click.ClickException(f"Cannot initialize: {e}")
        return ctx.invoke(func, AuditingPolicyService(store), *args, **kwargs)

    return functools.update_wrapper(wrapper, func)


@click.group()
@click.version_option(package_name="sql-auditing-manager")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="INFO",
    help="Set logging level.",
)
@click.option(
    "--log-dir",
    envvar="SQLAUDIT_LOG_DIR",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for log files (default: ~/.local/log).",
)
@click.option(
    "--store-dir",
    envvar="SQLAUDIT_STORE_DIR",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for stored policies (default: ~/.config/sqlaudit/policies).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, log_dir: Optional[str], store_dir: Optional[str]) -> None:
    """SQL Auditing Manager CLI.

    Manage which database events are audited and where audit records go.
    """
    ctx.obj = {"log_level": log_level, "log_dir": log_dir, "store_dir": store_dir}


@cli.command(name="set-policy")
@database_options
@click.option(
    "--event-type",
    "-e",
    "event_types",
    multiple=True,
    type=click.Choice(EVENT_TYPE_CHOICES),
    help="Event type to audit (repeatable). 'All' and 'None' must be used alone.",
)
@click.option(
    "--storage-account",
    default=None,
    callback=_not_empty,
    help="Name of the storage account receiving audit records.",
)
@click.option(
    "--storage-key-type",
    type=click.Choice(STORAGE_KEY_CHOICES),
    default=None,
    help="Storage account key used to write audit records.",
)
@click.option("--pass-thru", is_flag=True, help="Output the resulting policy.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON instead of a table.")
@pass_service
def set_policy(
    service: AuditingPolicyService,
    resource_group: str,
    server: str,
    database: str,
    event_types: tuple[str, ...],
    storage_account: Optional[str],
    storage_key_type: Optional[str],
    pass_thru: bool,
    as_json: bool,
) -> None:
    """Set the auditing policy of a database."""
    details = {
        "resource_group": resource_group,
        "server": server,
        "database": database,
        "event_types": list(event_types),
        "storage_account": storage_account,
        "storage_key_type": storage_key_type,
    }
    try:
        policy = service.set_policy(
            resource_group,
            server,
            database,
            event_types=event_types,
            storage_account_name=storage_account,
            storage_key_type=storage_key_type,
        )
    except InvalidEventTypeSetError as e:
        audit_event(
            operation=AuditOperation.ERROR_POLICY,
            user="cli",
            success=False,
            details=details,
            error=e,
        )
        raise click.ClickException(str(e))
    except PolicyStoreError as e:
        audit_event(
            operation=AuditOperation.ERROR_STORE,
            user="cli",
            success=False,
            details=details,
            error=e,
        )
        raise click.ClickException(f"Error saving policy: {e}")

    audit_event(operation=AuditOperation.POLICY_UPDATE, user="cli", success=True, details=details)
    if pass_thru:
        emit_policy(policy, as_json)
    else:
        click.echo(f"Auditing policy updated for {resource_group}/{server}/{database}.")


@cli.command(name="get-policy")
@database_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON instead of a table.")
@pass_service
def get_policy(
    service: AuditingPolicyService,
    resource_group: str,
    server: str,
    database: str,
    as_json: bool,
) -> None:
    """Show the auditing policy of a database."""
    details = {"resource_group": resource_group, "server": server, "database": database}
    try:
        policy = service.get_policy(resource_group, server, database)
    except PolicyStoreError as e:
        audit_event(
            operation=AuditOperation.ERROR_STORE,
            user="cli",
            success=False,
            details=details,
            error=e,
        )
        raise click.ClickException(f"Error reading policy: {e}")

    audit_event(operation=AuditOperation.POLICY_READ, user="cli", success=True, details=details)
    emit_policy(policy, as_json)


@cli.command(name="remove-policy")
@database_options
@click.confirmation_option(prompt="Are you sure you want to remove this auditing policy?")
@pass_service
def remove_policy(
    service: AuditingPolicyService,
    resource_group: str,
    server: str,
    database: str,
) -> None:
    """Remove the stored auditing policy of a database."""
    details = {"resource_group": resource_group, "server": server, "database": database}
    try:
        service.remove_policy(resource_group, server, database)
    except PolicyNotFoundError as e:
        audit_event(
            operation=AuditOperation.ERROR_STORE,
            user="cli",
            success=False,
            details=details,
            error=e,
        )
        raise click.ClickException(
            f"No auditing policy stored for {resource_group}/{server}/{database}"
        )
    except PolicyStoreError as e:
        audit_event(
            operation=AuditOperation.ERROR_STORE,
            user="cli",
            success=False,
            details=details,
            error=e,
        )
        raise click.ClickException(f"Error removing policy: {e}")

    audit_event(operation=AuditOperation.POLICY_DELETE, user="cli", success=True, details=details)
    click.echo(f"Auditing policy removed for {resource_group}/{server}/{database}.")


@cli.command(name="list-policies")
@click.option("--resource-group", "-g", default=None, help="Filter by resource group.")
@click.option("--server", "-s", default=None, help="Filter by server.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON instead of a table.")
@pass_service
def list_policies(
    service: AuditingPolicyService,
    resource_group: Optional[str],
    server: Optional[str],
    as_json: bool,
) -> None:
    """List stored auditing policies."""
    details = {"resource_group": resource_group, "server": server}
    try:
        policies = service.list_policies(resource_group=resource_group, server=server)
    except PolicyStoreError as e:
        audit_event(
            operation=AuditOperation.ERROR_STORE,
            user="cli",
            success=False,
            details=details,
            error=e,
        )
        raise click.ClickException(f"Error listing policies: {e}")

    audit_event(operation=AuditOperation.POLICY_LIST, user="cli", success=True, details=details)
    if as_json:
        click.echo("[" + ",".join(policy.model_dump_json() for policy in policies) + "]")
    elif not policies:
        click.echo("No auditing policies stored.")
    else:
        print_policies(policies)


def main() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
