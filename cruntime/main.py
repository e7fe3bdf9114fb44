"""Command line front end for the container runtime."""

import json
import sys
from typing import Optional, Tuple

import click
from rich.markup import escape

from cruntime.config import config
from cruntime.errors import ContainerRuntimeError, TranslationError
from cruntime.lifecycle import delete_containers
from cruntime.oci import status_to_oci_state
from cruntime.sandbox import DockerSandboxEngine, SandboxEngine
from cruntime.utils import console, logger, print_table, setup_logging


def _engine(ctx: click.Context) -> SandboxEngine:
    return ctx.obj["engine"]


def _fail(error: ContainerRuntimeError) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    logger.debug("Command failed", exc_info=True)
    sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--log-level",
    default=None,
    help="Log level (default: from config)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]):
    """Container runtime - manage the containers it created."""
    setup_logging(log_level, config.log_file)

    ctx.ensure_object(dict)
    if "engine" not in ctx.obj:
        ctx.obj["engine"] = DockerSandboxEngine()


@cli.command()
@click.argument("container_ids", nargs=-1, metavar="<container-id> [container-id...]")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Forcibly deletes the container if it is still running (uses SIGKILL)",
)
@click.pass_context
def delete(ctx: click.Context, container_ids: Tuple[str, ...], force: bool):
    """
    Delete any resources held by one or more containers.

    <container-id> is the name for the instance of the container.

    Containers are deleted in order; the first failure stops the command.

    Examples:

        \b
        # Delete resources held by the stopped container "ubuntu01"
        cruntime delete ubuntu01
    """
    if not container_ids:
        raise click.UsageError("Missing container ID, should at least provide one")

    try:
        delete_containers(
            container_ids,
            force=force,
            engine=_engine(ctx),
            cgroups_root=config.cgroups_root,
        )
    except ContainerRuntimeError as e:
        _fail(e)


@cli.command()
@click.argument("container_id", metavar="<container-id>")
@click.pass_context
def state(ctx: click.Context, container_id: str):
    """Output the OCI state of a container."""
    try:
        oci_state = status_to_oci_state(_engine(ctx).fetch_status(container_id))
    except ContainerRuntimeError as e:
        _fail(e)

    click.echo(json.dumps(oci_state.model_dump(by_alias=True), indent=2))


@cli.command(name="list")
@click.pass_context
def list_containers(ctx: click.Context):
    """List the containers managed by the runtime."""
    engine = _engine(ctx)

    rows = []
    try:
        for container_id in engine.list_sandboxes():
            status = engine.fetch_status(container_id)
            try:
                oci_state = status_to_oci_state(status)
            except TranslationError:
                # States without an OCI counterpart are shown as the engine reports them.
                rows.append([status.id, str(status.pid), status.state, status.bundle or ""])
                continue
            rows.append([oci_state.id, str(oci_state.pid), oci_state.status, oci_state.bundle])
    except ContainerRuntimeError as e:
        _fail(e)

    print_table("Containers", ["ID", "PID", "Status", "Bundle"], rows, show_lines=False)


@cli.command()
def info():
    """Display the runtime configuration."""
    config_info = [
        ["Cgroups Root", str(config.cgroups_root)],
        ["Docker URL", config.docker_url or "(from environment)"],
        ["Managed Label", config.managed_label],
        ["Stop Timeout", f"{config.stop_timeout}s"],
        ["Log Level", config.log_level],
    ]

    print_table("Configuration", ["Setting", "Value"], config_info, show_lines=False)


if __name__ == "__main__":
    cli()
