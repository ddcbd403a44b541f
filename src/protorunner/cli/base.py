import asyncio
from typing import Any, Optional

import click
import simplejson as json
from click_option_group import optgroup
from loguru import logger
from rich.console import Console

from protorunner.catalog import filter_protocols
from protorunner.client import ProtocolClient
from protorunner.form import ControlKind, FieldPlan, ProtocolForm, display_value
from protorunner.run import RUN_STATE, RunController, RunState
from protorunner.types import (
    FormValidationError,
    Protocol,
    ProtocolRunnerError,
    RunProgress,
)
from protorunner.util import (
    DEFAULT_LOGLEVEL,
    ClientConfig,
    get_log_filename,
    load_client_config,
    start_client_log,
)

from . import render

console = Console()


def print_tree(cmd, prefix="", parent_ctx=None):
    """Print command tree starting from given command."""
    ctx = click.Context(cmd, info_name=cmd.name, parent=parent_ctx)

    # Only print root name if no parent
    if not parent_ctx:
        click.echo(cmd.name)

    for sub in sorted(cmd.list_commands(ctx)):
        sub_cmd = cmd.get_command(ctx, sub)
        click.echo(f"{prefix}└── {sub}")
        if isinstance(sub_cmd, click.Group):
            print_tree(sub_cmd, prefix + "    ", ctx)


def tree_option(f):
    """Add --tree option to command."""

    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        print_tree(ctx.command)
        ctx.exit()

    return click.option(
        "--tree",
        is_flag=True,
        help="Show command tree from this point",
        expose_value=False,
        is_eager=True,
        callback=callback,
    )(f)


def fail(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    console.print(render.error_panel(message, title=title))
    log_file = get_log_filename()
    if log_file:
        console.print(f"Details in {log_file}", style="dim")
    raise SystemExit(1)


@click.group()
@tree_option
@click.option(
    "--api-url",
    "-u",
    default=None,
    help="Protocol service URL (default: config file, $PROTORUNNER_API_URL "
    + "or http://localhost:8000)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Client config INI file (default: ~/.protorunner/config.ini)",
)
@click.option(
    "--timeout", "-t", type=float, default=None, help="Request timeout in seconds"
)
@optgroup.group("Logging")
@optgroup.option(
    "--log-to-file/--no-log-to-file",
    default=True,
    help="Enable/disable logging to file (default: enabled)",
)
@optgroup.option(
    "--log-to-stdout/--no-log-to-stdout",
    default=False,
    help="Enable/disable console logging (default: disabled)",
)
@optgroup.option(
    "--log-path", default="", help="Custom path for log file (default: auto-generated)"
)
@optgroup.option(
    "--log-level",
    "-ll",
    default=DEFAULT_LOGLEVEL,
    help="Logging level (DEBUG, INFO, WARNING, ERROR) (default: INFO)",
)
@click.pass_context
def cli(
    ctx,
    api_url,
    config_path,
    timeout,
    log_to_file,
    log_to_stdout,
    log_path,
    log_level,
):
    """protorunner - browse, configure and run device-control protocols.

    - List and search the protocol catalog

    - Inspect a protocol's parameters and the controls they map to

    - Run a protocol in simulation or on hardware and inspect per-command results
    """
    start_client_log(
        log_to_file=log_to_file,
        log_to_stdout=log_to_stdout,
        log_path=log_path,
        log_level=log_level,
    )
    try:
        ctx.obj = load_client_config(config_path, api_url=api_url, timeout=timeout)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--config") from e
    logger.debug("Using {}", ctx.obj)


async def _fetch_catalog(config: ClientConfig) -> list[Protocol]:
    async with ProtocolClient.from_config(config) as client:
        return await client.list_protocols()


async def _fetch_protocol(config: ClientConfig, protocol_id: str) -> Protocol:
    async with ProtocolClient.from_config(config) as client:
        return await client.get_protocol(protocol_id)


@cli.command(name="list")
@click.option("--search", "-s", default="", help="Filter by name, description or tag")
@click.option("--tag", default=None, help="Only protocols carrying this tag")
@click.pass_obj
def list_protocols(config: ClientConfig, search: str, tag: Optional[str]):
    """List the protocols in the catalog."""
    try:
        protocols = asyncio.run(_fetch_catalog(config))
    except ProtocolRunnerError as e:
        fail(str(e), title="Error loading protocols")

    shown = filter_protocols(protocols, search)
    if tag:
        shown = [p for p in shown if tag in p.tags]

    if not shown:
        if search or tag:
            console.print("No protocols match your search criteria.")
        else:
            console.print("No protocols are currently registered in the system.")
        return
    console.print(render.protocols_table(shown))
    console.print(render.tags_line(protocols))


@cli.command()
@click.argument("protocol_id")
@click.pass_obj
def show(config: ClientConfig, protocol_id: str):
    """Show a protocol and the parameter form generated for it."""
    try:
        protocol = asyncio.run(_fetch_protocol(config, protocol_id))
    except ProtocolRunnerError as e:
        fail(str(e), title="Error loading protocol")

    form = ProtocolForm(protocol)
    console.print(render.protocol_panel(protocol))
    if len(form.plan):
        console.print(render.form_table(form))
    else:
        console.print("This protocol takes no parameters.")


def _parse_param(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise click.BadParameter(f"Expected NAME=VALUE, got '{text}'", param_hint="--param")
    return name.strip(), value


def _prompt_field(form: ProtocolForm, fp: FieldPlan) -> None:
    label = fp.label + (" *" if fp.required else "")
    current = form.get(fp.name)
    skippable = not fp.required and current is None
    match fp.control.kind:
        case ControlKind.TOGGLE if skippable:
            # blank leaves the parameter unset
            raw = click.prompt(
                f"{label} [y/n, blank to skip]", default="", show_default=False
            )
            form.set_raw(fp.name, raw)
        case ControlKind.TOGGLE:
            form.set(fp.name, click.confirm(label, default=bool(current)))
        case ControlKind.SELECT if not fp.required:
            options = fp.control.options
            raw = click.prompt(
                f"{label} ({', '.join(options)}, blank to skip)",
                type=click.Choice((*options, "")),
                default=current if current in options else "",
                show_choices=False,
                show_default=current in options,
            )
            form.set_raw(fp.name, raw)
        case ControlKind.SELECT:
            raw = click.prompt(
                label,
                type=click.Choice(fp.control.options),
                default=current if current in fp.control.options else None,
                show_choices=True,
            )
            form.set_raw(fp.name, raw)
        case _:
            raw = click.prompt(
                label,
                default=display_value(fp.control, current),
                show_default=True,
            )
            form.set_raw(fp.name, raw)


async def _drive_run(
    config: ClientConfig,
    protocol: Protocol,
    values: dict[str, Any],
    simulate: bool,
    quiet: bool = False,
) -> tuple[RunState, RunController]:
    async with ProtocolClient.from_config(config) as client:
        async with RunController(
            client,
            protocol.id,
            simulate=simulate,
            tick_interval=config.tick_interval,
        ) as ctl:
            mode = "simulation" if simulate else "hardware"
            with render.run_progress(console, disable=quiet) as bar:
                task_id = bar.add_task(f"{protocol.name} ({mode})", total=100)
                run_task = ctl.start(values)
                while not run_task.done():
                    await asyncio.sleep(0.05)
                    for notif in _drain(ctl.notif_queue):
                        if isinstance(notif, RunProgress):
                            bar.update(task_id, completed=notif.progress)
                        if not quiet:
                            _toast(notif)
                state = await run_task
                bar.update(task_id, completed=state.progress)
            for notif in _drain(ctl.notif_queue):
                if not quiet:
                    _toast(notif)
            return state, ctl


def _drain(queue: asyncio.Queue) -> list:
    items = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


def _toast(notif) -> None:
    line = render.notification_text(notif)
    if line is not None:
        console.print(line)


@cli.command()
@click.argument("protocol_id")
@click.option(
    "--param",
    "-p",
    "params",
    multiple=True,
    help="Parameter value as NAME=VALUE (repeatable)",
)
@click.option(
    "--simulate/--hardware",
    default=None,
    help="Run in simulation mode, or on the connected hardware "
    + "(default: config file, else simulate)",
)
@click.option(
    "--interactive", "-i", is_flag=True, help="Prompt for every parameter value"
)
@click.option(
    "--expand",
    "-e",
    type=int,
    multiple=True,
    help="Show the data of command N (1-based, repeatable)",
)
@click.option("--expand-all", is_flag=True, help="Show the data of every command")
@click.option(
    "--json", "as_json", is_flag=True, help="Print the raw result as JSON instead"
)
@click.pass_obj
def run(
    config: ClientConfig,
    protocol_id: str,
    params: tuple[str, ...],
    simulate: Optional[bool],
    interactive: bool,
    expand: tuple[int, ...],
    expand_all: bool,
    as_json: bool,
):
    """Fill in a protocol's parameters and run it.

    Values given with --param are coerced through the parameter's control
    (numbers parsed, toggles accept yes/no/on/off, lists split on commas) and
    validated against the protocol's schema before anything is sent.
    """
    try:
        protocol = asyncio.run(_fetch_protocol(config, protocol_id))
    except ProtocolRunnerError as e:
        fail(str(e), title="Error loading protocol")

    form = ProtocolForm(protocol)
    for text in params:
        name, raw = _parse_param(text)
        if name not in form.plan:
            raise click.BadParameter(
                f"Protocol {protocol.id} has no parameter '{name}'", param_hint="--param"
            )
        form.set_raw(name, raw)
    if interactive:
        for fp in form.plan:
            _prompt_field(form, fp)

    try:
        values = form.submission()
    except FormValidationError as e:
        console.print(render.errors_table(e.errors))
        raise SystemExit(1)

    if simulate is None:
        simulate = config.simulate

    state, ctl = asyncio.run(
        _drive_run(config, protocol, values, simulate, quiet=as_json)
    )

    if state.status == RUN_STATE.ERROR:
        fail(state.error_message or "Unknown error", title="Protocol failed")

    view = ctl.result_view
    if as_json:
        click.echo(json.dumps(view.result.to_dict(), indent=2))
        return
    console.print(render.status_badge(state.status))
    if expand_all:
        view.expand_all()
    for n in expand:
        if not view.is_expanded(n - 1):
            view.toggle(n - 1)
    for item in render.result_renderables(view):
        console.print(item)
