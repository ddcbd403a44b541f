"""rich renderables for protocols, forms and run results."""

from __future__ import annotations

from typing import Any

from rich.console import Group
from rich.panel import Panel
from rich.pretty import Pretty
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Table
from rich.text import Text

from protorunner.catalog import truncate_description, unique_tags
from protorunner.form import ControlKind, FieldPlan, ProtocolForm, display_value
from protorunner.run import RUN_STATE, ResultView
from protorunner.types import Notification, Protocol, RunFailed, RunSucceeded

STATUS_LABELS = {
    RUN_STATE.IDLE: ("Ready", "white"),
    RUN_STATE.RUNNING: ("Running...", "yellow"),
    RUN_STATE.SUCCESS: ("Completed", "green"),
    RUN_STATE.ERROR: ("Failed", "red"),
}


def status_badge(status: str) -> Text:
    label, style = STATUS_LABELS.get(status, (status, "white"))
    return Text(label, style=f"bold {style}")


def protocols_table(protocols: list[Protocol]) -> Table:
    table = Table(title="Protocols", show_lines=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Tags", style="magenta")
    table.add_column("Description")
    for p in protocols:
        table.add_row(
            p.id, p.name, ", ".join(p.tags), truncate_description(p.description)
        )
    return table


def tags_line(protocols: list[Protocol]) -> Text:
    tags = unique_tags(protocols)
    return Text("Tags: " + (", ".join(tags) if tags else "(none)"), style="dim")


def _bounds(fp: FieldPlan) -> str:
    c = fp.control
    if c.kind is ControlKind.SELECT:
        return " | ".join(c.options)
    if c.kind in (ControlKind.RANGE, ControlKind.NUMBER):
        lo = "" if c.minimum is None else str(c.minimum)
        hi = "" if c.maximum is None else str(c.maximum)
        if not lo and not hi:
            return ""
        step = f" (step {c.step})" if c.step is not None else ""
        return f"[{lo}, {hi}]{step}"
    return ""


def form_table(form: ProtocolForm) -> Table:
    table = Table(title=f"Parameters: {form.protocol.name}")
    table.add_column("Parameter", style="cyan")
    table.add_column("Control")
    table.add_column("Allowed")
    table.add_column("Value", style="bold")
    table.add_column("Description", style="dim")
    for fp in form.plan:
        label = fp.label + (" *" if fp.required else "")
        table.add_row(
            label,
            fp.control.kind.value,
            _bounds(fp),
            display_value(fp.control, form.get(fp.name)),
            fp.description or "",
        )
    return table


def protocol_panel(protocol: Protocol) -> Panel:
    header = Text(protocol.name, style="bold")
    for tag in protocol.tags:
        header.append(f" [{tag}]", style="magenta")
    body = Text(protocol.description or "", style="dim")
    return Panel(Group(header, body), title=protocol.id, expand=False)


def errors_table(errors: dict[str, list[str]]) -> Table:
    table = Table(title="Invalid parameters", style="red")
    table.add_column("Parameter", style="cyan")
    table.add_column("Problem")
    for name, msgs in errors.items():
        table.add_row(name, "\n".join(msgs))
    return table


def error_panel(message: str, title: str = "Error") -> Panel:
    return Panel(Text(message), title=title, border_style="red", expand=False)


def notification_text(notif: Notification) -> Text | None:
    """Toast line for user-facing notifications, None for the rest."""
    if isinstance(notif, RunSucceeded):
        return Text(f"✔ {notif.title}: {notif.description}", style="green")
    if isinstance(notif, RunFailed):
        return Text(f"✘ {notif.title}: {notif.description}", style="red")
    return None


def result_renderables(view: ResultView) -> list[Any]:
    summary = view.summary()
    out: list[Any] = []
    head = Text(f"Status: {summary['status']}  ", style="bold")
    head.append(
        f"{summary['succeeded']} succeeded, {summary['failed']} failed "
        f"of {summary['command_count']} commands"
    )
    out.append(head)
    if summary["count_mismatch"]:
        out.append(
            Text(
                f"Service reported {summary['command_count']} commands "
                f"but returned {summary['reported']} results",
                style="yellow",
            )
        )

    table = Table(show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Status")
    table.add_column("Errors", style="red")
    table.add_column("Data")
    for row in view.rows():
        status = Text(row.status, style="green" if row.succeeded else "red")
        if not row.expandable:
            data = ""
        elif row.expanded:
            data = "▾ shown below"
        else:
            data = f"▸ {len(row.data)} field(s)"
        table.add_row(str(row.index + 1), status, "\n".join(row.errors), data)
    out.append(table)

    for row in view.rows():
        if row.expanded:
            out.append(Panel(Pretty(row.data), title=row.title, expand=False))
    return out


def run_progress(console, disable: bool = False) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
        disable=disable,
    )
