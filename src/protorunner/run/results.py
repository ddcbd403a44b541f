"""Result view over a finished run.

The only real state here is which commands have their data panel expanded.
Expansion is kept as a positional list of booleans that starts empty on every
fresh result; any index it does not cover reads as collapsed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from protorunner.types import ProtocolResult


@dataclass(frozen=True)
class CommandRow:
    """One line of the result view."""

    index: int
    status: str
    succeeded: bool
    errors: tuple[str, ...]
    data: dict[str, Any]
    expandable: bool
    expanded: bool

    @property
    def title(self) -> str:
        return f"Command {self.index + 1}"


class ResultView:
    """Per-command presentation of a `ProtocolResult`."""

    def __init__(self, result: ProtocolResult):
        self.result = result
        self.expanded: list[bool] = []

    def __repr__(self):
        return (
            f"ResultView(status={self.result.status!r}, "
            f"commands={len(self.result.results)}, expanded={self.expanded!r})"
        )

    def __len__(self):
        return len(self.result.results)

    def is_expandable(self, index: int) -> bool:
        if not 0 <= index < len(self.result.results):
            return False
        return bool(self.result.results[index].data)

    def is_expanded(self, index: int) -> bool:
        if 0 <= index < len(self.expanded):
            return self.expanded[index]
        return False

    def toggle(self, index: int) -> bool:
        """Flip one command's data panel. Returns its new expansion state.

        Commands without data (or indices past the end) have no toggle; the
        call leaves everything unchanged.
        """
        if not self.is_expandable(index):
            logger.debug("Command {} has no data panel, not toggling", index)
            return False
        if index >= len(self.expanded):
            self.expanded.extend([False] * (index + 1 - len(self.expanded)))
        self.expanded[index] = not self.expanded[index]
        return self.expanded[index]

    def expand_all(self) -> None:
        self.expanded = [self.is_expandable(i) for i in range(len(self))]

    def collapse_all(self) -> None:
        self.expanded = []

    def rows(self) -> list[CommandRow]:
        return [
            CommandRow(
                index=i,
                status=cmd.status,
                succeeded=cmd.succeeded,
                errors=tuple(cmd.errors),
                data=dict(cmd.data),
                expandable=bool(cmd.data),
                expanded=bool(cmd.data) and self.is_expanded(i),
            )
            for i, cmd in enumerate(self.result.results)
        ]

    def summary(self) -> dict[str, Any]:
        succeeded = sum(1 for cmd in self.result.results if cmd.succeeded)
        return {
            "status": self.result.status,
            "command_count": self.result.command_count,
            "reported": len(self.result.results),
            "succeeded": succeeded,
            "failed": len(self.result.results) - succeeded,
            "count_mismatch": self.result.count_mismatch,
        }
