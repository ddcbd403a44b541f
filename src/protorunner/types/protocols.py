"""Service protocols the core depends on.

The form and run layers never talk HTTP themselves. They depend on these
structural types, which `protorunner.client.ProtocolClient` implements and
which tests satisfy with small fakes.

Note the naming: a *protocol* in the catalog sense is a device-control routine
(`protorunner.types.Protocol`); the classes here are `typing.Protocol`
interfaces, suffixed `...ServiceProtocol`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from . import Protocol as CatalogProtocol
    from .messages import ProtocolResult


@runtime_checkable
class CatalogServiceProtocol(Protocol):
    """Supplies protocol definitions.

    - list_protocols: all protocols, in catalog order
    - get_protocol: one protocol; raises ProtocolNotFoundError when absent
    """

    async def list_protocols(self) -> list[CatalogProtocol]: ...

    async def get_protocol(self, protocol_id: str) -> CatalogProtocol: ...


@runtime_checkable
class ExecutionServiceProtocol(Protocol):
    """Runs a protocol with concrete parameters.

    Returns the structured result, or raises a ProtocolRunnerError subclass
    (ExecutionError / CommsError) whose message is shown to the operator.
    """

    async def run_protocol(
        self, protocol_id: str, params: dict[str, Any], simulate: bool
    ) -> ProtocolResult: ...
