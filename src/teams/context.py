"""Host collaborator interface — per-item parameters and the failure mode."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from src.teams.description import get_parameter
from src.teams.exceptions import ConfigError

_MISSING: Any = object()


class ExecutionContext(Protocol):
    """What the node needs from the workflow runtime that invokes it."""

    def get_input_data(self) -> list[dict[str, Any]]:
        """Input records of the current run, in order."""
        ...

    def get_node_parameter(self, name: str, index: int, default: Any = _MISSING) -> Any:
        """Resolve parameter *name* for input record *index*."""
        ...

    def continue_on_fail(self) -> bool:
        """Whether a per-item error is captured instead of aborting the run."""
        ...


class StaticExecutionContext:
    """In-memory ExecutionContext.

    A parameter resolves from the input record itself, then from the
    node-level *parameters*, then from the explicit *default*, then from the
    default declared in the node description.

    Usage::

        ctx = StaticExecutionContext(
            items=[{"serviceName": "API"}, {"serviceName": "Web"}],
            parameters={"webhookUrl": url, "template": "siteDown", ...},
            continue_on_fail=True,
        )
        outputs = await node.execute(ctx)
    """

    def __init__(
        self,
        items: Sequence[Mapping[str, Any]],
        parameters: Mapping[str, Any] | None = None,
        continue_on_fail: bool = False,
    ) -> None:
        self._items = [dict(item) for item in items]
        self._parameters = dict(parameters or {})
        self._continue_on_fail = continue_on_fail

    def get_input_data(self) -> list[dict[str, Any]]:
        return list(self._items)

    def get_node_parameter(self, name: str, index: int, default: Any = _MISSING) -> Any:
        if not 0 <= index < len(self._items):
            raise IndexError(f"No input item at index {index}")

        item = self._items[index]
        if name in item:
            return item[name]
        if name in self._parameters:
            return self._parameters[name]
        if default is not _MISSING:
            return default

        declared = get_parameter(name)
        if declared is None:
            raise ConfigError(f"Unknown parameter: {name}")
        return declared.default

    def continue_on_fail(self) -> bool:
        return self._continue_on_fail
