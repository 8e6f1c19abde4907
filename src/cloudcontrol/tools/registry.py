"""ToolRegistry — the immutable name-to-tool table the server dispatches on."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from cloudcontrol.tools.base import Tool
from cloudcontrol.tools.policy import PolicyEngine, ToolPolicySettings

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Ordered collection of tools, searchable by exact name.

    Built once from a list of tools.  Names are expected to be unique; when
    they are not, the first registration wins and later duplicates are
    dropped with a warning.  Iteration follows registration order.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        for item in tools:
            if item.name in self._tools:
                logger.warning("Duplicate tool name %r ignored; first registration wins", item.name)
                continue
            self._tools[item.name] = item

    def find(self, name: str) -> Tool | None:
        """Return the tool registered under *name*, or ``None``."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


def build_registry(
    tools: Iterable[Tool],
    policy: ToolPolicySettings | None = None,
) -> ToolRegistry:
    """Filter *tools* through *policy* and freeze the result into a registry."""
    engine = PolicyEngine(policy)
    allowed: list[Tool] = []
    for item in tools:
        if engine.allows(item.name):
            allowed.append(item)
        else:
            logger.info("Tool %s disabled by policy", item.name)
    return ToolRegistry(allowed)
