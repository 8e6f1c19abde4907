"""PolicyEngine — decides which tools are exposed, by name.

Pure logic, no I/O.  The engine walks the ``policies`` list (first match
wins) and falls back to ``default_action``.
"""

from __future__ import annotations

import fnmatch
from enum import Enum

from pydantic import BaseModel, Field


class PolicyAction(str, Enum):
    """Whether a tool matching a rule is exposed."""

    ALLOW = "allow"
    DENY = "deny"


class ToolPolicy(BaseModel):
    """A single rule matching tool names to an action."""

    pattern: str = Field(..., description="Tool name or glob pattern (e.g. 'aws_s3_*', '*').")
    action: PolicyAction = Field(..., description="What to do when this rule matches.")
    reason: str = Field(default="", description="Human-readable rationale for the rule.")


class ToolPolicySettings(BaseModel):
    """Ordered allow/deny rules applied when the registry is built."""

    default_action: PolicyAction = Field(
        default=PolicyAction.ALLOW,
        description="Action when no rule matches.",
    )
    policies: list[ToolPolicy] = Field(
        default_factory=list,
        description="Ordered rules (first match wins).",
    )


class PolicyEngine:
    """Evaluate a tool name against a :class:`ToolPolicySettings`."""

    def __init__(self, settings: ToolPolicySettings | None = None) -> None:
        self._settings = settings or ToolPolicySettings()

    @property
    def settings(self) -> ToolPolicySettings:
        return self._settings

    def evaluate(self, tool_name: str) -> PolicyAction:
        for policy in self._settings.policies:
            if fnmatch.fnmatchcase(tool_name, policy.pattern):
                return policy.action
        return self._settings.default_action

    def allows(self, tool_name: str) -> bool:
        return self.evaluate(tool_name) == PolicyAction.ALLOW
