"""Tool contract, argument validation, policy and registry."""

from cloudcontrol.tools.base import EMPTY_INPUT_SCHEMA, Tool, tool
from cloudcontrol.tools.policy import PolicyAction, PolicyEngine, ToolPolicy, ToolPolicySettings
from cloudcontrol.tools.registry import ToolRegistry, build_registry
from cloudcontrol.tools.validation import (
    ArgsSchema,
    ArgumentIssue,
    ArgumentValidation,
    PydanticArgs,
    validate_arguments,
)

__all__ = [
    "EMPTY_INPUT_SCHEMA",
    "ArgsSchema",
    "ArgumentIssue",
    "ArgumentValidation",
    "PolicyAction",
    "PolicyEngine",
    "PydanticArgs",
    "Tool",
    "ToolPolicy",
    "ToolPolicySettings",
    "ToolRegistry",
    "build_registry",
    "tool",
    "validate_arguments",
]
