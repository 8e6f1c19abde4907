"""Argument validation for tool calls.

A tool declares its arguments through an :class:`ArgsSchema`.  The schema
both validates and coerces the raw ``arguments`` mapping of a ``tools/call``
request, yielding either the typed value handed to ``run`` or an ordered
list of :class:`ArgumentIssue` objects.

:class:`PydanticArgs` adapts any pydantic model to the protocol, so tool
authors normally just pass a ``BaseModel`` subclass to
:func:`~cloudcontrol.tools.base.tool`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class ArgumentIssue(BaseModel):
    """One validation failure: where it happened and why."""

    code: str
    path: list[str | int] = []
    message: str


@dataclass(frozen=True)
class ArgumentValidation:
    """Outcome of validating a raw arguments mapping."""

    value: Any = None
    issues: tuple[ArgumentIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues


@runtime_checkable
class ArgsSchema(Protocol):
    """Structural contract a tool declares over its untyped JSON arguments."""

    def validate(self, raw: dict[str, Any]) -> ArgumentValidation:
        """Coerce *raw* into the typed value, or report every issue found."""
        ...

    def json_schema(self) -> dict[str, Any]:
        """Return the JSON Schema advertised in ``tools/list``."""
        ...


class PydanticArgs(Generic[ModelT]):
    """:class:`ArgsSchema` backed by a pydantic model.

    Validation runs in pydantic's lax mode, so numeric strings are coerced,
    defaults are filled in and ``Field`` constraints (bounds, literals) are
    enforced.
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    def __repr__(self) -> str:
        return f"PydanticArgs({self.model.__name__})"

    def validate(self, raw: dict[str, Any]) -> ArgumentValidation:
        try:
            value = self.model.model_validate(raw)
        except ValidationError as exc:
            issues = tuple(
                ArgumentIssue(code=err["type"], path=list(err["loc"]), message=err["msg"])
                for err in exc.errors(include_url=False)
            )
            return ArgumentValidation(issues=issues)
        return ArgumentValidation(value=value)

    def json_schema(self) -> dict[str, Any]:
        schema = self.model.model_json_schema()
        schema.setdefault("type", "object")
        schema.setdefault("properties", {})
        return schema


def as_args_schema(args: type[BaseModel] | ArgsSchema | None) -> ArgsSchema | None:
    """Normalise what a tool author passes as ``args`` into an :class:`ArgsSchema`."""
    if args is None:
        return None
    if isinstance(args, type) and issubclass(args, BaseModel):
        return PydanticArgs(args)
    if isinstance(args, ArgsSchema):
        return args
    msg = f"Unsupported argument schema: {args!r}"
    raise TypeError(msg)


def validate_arguments(
    schema: ArgsSchema | None,
    raw: dict[str, Any] | None,
) -> ArgumentValidation:
    """Validate *raw* against *schema*.

    Schema-less tools take no arguments: whatever the client supplied is
    ignored and the outcome carries no value.  For tools with a schema an
    absent ``arguments`` member is treated as ``{}``.
    """
    if schema is None:
        return ArgumentValidation()
    return schema.validate(raw if raw is not None else {})
