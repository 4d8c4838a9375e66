"""Pydantic models for statement ASTs, processor configuration and results.

All data structures live here. No business logic, just shapes (and
their canonical text rendering). Argument nodes are told apart by their
single key: ``literal``, ``path`` or ``call``.
"""

from __future__ import annotations

import json
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from telemetry_transform.paths import render_path


# ── Statement AST ─────────────────────────────────────────────────


class PathSegment(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    keys: list[StrictStr | StrictInt] = Field(default_factory=list)


class LiteralNode(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    literal: Any

    def render(self) -> str:
        return json.dumps(self.literal)


class PathNode(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    path: list[PathSegment] = Field(min_length=1)

    @field_validator("path", mode="before")
    @classmethod
    def _names_as_segments(cls, value: Any) -> Any:
        # Bare strings are shorthand for a segment without keys
        if isinstance(value, list):
            return [{"name": item} if isinstance(item, str) else item for item in value]
        return value

    def render(self) -> str:
        return render_path(self.path)


class CallNode(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    function: str
    arguments: list[ArgumentNode] = Field(default_factory=list)

    def render(self) -> str:
        args = ", ".join(arg.render() for arg in self.arguments)
        return f"{self.function}({args})"


class CallArgumentNode(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    call: CallNode

    def render(self) -> str:
        return self.call.render()


ArgumentNode = Union[LiteralNode, PathNode, CallArgumentNode]


class StatementNode(CallNode):
    condition: ArgumentNode | None = None

    def render(self) -> str:
        text = super().render()
        if self.condition is not None:
            text = f"{text} where {self.condition.render()}"
        return text


# Resolve forward references for the recursive argument union
CallNode.model_rebuild()
CallArgumentNode.model_rebuild()
StatementNode.model_rebuild()


# ── Processor configuration ──────────────────────────────────────


ErrorMode = Literal["ignore", "drop", "quarantine", "propagate"]


class TransformConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    error_mode: ErrorMode = "ignore"
    workers: int = Field(default=1, ge=1)
    resource_statements: list[StatementNode] = Field(default_factory=list)
    trace_statements: list[StatementNode] = Field(default_factory=list)
    metric_statements: list[StatementNode] = Field(default_factory=list)
    log_statements: list[StatementNode] = Field(default_factory=list)

    def statements_by_context(self) -> dict[str, tuple[str, list[StatementNode]]]:
        """Map context kind -> (config field name, statements)."""
        return {
            "resource": ("resource_statements", self.resource_statements),
            "span": ("trace_statements", self.trace_statements),
            "datapoint": ("metric_statements", self.metric_statements),
            "log": ("log_statements", self.log_statements),
        }


# ── Runtime results ──────────────────────────────────────────────


class RecordError(BaseModel):
    record_index: int
    context: str
    statement: str
    error_type: str
    message: str


class BatchReport(BaseModel):
    signal: str
    records_total: int = 0
    records_failed: int = 0
    records_dropped: int = 0
    errors: list[RecordError] = Field(default_factory=list)
    quarantined: list[dict[str, Any]] = Field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.records_failed == 0

    @property
    def partial(self) -> bool:
        """True when some, but not all, records failed."""
        return 0 < self.records_failed < self.records_total
