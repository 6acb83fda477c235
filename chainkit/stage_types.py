from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from chainkit.bridge import HostFunctionRegistry
from chainkit.record import Record


@runtime_checkable
class Downstream(Protocol):
    """What a stage pushes into: the next chain node or the terminal sink."""

    def accept_line(self, line: str) -> bool:
        ...

    def accept_record(self, record: Record) -> bool:
        ...

    def finish(self) -> None:
        ...


@runtime_checkable
class StageCapability(Downstream, Protocol):
    def wants_input(self) -> bool:
        ...


@dataclass
class StageContext:
    """Per-run state shared by every stage instance of one compiled chain."""

    host_functions: HostFunctionRegistry
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("chainkit.stage"))
    source_name: str | None = None


class StageFactory(Protocol):
    def __call__(
        self, args: list[str], *, downstream: Downstream, context: StageContext
    ) -> StageCapability:
        ...


@dataclass(frozen=True)
class StageRef:
    id: str
    factory: StageFactory
    doc: str | None = None
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise TypeError("StageRef.id must be a non-empty string")
        object.__setattr__(self, "id", self.id.strip())

        if not callable(self.factory):
            raise TypeError(f"StageRef.factory must be callable (stage={self.id})")
        if self.doc is not None and (not isinstance(self.doc, str) or not self.doc.strip()):
            raise TypeError("StageRef.doc must be a non-empty string or None")

        if self.tags:
            object.__setattr__(
                self, "tags", tuple(str(tag).strip() for tag in self.tags if str(tag).strip())
            )

    def create(
        self, args: list[str], *, downstream: Downstream, context: StageContext
    ) -> StageCapability:
        stage = self.factory(list(args), downstream=downstream, context=context)
        if not isinstance(stage, StageCapability):
            raise TypeError(
                f"Stage factory returned an object without the stage capability "
                f"(stage={self.id}, type={type(stage).__name__})"
            )
        return stage
