"""Input adapters and the push-based driving loop.

Callers may tag their input explicitly (`FromStream`, `FromLines`,
`FromRecords`) or pass a raw value, in which case `coerce_input` picks the shape
by inspection. Either way the head of the chain sees one uniform protocol:
`accept_line` / `accept_record` per unit, then exactly one `finish()`.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, TextIO, runtime_checkable

from chainkit.errors import InputRequiredError, UnsupportedInputError
from chainkit.record import Record
from chainkit.stage_types import StageCapability, StageContext

STDIN_LABEL = "stdin"


@runtime_checkable
class Readable(Protocol):
    def readline(self) -> str:
        ...


@dataclass(frozen=True)
class FromStream:
    stream: TextIO
    name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.stream, Readable):
            raise UnsupportedInputError(self.stream, reason="stream has no readline()")


@dataclass(frozen=True)
class FromLines:
    lines: Sequence[str]

    def __post_init__(self) -> None:
        for idx, line in enumerate(self.lines):
            if not isinstance(line, str):
                raise UnsupportedInputError(
                    self.lines, reason=f"lines[{idx}] is {type(line).__name__}, expected str"
                )


@dataclass(frozen=True)
class FromRecords:
    records: Sequence[Mapping[str, Any]]

    def __post_init__(self) -> None:
        for idx, record in enumerate(self.records):
            if not isinstance(record, Mapping):
                raise UnsupportedInputError(
                    self.records,
                    reason=f"records[{idx}] is {type(record).__name__}, expected a mapping",
                )


Input = FromStream | FromLines | FromRecords


def coerce_input(value: Any) -> Input:
    if isinstance(value, (FromStream, FromLines, FromRecords)):
        return value
    if isinstance(value, Readable):
        return FromStream(value)
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
        raise UnsupportedInputError(value)

    items = list(value)
    if all(isinstance(item, str) for item in items):
        return FromLines(items)
    if all(isinstance(item, Mapping) for item in items):
        return FromRecords(items)
    raise UnsupportedInputError(value, reason="expected all lines (str) or all records (mappings)")


def source_label(stream: Any) -> str:
    if stream is sys.stdin or stream is sys.__stdin__:
        return STDIN_LABEL

    fileno = getattr(stream, "fileno", None)
    if callable(fileno):
        try:
            return f"fd#{int(fileno())}"
        except (OSError, ValueError):
            # In-memory streams (io.StringIO) raise io.UnsupportedOperation here.
            pass

    name = getattr(stream, "name", None)
    if isinstance(name, str) and name.strip():
        return name.strip()
    return f"stream#{id(stream):x}"


def _chomp(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def drive(head: StageCapability, value: Any, *, context: StageContext, stage_name: str) -> int:
    """Push `value` through `head`, then finish it. Returns the units pushed."""

    pushed = 0
    if head.wants_input():
        if value is None:
            raise InputRequiredError(stage_name)

        source = coerce_input(value)
        if isinstance(source, FromStream):
            context.source_name = source.name or source_label(source.stream)
            # readline() rather than iteration: no read-ahead past a stop signal.
            while True:
                line = source.stream.readline()
                if not line:
                    break
                pushed += 1
                if head.accept_line(_chomp(line)) is False:
                    context.logger.debug("Stop signal from %s after %d lines", stage_name, pushed)
                    break
        elif isinstance(source, FromLines):
            for line in source.lines:
                pushed += 1
                if head.accept_line(line) is False:
                    context.logger.debug("Stop signal from %s after %d lines", stage_name, pushed)
                    break
        else:
            for raw in source.records:
                pushed += 1
                if head.accept_record(Record(raw)) is False:
                    context.logger.debug("Stop signal from %s after %d records", stage_name, pushed)
                    break
    elif value is not None:
        context.logger.debug("Stage %s generates its own input; ignoring supplied input", stage_name)

    head.finish()
    return pushed
