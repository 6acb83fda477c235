"""Terminal consumers for a compiled chain.

Both sinks satisfy the same contract as a chain node's downstream, so a chain
always ends uniformly in exactly one of them.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from chainkit.record import Record


@runtime_checkable
class Writable(Protocol):
    def write(self, text: str) -> Any:
        ...


class RecordSink:
    """Collects records as plain dicts, in arrival order."""

    def __init__(self, records: list[dict[str, Any]] | None = None):
        self.records: list[dict[str, Any]] = records if records is not None else []

    def wants_input(self) -> bool:
        return True

    def accept_record(self, record: Record) -> bool:
        self.records.append(record.as_dict())
        return True

    def accept_line(self, line: str) -> bool:
        return self.accept_record(Record.from_json_line(line))

    def finish(self) -> None:
        return


class LineSink:
    """Writes one line per call to a caller-owned text handle; never closes it."""

    def __init__(self, handle: Writable):
        if not isinstance(handle, Writable):
            raise TypeError(f"LineSink handle must be writable (type={type(handle).__name__})")
        self.handle = handle

    def wants_input(self) -> bool:
        return True

    def accept_line(self, line: str) -> bool:
        self.handle.write(f"{line}\n")
        return True

    def accept_record(self, record: Record) -> bool:
        return self.accept_line(record.to_json_line())

    def finish(self) -> None:
        return


Sink = RecordSink | LineSink
