"""Authoring helper for stage implementations.

`BaseStage` satisfies the stage capability and handles the plumbing every stage
shares: pushing into the downstream, parsing JSON lines into records, and
cascading `finish()` so buffered output is flushed through the whole chain.
"""

from __future__ import annotations

from chainkit.record import Record
from chainkit.stage_types import Downstream, StageContext


class BaseStage:
    name = "stage"

    def __init__(self, args: list[str], *, downstream: Downstream, context: StageContext):
        self.args = list(args)
        self.downstream = downstream
        self.context = context
        self._finished = False

    def wants_input(self) -> bool:
        return True

    def accept_line(self, line: str) -> bool:
        return self.accept_record(Record.from_json_line(line, source=self.context.source_name))

    def accept_record(self, record: Record) -> bool:
        return self.push_record(record)

    def push_record(self, record: Record) -> bool:
        return bool(self.downstream.accept_record(record))

    def push_line(self, line: str) -> bool:
        return bool(self.downstream.accept_line(line))

    def stream_done(self) -> None:
        """Flush hook for buffering stages; runs before the downstream finishes."""

    def finish(self) -> None:
        if self._finished:
            raise RuntimeError(f"Stage {self.name} finished twice")
        self._finished = True
        self.stream_done()
        self.downstream.finish()
