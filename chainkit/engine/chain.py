"""Compile stage calls into a linked chain of stage instances.

Compilation is tail-first: each stage pushes eagerly into its downstream, so
the downstream (next node, or the sink for the last stage) must exist before the
stage is constructed. Stage instances may hold mutable state, so a chain is
built fresh for every run and never reused.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from chainkit.pipeline import StageCall
from chainkit.record import Record
from chainkit.sinks import Sink
from chainkit.stage_registry import StageRegistry
from chainkit.stage_types import StageCapability, StageContext

logger = logging.getLogger(__name__)


class ChainNode:
    """One compiled link: a stage instance plus the node or sink it feeds."""

    def __init__(self, name: str, stage: StageCapability, downstream: "ChainNode | Sink"):
        if downstream is None:
            raise ValueError(f"Chain node {name} requires a downstream")
        self.name = name
        self.stage = stage
        self.downstream = downstream

    def wants_input(self) -> bool:
        return bool(self.stage.wants_input())

    def accept_line(self, line: str) -> bool:
        return self.stage.accept_line(line) is not False

    def accept_record(self, record: Record) -> bool:
        return self.stage.accept_record(record) is not False

    def finish(self) -> None:
        self.stage.finish()

    def output_sink(self) -> Sink:
        node: ChainNode | Sink = self
        while isinstance(node, ChainNode):
            node = node.downstream
        return node

    def names(self) -> tuple[str, ...]:
        out: list[str] = []
        node: ChainNode | Sink = self
        while isinstance(node, ChainNode):
            out.append(node.name)
            node = node.downstream
        return tuple(out)

    def __repr__(self) -> str:
        return f"ChainNode({' | '.join(self.names())})"


def compile_chain(
    calls: Sequence[StageCall],
    sink: Sink,
    *,
    stage_registry: StageRegistry,
    context: StageContext,
) -> ChainNode | Sink:
    """Build the chain for `calls` ending in `sink`; returns the head."""

    downstream: ChainNode | Sink = sink
    for call in reversed(calls):
        ref = stage_registry.resolve(call.name)
        args = call.render_args(context.host_functions)
        stage = ref.create(args, downstream=downstream, context=context)
        downstream = ChainNode(ref.id, stage, downstream)
        logger.debug("Compiled stage %s (args=%d)", ref.id, len(args))
    return downstream
