"""Run a `Pipeline` against one input and materialize the result.

Result policy, first match wins:

1. `output` is writable: stream lines into it and return `output` itself.
   Anything else passed as `output` is ignored.
2. last stage is text-producing (`TextOutputPolicy`): stream into a private
   in-memory buffer and return its text.
3. otherwise: collect records and return them as a list of plain dicts.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any

from chainkit.bridge import HostFunctionRegistry
from chainkit.config_namespace import ConfigNamespace
from chainkit.engine.chain import ChainNode, compile_chain
from chainkit.engine.inputs import drive
from chainkit.pipeline import Pipeline
from chainkit.sinks import LineSink, RecordSink, Sink, Writable
from chainkit.stage_registry import StageRegistry
from chainkit.stage_types import StageContext


@dataclass(frozen=True)
class TextOutputPolicy:
    """Decides whether a pipeline's last stage produces text rather than records."""

    prefix: str = "to"
    record_stages: tuple[str, ...] = ("topn",)

    def __post_init__(self) -> None:
        if not isinstance(self.prefix, str) or not self.prefix:
            raise TypeError("TextOutputPolicy.prefix must be a non-empty string")
        object.__setattr__(self, "record_stages", tuple(self.record_stages))

    @classmethod
    def from_config(cls, ns: ConfigNamespace) -> "TextOutputPolicy":
        defaults = cls()
        policy = cls(
            prefix=ns.get_str("text_prefix", default=defaults.prefix) or defaults.prefix,
            record_stages=tuple(
                ns.get_list_str("record_stages", default=list(defaults.record_stages), allow_empty=True)
            ),
        )
        ns.assert_consumed()
        return policy

    def is_text_producing(self, name: str | None) -> bool:
        if not name:
            return False
        return name.startswith(self.prefix) and name not in self.record_stages


class PipelineRunner:
    def __init__(
        self,
        stage_registry: StageRegistry,
        *,
        host_functions: HostFunctionRegistry | None = None,
        text_policy: TextOutputPolicy | None = None,
        logger: logging.Logger | None = None,
    ):
        self.stage_registry = stage_registry
        self.host_functions = host_functions if host_functions is not None else HostFunctionRegistry()
        self.text_policy = text_policy or TextOutputPolicy()
        self.logger = logger or logging.getLogger(__name__)

    def new_context(self) -> StageContext:
        return StageContext(host_functions=self.host_functions, logger=self.logger)

    def compile(
        self, pipeline: Pipeline, sink: Sink, *, context: StageContext | None = None
    ) -> ChainNode | Sink:
        return compile_chain(
            pipeline.calls,
            sink,
            stage_registry=self.stage_registry,
            context=context or self.new_context(),
        )

    def execute(self, pipeline: Pipeline, sink: Sink, *, input: Any = None) -> Sink:
        """Compile a fresh chain ending in `sink` and drive `input` through it."""

        context = self.new_context()
        head = self.compile(pipeline, sink, context=context)
        head_name = head.name if isinstance(head, ChainNode) else type(head).__name__
        self.logger.debug("Running chain: %s", " | ".join(pipeline.stages) or "<empty>")
        pushed = drive(head, input, context=context, stage_name=head_name)
        self.logger.debug("Chain finished (units=%d)", pushed)
        return sink

    def run(self, pipeline: Pipeline, *, input: Any = None, output: Any = None) -> Any:
        if not isinstance(pipeline, Pipeline):
            raise TypeError(f"run() expects a Pipeline (type={type(pipeline).__name__})")

        if output is not None and isinstance(output, Writable):
            self.execute(pipeline, LineSink(output), input=input)
            return output

        if self.text_policy.is_text_producing(pipeline.last_stage):
            buffer = io.StringIO()
            try:
                self.execute(pipeline, LineSink(buffer), input=input)
                buffer.flush()
                return buffer.getvalue()
            finally:
                buffer.close()

        sink = RecordSink()
        self.execute(pipeline, sink, input=input)
        return sink.records
