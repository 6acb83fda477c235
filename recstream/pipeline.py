from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from chainkit.bridge import HostFunctionRegistry
from chainkit.pipeline import Pipeline
from chainkit.runner import PipelineRunner, TextOutputPolicy

from recstream.operations.registry import get_stage_registry


def default_runner(
    *,
    host_functions: HostFunctionRegistry | None = None,
    text_policy: TextOutputPolicy | None = None,
) -> PipelineRunner:
    return PipelineRunner(
        get_stage_registry(),
        host_functions=host_functions,
        text_policy=text_policy,
    )


@dataclass(frozen=True)
class RecsPipeline(Pipeline):
    """A `Pipeline` that runs against the built-in stage catalog by default.

        recs().fromcsv("--header", "data.csv").grep(lambda r: int(r["age"]) >= 21).totable().run()
    """

    def run(
        self,
        *,
        input: Any = None,
        output: Any = None,
        runner: PipelineRunner | None = None,
    ) -> Any:
        return (runner or default_runner()).run(self, input=input, output=output)


def recs() -> RecsPipeline:
    return RecsPipeline.empty()
