from __future__ import annotations

from collections.abc import Mapping

from chainkit.record import Record
from chainkit.stage_base import BaseStage
from chainkit.stage_types import Downstream, StageContext, StageRef

from recstream.operations._args import StageArgumentParser
from recstream.snippets import Snippet


class XformStage(BaseStage):
    name = "xform"

    def __init__(self, args: list[str], *, downstream: Downstream, context: StageContext):
        super().__init__(args, downstream=downstream, context=context)
        parser = StageArgumentParser(self.name)
        parser.add_argument("expression")
        self.snippet = Snippet(parser.parse_args(self.args).expression, context=context)

    def accept_record(self, record: Record) -> bool:
        result = self.snippet.evaluate(record)
        if isinstance(result, Mapping) and result is not record:
            record = Record(result)
        return self.push_record(record)


STAGE = StageRef(
    id="xform",
    factory=XformStage,
    doc="Evaluate EXPR per record; a mapping result replaces the record, otherwise r (possibly mutated) is passed on.",
    tags=("transform",),
)
