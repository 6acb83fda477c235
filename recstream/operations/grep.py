from __future__ import annotations

from chainkit.record import Record
from chainkit.stage_base import BaseStage
from chainkit.stage_types import Downstream, StageContext, StageRef

from recstream.operations._args import StageArgumentParser
from recstream.snippets import Snippet


class GrepStage(BaseStage):
    name = "grep"

    def __init__(self, args: list[str], *, downstream: Downstream, context: StageContext):
        super().__init__(args, downstream=downstream, context=context)
        parser = StageArgumentParser(self.name)
        parser.add_argument("-v", "--invert-match", action="store_true")
        parser.add_argument("expression")
        opts = parser.parse_args(self.args)
        self.invert = bool(opts.invert_match)
        self.snippet = Snippet(opts.expression, context=context)

    def accept_record(self, record: Record) -> bool:
        matched = bool(self.snippet.evaluate(record))
        if matched != self.invert:
            return self.push_record(record)
        return True


STAGE = StageRef(
    id="grep",
    factory=GrepStage,
    doc="Keep records for which EXPR is truthy (-v inverts).",
    tags=("filter",),
)
