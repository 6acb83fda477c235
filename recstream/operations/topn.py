from __future__ import annotations

from collections import defaultdict

from chainkit.record import Record
from chainkit.stage_base import BaseStage
from chainkit.stage_types import Downstream, StageContext, StageRef

from recstream.operations._args import StageArgumentParser, comma_list


class TopNStage(BaseStage):
    name = "topn"

    def __init__(self, args: list[str], *, downstream: Downstream, context: StageContext):
        super().__init__(args, downstream=downstream, context=context)
        parser = StageArgumentParser(self.name)
        parser.add_argument("-n", "--topn", type=int, default=10)
        parser.add_argument("-k", "--key", action="append")
        opts = parser.parse_args(self.args)
        if opts.topn < 1:
            raise ValueError(f"Invalid arguments for topn: -n must be >= 1 (got {opts.topn})")
        self.limit = opts.topn
        self.keys = comma_list(opts.key)
        self.counts: dict[tuple, int] = defaultdict(int)

    def accept_record(self, record: Record) -> bool:
        group = tuple(repr(record.get(key)) for key in self.keys)
        if self.counts[group] >= self.limit:
            return True
        self.counts[group] += 1
        return self.push_record(record)


STAGE = StageRef(
    id="topn",
    factory=TopNStage,
    doc="Pass the first N records of each group defined by --key (records, not text).",
    tags=("filter",),
)
