from __future__ import annotations

from chainkit.record import Record
from chainkit.stage_base import BaseStage
from chainkit.stage_types import Downstream, StageContext, StageRef

from recstream.operations._args import StageArgumentParser


class HeadStage(BaseStage):
    """Pass the first N records, then ask the driving loop to stop reading."""

    name = "head"

    def __init__(self, args: list[str], *, downstream: Downstream, context: StageContext):
        super().__init__(args, downstream=downstream, context=context)
        parser = StageArgumentParser(self.name)
        parser.add_argument("-n", "--count", type=int, default=10)
        count = parser.parse_args(self.args).count
        if count < 0:
            raise ValueError(f"Invalid arguments for head: count must be >= 0 (got {count})")
        self.count = count
        self.seen = 0

    def accept_record(self, record: Record) -> bool:
        if self.seen >= self.count:
            return False
        self.seen += 1
        keep_going = self.push_record(record)
        return keep_going and self.seen < self.count


STAGE = StageRef(
    id="head",
    factory=HeadStage,
    doc="Pass the first N records (-n, default 10) and stop reading input.",
    tags=("filter",),
)
