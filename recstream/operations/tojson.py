from __future__ import annotations

from chainkit.record import Record
from chainkit.stage_base import BaseStage
from chainkit.stage_types import Downstream, StageContext, StageRef

from recstream.operations._args import StageArgumentParser


class ToJsonStage(BaseStage):
    name = "tojson"

    def __init__(self, args: list[str], *, downstream: Downstream, context: StageContext):
        super().__init__(args, downstream=downstream, context=context)
        StageArgumentParser(self.name).parse_args(self.args)

    def accept_record(self, record: Record) -> bool:
        return self.push_line(record.to_json_line())


STAGE = StageRef(id="tojson", factory=ToJsonStage, doc="Write each record as one JSON line.", tags=("output",))
