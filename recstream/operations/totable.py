from __future__ import annotations

import pandas as pd

from chainkit.record import Record
from chainkit.stage_base import BaseStage
from chainkit.stage_types import Downstream, StageContext, StageRef

from recstream.operations._args import StageArgumentParser, comma_list


class ToTableStage(BaseStage):
    """Render buffered records as an aligned text table when the input ends.

        foo   bar
        ---   ---
        1     2
    """

    name = "totable"

    def __init__(self, args: list[str], *, downstream: Downstream, context: StageContext):
        super().__init__(args, downstream=downstream, context=context)
        parser = StageArgumentParser(self.name)
        parser.add_argument("-k", "--key", action="append")
        parser.add_argument("--no-header", action="store_true")
        parser.add_argument("--spacing", type=int, default=3)
        opts = parser.parse_args(self.args)
        # Unique columns, first occurrence wins.
        self.fields = list(dict.fromkeys(comma_list(opts.key)))
        self.header = not opts.no_header
        self.spacing = max(1, int(opts.spacing))
        self.rows: list[dict] = []

    def accept_record(self, record: Record) -> bool:
        self.rows.append(record.as_dict())
        return True

    def render(self) -> list[str]:
        if not self.rows:
            return []
        frame = pd.DataFrame(self.rows, dtype=object)
        columns = self.fields or [str(col) for col in frame.columns]
        frame = frame.reindex(columns=columns).astype(object)
        frame = frame.where(frame.notna(), "").astype(str)

        widths = {
            col: max(len(col) if self.header else 0, int(frame[col].str.len().max() or 0))
            for col in columns
        }
        gap = " " * self.spacing

        def line(cells: list[str]) -> str:
            return gap.join(cell.ljust(widths[col]) for col, cell in zip(columns, cells)).rstrip()

        lines: list[str] = []
        if self.header:
            lines.append(line(list(columns)))
            lines.append(line(["-" * widths[col] for col in columns]))
        for values in frame.itertuples(index=False, name=None):
            lines.append(line(list(values)))
        return lines

    def stream_done(self) -> None:
        for text in self.render():
            if not self.push_line(text):
                break
        self.rows = []


STAGE = StageRef(
    id="totable",
    factory=ToTableStage,
    doc="Render records as an aligned text table (-k selects and orders columns).",
    tags=("output", "buffering"),
)
