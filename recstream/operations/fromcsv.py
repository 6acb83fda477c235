from __future__ import annotations

import io
from collections.abc import Iterator
from typing import IO

import pandas as pd

from chainkit.record import Record
from chainkit.stage_base import BaseStage
from chainkit.stage_types import Downstream, StageContext, StageRef

from recstream.operations._args import StageArgumentParser, comma_list

CHUNK_ROWS = 1000


class FromCsvStage(BaseStage):
    """Parse CSV into records.

    With FILE arguments the stage reads the files itself and wants no pushed
    input; otherwise it buffers pushed lines and parses them at end of input.
    Every value is kept as a string.
    """

    name = "fromcsv"

    def __init__(self, args: list[str], *, downstream: Downstream, context: StageContext):
        super().__init__(args, downstream=downstream, context=context)
        parser = StageArgumentParser(self.name)
        parser.add_argument("--header", action="store_true")
        parser.add_argument("-k", "--key", action="append")
        parser.add_argument("-d", "--delim", default=",")
        parser.add_argument("files", nargs="*")
        opts = parser.parse_args(self.args)
        self.header = bool(opts.header)
        self.keys = comma_list(opts.key)
        self.delim = opts.delim
        self.files = list(opts.files)
        self.lines: list[str] = []

    def wants_input(self) -> bool:
        return not self.files

    def accept_line(self, line: str) -> bool:
        self.lines.append(line)
        return True

    def _records(self, handle: IO[str], *, source: str) -> Iterator[Record]:
        try:
            chunks = pd.read_csv(
                handle,
                sep=self.delim,
                header=0 if self.header else None,
                dtype=str,
                keep_default_na=False,
                chunksize=CHUNK_ROWS,
            )
            for chunk in chunks:
                names = [str(col) for col in chunk.columns]
                names[: len(self.keys)] = self.keys[: len(names)]
                for values in chunk.itertuples(index=False, name=None):
                    yield Record(dict(zip(names, values)))
        except pd.errors.EmptyDataError:
            return
        except pd.errors.ParserError as exc:
            raise ValueError(f"Invalid CSV ({source}): {exc}") from exc

    def _emit(self, handle: IO[str], *, source: str) -> bool:
        self.context.source_name = source
        for record in self._records(handle, source=source):
            if not self.push_record(record):
                return False
        return True

    def stream_done(self) -> None:
        if not self.files:
            text = "\n".join(self.lines)
            self.lines = []
            self._emit(io.StringIO(text), source=self.context.source_name or "<input>")
            return

        for path in self.files:
            self.context.logger.debug("Reading CSV file %s", path)
            with open(path, "r", encoding="utf-8", newline="") as handle:
                if not self._emit(handle, source=path):
                    break


STAGE = StageRef(
    id="fromcsv",
    factory=FromCsvStage,
    doc="Parse CSV lines, or the named FILEs, into records (--header, -k names, -d delimiter).",
    tags=("input",),
)
