from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from chainkit.record import Record
from chainkit.stage_base import BaseStage
from chainkit.stage_types import Downstream, StageContext, StageRef

from recstream.operations._args import StageArgumentParser, comma_list

SORT_TYPES = ("lexical", "numeric")


@dataclass(frozen=True)
class SortKey:
    field: str
    kind: str = "lexical"
    reverse: bool = False

    @classmethod
    def parse(cls, spec: str) -> "SortKey":
        field, _, kind = spec.partition("=")
        field = field.strip()
        if not field:
            raise ValueError(f"Invalid arguments for sort: empty field in key {spec!r}")
        kind = kind.strip().lower() or "lexical"
        reverse = kind.startswith("-")
        kind = kind.lstrip("-+")
        matches = [name for name in SORT_TYPES if name.startswith(kind)]
        if len(matches) != 1:
            raise ValueError(
                f"Invalid arguments for sort: unknown sort type {kind!r} in key {spec!r} "
                f"(expected one of: {', '.join(SORT_TYPES)})"
            )
        return cls(field=field, kind=matches[0], reverse=reverse)

    def value(self, record: Record) -> Any:
        raw = record.get(self.field)
        if self.kind == "numeric":
            try:
                return float(raw)
            except (TypeError, ValueError):
                return 0.0
        return "" if raw is None else str(raw)


class SortStage(BaseStage):
    """Buffer every record and emit them sorted when the input ends."""

    name = "sort"

    def __init__(self, args: list[str], *, downstream: Downstream, context: StageContext):
        super().__init__(args, downstream=downstream, context=context)
        parser = StageArgumentParser(self.name)
        parser.add_argument("-k", "--key", action="append", required=True)
        parser.add_argument("-r", "--reverse", action="store_true")
        opts = parser.parse_args(self.args)
        self.keys = [SortKey.parse(spec) for spec in comma_list(opts.key)]
        self.reverse = bool(opts.reverse)
        self.records: list[Record] = []

    def accept_record(self, record: Record) -> bool:
        self.records.append(record)
        return True

    def stream_done(self) -> None:
        ordered = list(self.records)
        # Stable sorts applied least-significant key first.
        for key in reversed(self.keys):
            ordered.sort(key=key.value, reverse=key.reverse)
        if self.reverse:
            ordered.reverse()
        self.records = []
        for record in ordered:
            if not self.push_record(record):
                break


STAGE = StageRef(
    id="sort",
    factory=SortStage,
    doc="Sort records by --key FIELD[=[-]lexical|numeric] (repeatable, comma-separated).",
    tags=("buffering",),
)
