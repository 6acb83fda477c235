from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Any, Iterable

from chainkit.errors import UnknownStageError
from chainkit.stage_types import StageRef


@dataclass(frozen=True)
class StageRegistry:
    _by_id: dict[str, StageRef]

    @classmethod
    def from_refs(cls, refs: Iterable[StageRef]) -> "StageRegistry":
        entries: dict[str, StageRef] = {}
        for ref in refs:
            if not isinstance(ref, StageRef):
                raise TypeError(f"StageRegistry entries must be StageRef (type={type(ref).__name__})")
            if ref.id in entries:
                raise ValueError(f"Duplicate stage id: {ref.id}")
            entries[ref.id] = ref
        return cls(_by_id=entries)

    def available(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_id.keys()))

    def describe(self) -> tuple[dict[str, Any], ...]:
        rows: list[dict[str, Any]] = []
        for ref in sorted(self._by_id.values(), key=lambda r: r.id):
            rows.append({"stage_id": ref.id, "doc": ref.doc, "tags": list(ref.tags)})
        return tuple(rows)

    def __contains__(self, stage_id: object) -> bool:
        return isinstance(stage_id, str) and stage_id.strip() in self._by_id

    def resolve(self, stage_id: str) -> StageRef:
        if not isinstance(stage_id, str) or not stage_id.strip():
            raise UnknownStageError(str(stage_id), available=self.available())

        ref = self._by_id.get(stage_id.strip())
        if ref is None:
            raise UnknownStageError(
                stage_id,
                suggestions=self.suggest(stage_id),
                available=self.available(),
            )
        return ref

    def suggest(self, stage_id: str, *, limit: int = 3) -> tuple[str, ...]:
        key = (stage_id or "").strip()
        if not key:
            return ()
        return tuple(difflib.get_close_matches(key, list(self.available()), n=limit))
