from __future__ import annotations

import json
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any


class Record(MutableMapping[str, Any]):
    """Ordered field-name -> value mapping flowing through a chain."""

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any] | None = None, **extra: Any):
        if fields is not None and not isinstance(fields, Mapping):
            raise TypeError(f"Record fields must be a mapping (type={type(fields).__name__})")
        self._fields: dict[str, Any] = dict(fields) if fields is not None else {}
        self._fields.update(extra)

    @classmethod
    def from_json_line(cls, line: str, *, source: str | None = None) -> "Record":
        where = f" ({source})" if source else ""
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON record{where}: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise ValueError(
                f"JSON record must be an object{where} (type={type(payload).__name__})"
            )
        return cls(payload)

    def to_json_line(self) -> str:
        return json.dumps(self._fields, ensure_ascii=False, default=str)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._fields)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._fields[key] = value

    def __delitem__(self, key: str) -> None:
        del self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Record):
            return self._fields == other._fields
        if isinstance(other, Mapping):
            return self._fields == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Record({self._fields!r})"
