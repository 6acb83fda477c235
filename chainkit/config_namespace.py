"""Strict reader for pipeline configuration mappings.

Every key read through a `ConfigNamespace` is marked consumed; `assert_consumed`
then rejects whatever is left, so a typo in a YAML file fails the load instead
of being silently ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_MISSING = object()


@dataclass
class ConfigNamespace:
    data: Mapping[str, Any]
    path: str
    _consumed: set[str] = field(default_factory=set, init=False, repr=False)
    _children: dict[str, "ConfigNamespace"] = field(default_factory=dict, init=False, repr=False)

    def key_path(self, key: str) -> str:
        return f"{self.path}.{key}" if self.path else key

    def consumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._consumed))

    def unconsumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(set(self.data) - self._consumed))

    def assert_consumed(self) -> None:
        leftover = self.unconsumed_keys()
        if leftover:
            raise ValueError(
                f"Unknown config keys under {self.path or '<root>'}: {', '.join(leftover)} "
                f"(consumed: {', '.join(self.consumed_keys()) or '<none>'})"
            )
        for child in self._children.values():
            child.assert_consumed()

    def _take(self, key: str, default: Any) -> tuple[str, Any]:
        name = key.strip() if isinstance(key, str) else ""
        if not name:
            raise TypeError("ConfigNamespace key must be a non-empty string")
        if name in self._children:
            raise ValueError(f"{self.key_path(name)} already accessed as a nested namespace")

        self._consumed.add(name)
        if name in self.data:
            return name, self.data[name]
        if default is _MISSING:
            raise ValueError(f"Missing required config key: {self.key_path(name)}")
        return name, default

    def namespace(self, key: str, *, default: Mapping[str, Any] | None | object = _MISSING) -> "ConfigNamespace":
        name = key.strip() if isinstance(key, str) else ""
        if name in self._children:
            return self._children[name]
        if not name:
            raise TypeError("ConfigNamespace key must be a non-empty string")

        self._consumed.add(name)
        raw = self.data.get(name)
        if raw is None:
            if default is _MISSING:
                raise ValueError(f"Missing required config namespace: {self.key_path(name)}")
            raw = default or {}
        if not isinstance(raw, Mapping):
            raise TypeError(f"{self.key_path(name)} must be a mapping (type={type(raw).__name__})")

        child = ConfigNamespace(dict(raw), path=self.key_path(name))
        self._children[name] = child
        return child

    def get_str(
        self,
        key: str,
        *,
        default: str | None | object = _MISSING,
        allow_empty: bool = False,
    ) -> str | None:
        name, raw = self._take(key, default)
        if raw is None:
            return None
        if not isinstance(raw, str):
            raise TypeError(f"{self.key_path(name)} must be a string (type={type(raw).__name__})")
        value = raw.strip()
        if not value and not allow_empty:
            raise ValueError(f"{self.key_path(name)} cannot be empty")
        return value

    def _get_list(
        self, key: str, *, default: Any, allow_empty: bool, item_type: type, label: str
    ) -> list[Any]:
        name, raw = self._take(key, default)
        if not isinstance(raw, (list, tuple)):
            raise TypeError(f"{self.key_path(name)} must be a {label} (type={type(raw).__name__})")
        for idx, item in enumerate(raw):
            if not isinstance(item, item_type):
                kind = "mapping" if item_type is Mapping else "string"
                raise TypeError(
                    f"{self.key_path(name)}[{idx}] must be a {kind} (type={type(item).__name__})"
                )
        if not raw and not allow_empty:
            raise ValueError(f"{self.key_path(name)} cannot be empty")
        return list(raw)

    def get_list_str(
        self,
        key: str,
        *,
        default: list[str] | tuple[str, ...] | object = _MISSING,
        allow_empty: bool = False,
    ) -> list[str]:
        return self._get_list(key, default=default, allow_empty=allow_empty, item_type=str, label="list[str]")

    def get_list_mapping(
        self,
        key: str,
        *,
        default: list[Mapping[str, Any]] | tuple[Mapping[str, Any], ...] | object = _MISSING,
        allow_empty: bool = False,
    ) -> list[dict[str, Any]]:
        """List of mappings, each copied into a plain dict."""

        items = self._get_list(
            key, default=default, allow_empty=allow_empty, item_type=Mapping, label="list[dict]"
        )
        return [dict(item) for item in items]
