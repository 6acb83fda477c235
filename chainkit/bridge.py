"""Bridge host-language callables into textual stage arguments.

Stage implementations only understand textual configuration. A callable passed
as a stage argument is stored in a `HostFunctionRegistry` under an opaque token
and replaced by a one-line invocation instruction:

    __host__('<token>')(r)

Stage evaluators bind the current record to `RECORD_NAME` and the registry's
`lookup` to `HOST_LOOKUP_NAME`; the callable itself is then called directly.
"""

from __future__ import annotations

import inspect
import itertools
import logging
import textwrap
from typing import Any, Callable

from chainkit.errors import RegistrationError

RECORD_NAME = "r"
HOST_LOOKUP_NAME = "__host__"

HostFunction = Callable[[Any], Any]

logger = logging.getLogger(__name__)


class UnknownHostFunctionError(KeyError):
    pass


class HostFunctionRegistry:
    """Token -> callable store scoped to one runner (or one explicit context).

    Entries are never reclaimed implicitly; long-lived embeddings should bound
    the registry with `max_entries` or call `clear()` between unrelated runs.
    """

    def __init__(self, *, prefix: str = "fn", max_entries: int | None = None):
        if not isinstance(prefix, str) or not prefix.strip():
            raise TypeError("prefix must be a non-empty string")
        if max_entries is not None and (isinstance(max_entries, bool) or max_entries < 1):
            raise ValueError(f"max_entries must be a positive int or None (got {max_entries!r})")
        self._prefix = prefix.strip()
        self._max_entries = max_entries
        self._counter = itertools.count(1)
        self._by_token: dict[str, HostFunction] = {}
        self._token_by_id: dict[int, str] = {}
        self._sealed = False

    def register(self, fn: HostFunction) -> str:
        if not callable(fn):
            raise RegistrationError(
                f"Host function must be callable (type={type(fn).__name__})"
            )
        existing = self._token_by_id.get(id(fn))
        if existing is not None:
            return existing

        if self._sealed:
            raise RegistrationError(f"Host function registry is sealed; cannot register {_label(fn)}")
        if self._max_entries is not None and len(self._by_token) >= self._max_entries:
            raise RegistrationError(
                f"Host function registry is full ({self._max_entries} entries); "
                f"cannot register {_label(fn)}"
            )

        token = f"{self._prefix}{next(self._counter)}"
        # The strong reference in _by_token keeps id(fn) from being reused.
        self._by_token[token] = fn
        self._token_by_id[id(fn)] = token
        logger.debug("Registered host function %s as %s", _label(fn), token)
        return token

    def lookup(self, token: str) -> HostFunction:
        try:
            return self._by_token[token]
        except KeyError:
            raise UnknownHostFunctionError(f"Unknown host function token: {token!r}") from None

    def token_for(self, fn: HostFunction) -> str | None:
        return self._token_by_id.get(id(fn))

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def clear(self) -> None:
        self._by_token.clear()
        self._token_by_id.clear()

    def __len__(self) -> int:
        return len(self._by_token)

    def __contains__(self, token: object) -> bool:
        return token in self._by_token


def invocation_text(token: str) -> str:
    return f"{HOST_LOOKUP_NAME}({token!r})({RECORD_NAME})"


def describe_callable(fn: HostFunction) -> str:
    """Best-effort `# `-prefixed rendering of a callable, for debugging only."""

    try:
        source = textwrap.dedent(inspect.getsource(fn)).strip()
    except (OSError, TypeError):
        source = _label(fn)
    return "\n".join(f"# {line}" if line else "#" for line in source.splitlines())


def bridge(fn: HostFunction, registry: HostFunctionRegistry, *, with_comment: bool = True) -> str:
    token = registry.register(fn)
    instruction = invocation_text(token)
    if not with_comment:
        return instruction
    return f"{describe_callable(fn)}\n{instruction}"


def _label(fn: Any) -> str:
    module = getattr(fn, "__module__", None) or "<unknown_module>"
    qualname = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or "<callable>"
    return f"{module}.{qualname}"
