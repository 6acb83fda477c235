"""Snippet micro-language used by record-evaluating stages.

A snippet is one Python expression evaluated with the current record bound to
`r`. Leading `#` lines are comments. Host functions bridged by `chainkit`
arrive as `__host__('<token>')(r)`, so the evaluation namespace also binds
`__host__` to the run's host-function lookup.

Snippets are trusted code supplied by whoever builds the pipeline or writes the
pipeline file. They run with the full `builtins` module and are not sandboxed;
never evaluate snippets taken from untrusted input.
"""

from __future__ import annotations

import builtins
from typing import Any

from chainkit.bridge import HOST_LOOKUP_NAME, RECORD_NAME
from chainkit.record import Record
from chainkit.stage_types import StageContext


def strip_comments(code: str) -> str:
    lines = [line for line in code.splitlines() if not line.lstrip().startswith("#")]
    return "\n".join(lines).strip()


class Snippet:
    def __init__(self, code: str, *, context: StageContext):
        if not isinstance(code, str):
            raise TypeError(f"Snippet code must be a string (type={type(code).__name__})")
        self.code = code
        body = strip_comments(code)
        if not body:
            raise ValueError("Snippet is empty")
        try:
            self._compiled = compile(body, "<snippet>", "eval")
        except SyntaxError as exc:
            raise ValueError(f"Invalid snippet {body!r}: {exc.msg}") from exc
        self._globals: dict[str, Any] = {
            "__builtins__": builtins,
            HOST_LOOKUP_NAME: context.host_functions.lookup,
        }

    def evaluate(self, record: Record) -> Any:
        return eval(self._compiled, self._globals, {RECORD_NAME: record})  # noqa: S307
