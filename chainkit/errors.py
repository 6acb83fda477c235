"""Error taxonomy for chain compilation and execution.

Every error here is fatal for the current run: the kernel never catches,
retries, or downgrades them. I/O failures surface as the builtin `OSError`.
"""

from __future__ import annotations

from typing import Iterable


class ChainError(Exception):
    """Base class for errors raised by `chainkit`."""


class UnknownStageError(ChainError, ValueError):
    def __init__(self, name: str, *, suggestions: Iterable[str] = (), available: Iterable[str] = ()):
        self.name = name
        self.suggestions = tuple(suggestions)
        self.available = tuple(available)
        message = f"Unknown stage: {name!r}"
        if self.suggestions:
            message += f" (did you mean: {', '.join(self.suggestions)})"
        elif self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class InputRequiredError(ChainError, ValueError):
    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"Input required for {stage}")


class UnsupportedInputError(ChainError, TypeError):
    def __init__(self, value: object, *, reason: str | None = None):
        self.value = value
        detail = f"Unknown input: {_describe(value)}"
        if reason:
            detail += f" ({reason})"
        super().__init__(detail)


class RegistrationError(ChainError, RuntimeError):
    """A host function could not be registered for bridging."""


def _describe(value: object, *, limit: int = 120) -> str:
    text = repr(value)
    if len(text) > limit:
        text = text[: limit - 3] + "..."
    return f"{type(value).__name__} {text}"
