"""Immutable pipeline builder.

A `Pipeline` is an ordered tuple of `StageCall`s. Every builder operation returns
a new value, so partially-built pipelines can be shared and branched freely.
Nothing is validated here: stage names and arguments are resolved when a runner
compiles the pipeline.

    p = Pipeline.empty().grep(lambda r: r["age"] >= 21).sort("--key", "income=-numeric")
    p = p.then(Pipeline.empty().totable())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from chainkit.bridge import HostFunction, HostFunctionRegistry, bridge
from chainkit.config_namespace import ConfigNamespace

if TYPE_CHECKING:
    from chainkit.runner import PipelineRunner

P = TypeVar("P", bound="Pipeline")


@dataclass(frozen=True)
class LiteralArg:
    text: str

    def render(self, registry: HostFunctionRegistry) -> str:
        return self.text


@dataclass(frozen=True)
class HostFunctionArg:
    fn: HostFunction

    def render(self, registry: HostFunctionRegistry) -> str:
        return bridge(self.fn, registry)


Arg = LiteralArg | HostFunctionArg


def to_arg(value: Any) -> Arg:
    if isinstance(value, (LiteralArg, HostFunctionArg)):
        return value
    if callable(value):
        return HostFunctionArg(value)
    return LiteralArg(str(value))


@dataclass(frozen=True)
class StageCall:
    name: str
    args: tuple[Arg, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(to_arg(arg) for arg in self.args))

    def render_args(self, registry: HostFunctionRegistry) -> list[str]:
        return [arg.render(registry) for arg in self.args]


@dataclass(frozen=True)
class Pipeline:
    calls: tuple[StageCall, ...] = ()

    @classmethod
    def empty(cls: type[P]) -> P:
        return cls()

    @classmethod
    def from_config(cls: type[P], ns: ConfigNamespace) -> P:
        """Build from a `pipeline:` list of `{name, args}` mappings."""

        pipeline = cls.empty()
        for idx, item in enumerate(ns.get_list_mapping("pipeline")):
            stage_ns = ConfigNamespace(item, path=ns.key_path(f"pipeline[{idx}]"))
            name = stage_ns.get_str("name")
            args = stage_ns.get_list_str("args", default=[], allow_empty=True)
            stage_ns.assert_consumed()
            pipeline = pipeline.call(name, *args)
        return pipeline

    def call(self: P, name: str, *args: Any) -> P:
        return type(self)(calls=(*self.calls, StageCall(name, tuple(args))))

    def concat(self: P, other: "Pipeline") -> P:
        if not isinstance(other, Pipeline):
            raise TypeError(f"Can only concatenate Pipeline (type={type(other).__name__})")
        return type(self)(calls=(*self.calls, *other.calls))

    then = concat

    def __add__(self: P, other: "Pipeline") -> P:
        if not isinstance(other, Pipeline):
            return NotImplemented
        return self.concat(other)

    @property
    def stages(self) -> tuple[str, ...]:
        return tuple(call.name for call in self.calls)

    @property
    def last_stage(self) -> str | None:
        return self.calls[-1].name if self.calls else None

    def __len__(self) -> int:
        return len(self.calls)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        # Only reached for missing attributes: `p.grep(...)` is `p.call("grep", ...)`.
        if name.startswith("_"):
            raise AttributeError(name)

        def chain(*args: Any) -> Pipeline:
            return self.call(name, *args)

        chain.__name__ = name
        return chain

    def run(self, *, runner: "PipelineRunner", input: Any = None, output: Any = None) -> Any:
        return runner.run(self, input=input, output=output)
