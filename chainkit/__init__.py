"""Reusable chain kernel: compile stage calls into a push-based chain and run it.

This package is intentionally independent of `recstream`. Concrete stages, their
argument syntax, and the snippet language that evaluates bridged host functions
live in the consuming application.
"""

from chainkit.bridge import HostFunctionRegistry, UnknownHostFunctionError, bridge
from chainkit.config_namespace import ConfigNamespace
from chainkit.engine import (
    ChainNode,
    FromLines,
    FromRecords,
    FromStream,
    coerce_input,
    compile_chain,
    drive,
)
from chainkit.errors import (
    ChainError,
    InputRequiredError,
    RegistrationError,
    UnknownStageError,
    UnsupportedInputError,
)
from chainkit.pipeline import HostFunctionArg, LiteralArg, Pipeline, StageCall
from chainkit.record import Record
from chainkit.runner import PipelineRunner, TextOutputPolicy
from chainkit.sinks import LineSink, RecordSink
from chainkit.stage_base import BaseStage
from chainkit.stage_registry import StageRegistry
from chainkit.stage_types import StageCapability, StageContext, StageFactory, StageRef

__all__ = [
    "BaseStage",
    "ChainError",
    "ChainNode",
    "ConfigNamespace",
    "FromLines",
    "FromRecords",
    "FromStream",
    "HostFunctionArg",
    "HostFunctionRegistry",
    "InputRequiredError",
    "LineSink",
    "LiteralArg",
    "Pipeline",
    "PipelineRunner",
    "Record",
    "RecordSink",
    "RegistrationError",
    "StageCall",
    "StageCapability",
    "StageContext",
    "StageFactory",
    "StageRef",
    "StageRegistry",
    "TextOutputPolicy",
    "UnknownHostFunctionError",
    "UnknownStageError",
    "UnsupportedInputError",
    "bridge",
    "coerce_input",
    "compile_chain",
    "drive",
]
