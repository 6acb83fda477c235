"""Engine primitives: chain compilation and the input driving loop."""

from chainkit.engine.chain import ChainNode, compile_chain
from chainkit.engine.inputs import (
    FromLines,
    FromRecords,
    FromStream,
    Input,
    coerce_input,
    drive,
    source_label,
)

__all__ = [
    "ChainNode",
    "FromLines",
    "FromRecords",
    "FromStream",
    "Input",
    "coerce_input",
    "compile_chain",
    "drive",
    "source_label",
]
