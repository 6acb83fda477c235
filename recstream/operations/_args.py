from __future__ import annotations

import argparse


class StageArgumentParser(argparse.ArgumentParser):
    """argparse for stage arguments: usage errors raise instead of exiting."""

    def __init__(self, stage: str, **kwargs):
        super().__init__(prog=stage, add_help=False, **kwargs)
        self.stage = stage

    def error(self, message: str):
        raise ValueError(f"Invalid arguments for {self.stage}: {message}")


def comma_list(values: list[str] | None) -> list[str]:
    out: list[str] = []
    for value in values or ():
        out.extend(part.strip() for part in value.split(",") if part.strip())
    return out
