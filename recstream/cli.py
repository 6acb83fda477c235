from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from contextlib import ExitStack

from chainkit.engine.inputs import STDIN_LABEL, FromStream


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="recstream", add_help=True)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list-stages", help="List available stages")

    run = sub.add_parser("run", help="Run a YAML pipeline file")
    run.add_argument("config", help="Path to the pipeline YAML file")
    run.add_argument("--input", help="Read input lines from this file (default: stdin)")
    run.add_argument("--output", help="Write output lines to this file (default: stdout)")
    run.add_argument("--log-level", default="WARNING", help="Console log level")
    run.add_argument("--log-file", help="Also write a DEBUG log to this file")

    return parser


def _list_stages() -> int:
    from .operations.registry import get_stage_registry

    for row in get_stage_registry().describe():
        doc = row["doc"] or ""
        print(f"{row['stage_id']:<10} {doc}".rstrip())
    return 0


def _run(args: argparse.Namespace) -> int:
    from .config import load_pipeline_file
    from .logging_utils import setup_logger
    from .pipeline import default_runner

    logger = setup_logger(level=args.log_level, log_file=args.log_file)
    loaded = load_pipeline_file(args.config)
    logger.info("Loaded pipeline %s: %s", loaded.path, " | ".join(loaded.pipeline.stages) or "<empty>")

    runner = default_runner(text_policy=loaded.text_policy)
    with ExitStack() as stack:
        if args.input:
            handle = stack.enter_context(open(args.input, "r", encoding="utf-8"))
            source = FromStream(handle, name=args.input)
        else:
            source = FromStream(sys.stdin, name=STDIN_LABEL)

        if args.output:
            output = stack.enter_context(open(args.output, "w", encoding="utf-8"))
        else:
            output = sys.stdout

        runner.run(loaded.pipeline, input=source, output=output)
        output.flush()

    logger.info("Pipeline finished")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    if args.command == "list-stages":
        return _list_stages()

    if args.command == "run":
        return _run(args)

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
