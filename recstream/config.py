"""YAML pipeline files.

    pipeline:
      - name: fromcsv
        args: ["--header"]
      - name: sort
        args: ["--key", "income=-numeric"]
      - name: totable
    output:
      text_prefix: to
      record_stages: [topn]
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import yaml

from chainkit.config_namespace import ConfigNamespace
from chainkit.runner import TextOutputPolicy

from recstream.pipeline import RecsPipeline


@dataclass(frozen=True)
class PipelineFile:
    path: str
    pipeline: RecsPipeline
    text_policy: TextOutputPolicy


def _load_yaml_mapping(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Pipeline file must contain a YAML mapping: {path}")
    return dict(payload)


def parse_pipeline_config(data: Mapping[str, Any], *, path: str = "") -> tuple[RecsPipeline, TextOutputPolicy]:
    ns = ConfigNamespace(data, path=path)
    pipeline = RecsPipeline.from_config(ns)
    text_policy = TextOutputPolicy.from_config(ns.namespace("output", default=None))
    ns.assert_consumed()
    return pipeline, text_policy


def load_pipeline_file(path: str | os.PathLike[str]) -> PipelineFile:
    resolved = os.fspath(path)
    pipeline, text_policy = parse_pipeline_config(_load_yaml_mapping(resolved))
    return PipelineFile(path=resolved, pipeline=pipeline, text_policy=text_policy)
