import io
from pathlib import Path

import pytest

from chainkit.runner import TextOutputPolicy
from recstream.config import load_pipeline_file, parse_pipeline_config
from recstream.pipeline import RecsPipeline, default_runner


def _write(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_load_pipeline_file_builds_pipeline_and_default_policy(tmp_path):
    path = _write(
        tmp_path / "pipeline.yaml",
        [
            "pipeline:",
            "  - name: grep",
            "    args: [\"r['age'] >= 21\"]",
            "  - name: sort",
            "    args: [--key, age=-numeric]",
            "  - name: totable",
        ],
    )

    loaded = load_pipeline_file(path)

    assert loaded.path == str(path)
    assert isinstance(loaded.pipeline, RecsPipeline)
    assert loaded.pipeline.stages == ("grep", "sort", "totable")
    assert loaded.text_policy == TextOutputPolicy()

    table = loaded.pipeline.run(input=[{"age": 19}, {"age": 30}, {"age": 25}])
    assert table == "age\n---\n30\n25\n"


def test_output_section_configures_text_policy(tmp_path):
    path = _write(
        tmp_path / "pipeline.yaml",
        [
            "pipeline:",
            "  - name: head",
            "    args: [-n, '1']",
            "output:",
            "  text_prefix: he",
            "  record_stages: []",
        ],
    )

    loaded = load_pipeline_file(path)
    assert loaded.text_policy == TextOutputPolicy(prefix="he", record_stages=())

    runner = default_runner(text_policy=loaded.text_policy)
    result = runner.run(loaded.pipeline, input=['{"a": 1}', '{"a": 2}'])
    assert result == '{"a": 1}\n'


def test_unknown_top_level_keys_fail_fast():
    with pytest.raises(ValueError, match=r"Unknown config keys under <root>: pipelines"):
        parse_pipeline_config({"pipeline": [{"name": "tojson"}], "pipelines": []})


def test_unknown_output_keys_fail_fast():
    with pytest.raises(ValueError, match=r"Unknown config keys under output: prefix"):
        parse_pipeline_config({"pipeline": [{"name": "tojson"}], "output": {"prefix": "to"}})


def test_stage_entries_are_validated_with_their_path():
    with pytest.raises(ValueError, match=r"Missing required config key: pipeline\[1\]\.name"):
        parse_pipeline_config({"pipeline": [{"name": "grep", "args": ["True"]}, {"args": []}]})


def test_invalid_yaml_and_non_mapping_payloads(tmp_path):
    broken = _write(tmp_path / "broken.yaml", ["pipeline: [", "  - name: grep"])
    with pytest.raises(ValueError, match=r"Invalid YAML in"):
        load_pipeline_file(broken)

    listing = _write(tmp_path / "list.yaml", ["- name: grep"])
    with pytest.raises(ValueError, match=r"must contain a YAML mapping"):
        load_pipeline_file(listing)


def test_missing_pipeline_file_raises_os_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_pipeline_file(tmp_path / "nope.yaml")


def test_pipeline_from_file_streams_into_explicit_output(tmp_path):
    path = _write(tmp_path / "p.yaml", ["pipeline:", "  - name: fromcsv", "    args: [--header]"])
    out = io.StringIO()

    loaded = load_pipeline_file(path)
    loaded.pipeline.run(input=["a,b", "1,2"], output=out)

    assert out.getvalue() == '{"a": "1", "b": "2"}\n'
