import io

import pytest

from chainkit.pipeline import Pipeline
from chainkit.record import Record
from chainkit.runner import PipelineRunner, TextOutputPolicy
from chainkit.stage_base import BaseStage
from chainkit.stage_registry import StageRegistry
from chainkit.stage_types import StageRef


class _Filter(BaseStage):
    def accept_record(self, record):
        if record.get("x", 0) > 0:
            return self.push_record(record)
        return True


class _ToTable(BaseStage):
    def accept_record(self, record):
        return self.push_line(f"x={record['x']}")


class _Fail(BaseStage):
    def accept_record(self, record):
        raise OSError("disk full")


def _runner(**kwargs) -> PipelineRunner:
    registry = StageRegistry.from_refs(
        [
            StageRef(id="filter", factory=_Filter),
            StageRef(id="toTable", factory=_ToTable),
            StageRef(id="topn", factory=_Filter),
            StageRef(id="fail", factory=_Fail),
            StageRef(id="fmt_table", factory=_ToTable),
        ]
    )
    return PipelineRunner(registry, **kwargs)


DATA = [{"x": 1}, {"x": 0}, {"x": 2}]


def test_text_producing_last_stage_returns_a_string():
    result = _runner().run(Pipeline.empty().call("filter").call("toTable"), input=DATA)
    assert result == "x=1\nx=2\n"


def test_record_producing_last_stage_returns_plain_dicts():
    result = _runner().run(Pipeline.empty().call("filter"), input=DATA)
    assert result == [{"x": 1}, {"x": 2}]
    assert all(type(row) is dict for row in result)


def test_reserved_record_stage_is_not_treated_as_text():
    assert _runner().run(Pipeline.empty().call("topn"), input=DATA) == [{"x": 1}, {"x": 2}]


def test_explicit_output_receives_lines_and_is_returned():
    out = io.StringIO()
    result = _runner().run(Pipeline.empty().call("filter"), input=DATA, output=out)

    assert result is out
    assert out.getvalue() == '{"x": 1}\n{"x": 2}\n'
    assert not out.closed


def test_explicit_output_wins_over_text_stage():
    out = io.StringIO()
    result = _runner().run(Pipeline.empty().call("toTable"), input=DATA, output=out)

    assert result is out
    assert out.getvalue() == "x=1\nx=0\nx=2\n"


def test_non_writable_output_falls_through_to_the_result_policy():
    runner = _runner()
    not_a_handle = ["not", "a", "handle"]

    records = runner.run(Pipeline.empty().call("filter"), input=DATA, output=not_a_handle)
    text = runner.run(Pipeline.empty().call("toTable"), input=DATA, output=not_a_handle)

    assert records == [{"x": 1}, {"x": 2}]
    assert text == "x=1\nx=0\nx=2\n"
    assert not_a_handle == ["not", "a", "handle"]


def test_text_policy_is_configurable():
    runner = _runner(text_policy=TextOutputPolicy(prefix="fmt_", record_stages=()))

    assert runner.run(Pipeline.empty().call("fmt_table"), input=DATA) == "x=1\nx=0\nx=2\n"
    assert runner.text_policy.is_text_producing("toTable") is False
    assert runner.run(Pipeline.empty().call("filter"), input=DATA) == [{"x": 1}, {"x": 2}]


@pytest.mark.parametrize(
    ("name", "expected"),
    [("toTable", True), ("tojson", True), ("topn", False), ("filter", False), (None, False), ("to", True)],
)
def test_default_text_policy_predicate(name, expected):
    assert TextOutputPolicy().is_text_producing(name) is expected


def test_stage_io_errors_propagate_from_text_pipelines():
    with pytest.raises(OSError, match="disk full"):
        _runner().run(Pipeline.empty().call("fail").call("toTable"), input=DATA)


def test_runner_scopes_host_functions_to_its_registry():
    seen = []

    class Call(BaseStage):
        def accept_record(self, record):
            token = self.args[0].splitlines()[-1].split("'")[1]
            seen.append(self.context.host_functions.lookup(token)(record))
            return self.push_record(record)

    registry = StageRegistry.from_refs([StageRef(id="call", factory=Call)])
    runner = PipelineRunner(registry)
    double = lambda r: r["x"] * 2  # noqa: E731

    runner.run(Pipeline.empty().call("call", double), input=[Record({"x": 2})])
    runner.run(Pipeline.empty().call("call", double), input=[{"x": 5}])

    assert seen == [4, 10]
    assert len(runner.host_functions) == 1
    assert len(PipelineRunner(registry).host_functions) == 0
