import pytest

from chainkit.bridge import (
    HostFunctionRegistry,
    UnknownHostFunctionError,
    bridge,
    describe_callable,
    invocation_text,
)
from chainkit.errors import RegistrationError
from chainkit.pipeline import HostFunctionArg, LiteralArg, StageCall


def _is_adult(r):
    return r["age"] >= 21


def test_same_callable_bridges_to_the_same_token():
    registry = HostFunctionRegistry()

    first = bridge(_is_adult, registry)
    second = bridge(_is_adult, registry)

    assert first == second
    assert len(registry) == 1
    token = registry.token_for(_is_adult)
    assert invocation_text(token) in first


def test_distinct_callables_get_distinct_tokens():
    registry = HostFunctionRegistry()
    f = lambda r: 1  # noqa: E731
    g = lambda r: 1  # noqa: E731

    assert registry.register(f) != registry.register(g)
    assert len(registry) == 2


def test_bridged_text_ends_with_the_invocation_instruction():
    registry = HostFunctionRegistry()
    text = bridge(_is_adult, registry)
    token = registry.token_for(_is_adult)

    assert text.splitlines()[-1] == f"__host__({token!r})(r)"
    assert all(line.startswith("#") for line in text.splitlines()[:-1])
    assert registry.lookup(token)({"age": 30}) is True


def test_bridge_without_comment_is_a_single_instruction():
    registry = HostFunctionRegistry()
    assert bridge(_is_adult, registry, with_comment=False) == "__host__('fn1')(r)"


def test_describe_callable_falls_back_to_qualified_name():
    assert describe_callable(len) == "# builtins.len"
    assert "# def _is_adult(r):" in describe_callable(_is_adult)


def test_unknown_token_lookup_fails():
    with pytest.raises(UnknownHostFunctionError, match=r"fn99"):
        HostFunctionRegistry().lookup("fn99")


def test_sealed_registry_rejects_new_callables_but_resolves_known_ones():
    registry = HostFunctionRegistry()
    token = registry.register(_is_adult)
    registry.seal()

    assert registry.register(_is_adult) == token
    with pytest.raises(RegistrationError, match=r"sealed"):
        registry.register(lambda r: r)


def test_bounded_registry_rejects_registration_when_full():
    registry = HostFunctionRegistry(max_entries=1)
    registry.register(_is_adult)
    with pytest.raises(RegistrationError, match=r"full \(1 entries\)"):
        registry.register(lambda r: r)


def test_non_callable_cannot_be_registered():
    with pytest.raises(RegistrationError, match=r"must be callable"):
        HostFunctionRegistry().register("not a function")


def test_clear_evicts_entries_and_tokens_are_not_reused():
    registry = HostFunctionRegistry()
    old = registry.register(_is_adult)
    registry.clear()

    assert len(registry) == 0
    assert old not in registry
    assert registry.register(_is_adult) != old


def test_stage_call_tags_callables_as_host_functions():
    call = StageCall("grep", ("-v", _is_adult, 3))

    assert call.args == (LiteralArg("-v"), HostFunctionArg(_is_adult), LiteralArg("3"))

    registry = HostFunctionRegistry()
    rendered = call.render_args(registry)
    assert rendered[0] == "-v"
    assert rendered[1].endswith("__host__('fn1')(r)")
    assert rendered[2] == "3"
