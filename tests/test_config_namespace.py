import pytest

from chainkit.config_namespace import ConfigNamespace


def test_config_namespace_unknown_key_enforcement_includes_path_and_consumed_keys():
    ns = ConfigNamespace({"known": "yes", "typo": 1}, path="output")
    assert ns.get_str("known") == "yes"
    with pytest.raises(ValueError, match=r"Unknown config keys under output: typo \(consumed: known\)"):
        ns.assert_consumed()


def test_config_namespace_assert_consumed_recurses_into_children():
    ns = ConfigNamespace({"output": {"text_prefix": "to", "extra": 1}}, path="")
    child = ns.namespace("output")
    assert child.get_str("text_prefix") == "to"

    with pytest.raises(ValueError, match=r"Unknown config keys under output: extra"):
        ns.assert_consumed()


def test_config_namespace_missing_required_key_names_full_path():
    ns = ConfigNamespace({}, path="pipeline[0]")
    with pytest.raises(ValueError, match=r"Missing required config key: pipeline\[0\]\.name"):
        ns.get_str("name")


def test_config_namespace_namespace_defaults_and_type_checks():
    ns = ConfigNamespace({"output": ["not", "a", "mapping"]}, path="")
    with pytest.raises(TypeError, match=r"output must be a mapping \(type=list\)"):
        ns.namespace("output")

    empty = ConfigNamespace({}, path="").namespace("output", default=None)
    assert empty.data == {}
    assert empty.path == "output"


def test_config_namespace_rejects_scalar_access_after_namespace_access():
    ns = ConfigNamespace({"output": {}}, path="")
    ns.namespace("output")
    with pytest.raises(ValueError, match=r"already accessed as a nested namespace"):
        ns.get_str("output")


def test_config_namespace_get_str_strips_and_rejects_empty():
    ns = ConfigNamespace({"name": "  grep  ", "blank": "   "}, path="stage")
    assert ns.get_str("name") == "grep"
    with pytest.raises(ValueError, match=r"stage\.blank cannot be empty"):
        ns.get_str("blank")
    assert ConfigNamespace({"blank": ""}, path="stage").get_str("blank", allow_empty=True) == ""


def test_config_namespace_list_getters_validate_items():
    ns = ConfigNamespace({"args": ["-n", 3], "pipeline": [{"name": "grep"}, "head"]}, path="cfg")
    with pytest.raises(TypeError, match=r"cfg\.args\[1\] must be a string \(type=int\)"):
        ns.get_list_str("args")
    with pytest.raises(TypeError, match=r"cfg\.pipeline\[1\] must be a mapping \(type=str\)"):
        ns.get_list_mapping("pipeline")

    empty = ConfigNamespace({"args": []}, path="cfg")
    with pytest.raises(ValueError, match=r"cfg\.args cannot be empty"):
        empty.get_list_str("args")
    assert ConfigNamespace({"args": []}, path="cfg").get_list_str("args", allow_empty=True) == []
