import pytest

from pykook.configuration import Configuration, ConfigurationSection, FileConfiguration


def test_get_walks_nested_sections() -> None:
    config = Configuration()
    config.set("database.pool.size", 8)

    assert config.get("database.pool.size") == 8
    pool = config.get("database.pool")
    assert isinstance(pool, ConfigurationSection)
    assert pool.current_path == "database.pool"
    assert pool.root is config


def test_get_missing_key_returns_none_or_default() -> None:
    config = Configuration()

    assert config.get("missing") is None
    assert config.get("missing.deeper") is None
    assert config.get("missing", "fallback") == "fallback"


def test_empty_path_returns_section_itself() -> None:
    config = Configuration()
    assert config.get("") is config


def test_set_none_removes_key_and_comments() -> None:
    config = Configuration()
    config.set("a", 1)
    config.set_comments("a", ["about a"])

    config.set("a", None)

    assert "a" not in config
    assert config.get_comments("a") == []

    config.set("a", 2)
    assert config.get_comments("a") == []


def test_set_none_does_not_create_intermediate_sections() -> None:
    config = Configuration()
    config.set("a.b.c", None)
    assert config.keys() == []


def test_replacing_value_keeps_comments() -> None:
    config = Configuration()
    config.set("a", 1)
    config.set_comments("a", ["first", None])
    config.set_inline_comments("a", ["inline"])

    config.set("a", 2)

    assert config.get_comments("a") == ["first", None]
    assert config.get_inline_comments("a") == ["inline"]


def test_set_mapping_creates_nested_section() -> None:
    config = Configuration()
    config.set("server", {"host": "localhost", "ports": {"http": 80}})

    assert config.is_section("server")
    assert config.get("server.host") == "localhost"
    assert config.get("server.ports.http") == 80


def test_set_section_reparents_it() -> None:
    first = Configuration()
    child = first.create_section("child")
    child.set("value", 1)

    second = Configuration()
    second.set("moved", child)

    assert "child" not in first
    assert second.get("moved.value") == 1
    assert child.parent is second
    assert child.name == "moved"


def test_set_section_inside_itself_is_rejected() -> None:
    config = Configuration()
    outer = config.create_section("outer")
    inner = outer.create_section("inner")

    with pytest.raises(ValueError):
        inner.set("loop", outer)


def test_create_section_overwrites_intermediate_values() -> None:
    config = Configuration()
    config.set("a", "scalar")

    section = config.create_section("a.b")

    assert config.is_section("a")
    assert section.current_path == "a.b"


def test_create_section_fills_from_mapping() -> None:
    config = Configuration()
    section = config.create_section("s", {"x": 1, "nested": {"y": [1, 2]}})

    assert section.get("x") == 1
    assert section.get("nested.y") == [1, 2]


def test_get_values_shallow_and_deep_keep_order() -> None:
    config = Configuration()
    config.set("b", 1)
    config.set("a.y", 2)
    config.set("a.x", 3)

    assert list(config.get_values(False)) == ["b", "a"]
    assert config.keys(deep=True) == ["b", "a", "a.y", "a.x"]


def test_defaults_fallback_does_not_write_through() -> None:
    defaults = Configuration()
    defaults.set("x", 5)
    config = Configuration()
    config.set_defaults(defaults)

    assert config.get("x") == 5

    config.set("x", 7)
    assert config.get("x") == 7
    assert defaults.get("x") == 5


def test_nested_sections_fall_back_to_matching_default_section() -> None:
    defaults = Configuration()
    defaults.set("db.host", "localhost")
    defaults.set("db.port", 5432)
    config = Configuration(defaults)
    config.set("db.host", "example.org")

    assert config.get("db.port") == 5432
    assert config.get_section("db").get("port") == 5432


def test_explicit_default_skips_defaults_chain() -> None:
    defaults = Configuration()
    defaults.set("x", 5)
    config = Configuration(defaults)

    assert config.get("x", 1) == 1
    assert config.contains("x")
    assert not config.contains("x", ignore_defaults=True)
    assert not config.is_set("x")


def test_copy_defaults_reports_default_values() -> None:
    config = Configuration()
    config.add_default("x", 5)
    config.set("y", 1)

    assert config.keys() == ["y"]

    config.options.set_copy_defaults(True)
    assert config.keys() == ["x", "y"]
    assert config.is_set("x")


def test_defaults_loop_is_rejected() -> None:
    first = Configuration()
    second = Configuration(first)

    with pytest.raises(ValueError):
        first.set_defaults(second)
    with pytest.raises(ValueError):
        first.set_defaults(first)


def test_get_section_materialises_default_section() -> None:
    config = Configuration()
    config.add_default("db.host", "localhost")

    section = config.get_section("db")

    assert section is not None
    assert section.root is config
    assert section.get("host") == "localhost"
    section.set("host", "example.org")
    assert config.defaults.get("db.host") == "localhost"


def test_typed_accessors() -> None:
    config = Configuration()
    config.set("name", "bot")
    config.set("count", 3)
    config.set("ratio", 0.5)
    config.set("enabled", True)
    config.set("items", ["a"])
    config.set("section.key", 1)

    assert config.get_string("name") == "bot"
    assert config.get_string("count") == "3"
    assert config.get_string("section", "none") == "none"
    assert config.get_int("count") == 3
    assert config.get_int("enabled", -1) == -1
    assert config.get_float("count") == 3.0
    assert config.get_bool("enabled") is True
    assert config.get_bool("name") is False
    assert config.get_list("items") == ["a"]
    assert config.get_list("name") is None
    assert config.get_section("name") is None


def test_comment_accessors_return_copies() -> None:
    config = Configuration()
    config.set("a", 1)
    config.set_comments("a", ["one"])

    comments = config.get_comments("a")
    comments.append("two")

    assert config.get_comments("a") == ["one"]
    assert config.get_inline_comments("missing") == []


def test_custom_path_separator() -> None:
    config = Configuration()
    config.options.set_path_separator("/")
    config.set("a/b.c", 1)

    assert config.get_section("a").get("b.c") == 1
    assert config.keys(deep=True) == ["a", "a/b.c"]

    with pytest.raises(ValueError):
        config.options.set_path_separator("::")


def test_clear_detaches_children() -> None:
    config = Configuration()
    child = config.create_section("child")

    config.clear()

    assert len(config) == 0
    assert child.parent is None


def test_file_configuration_requires_a_format() -> None:
    with pytest.raises(TypeError):
        FileConfiguration()
