from dataclasses import dataclass

import pytest

from pykook.configuration import (
    ConfigurationSerializable,
    ConfigurationSerialization,
    DeserializationError,
)


@dataclass
class Location(ConfigurationSerializable):
    x: int
    y: int

    def serialize(self):
        return {"x": self.x, "y": self.y}


@pytest.fixture()
def registry() -> ConfigurationSerialization:
    return ConfigurationSerialization()


def test_register_class_used_as_decorator(registry: ConfigurationSerialization) -> None:
    @registry.register_class
    @dataclass
    class Point(ConfigurationSerializable):
        x: int

        def serialize(self):
            return {"x": self.x}

    tag = registry.get_alias(Point)
    assert tag.endswith("Point")
    assert registry.lookup(tag) is not None


def test_deserialize_object_strips_type_key(registry: ConfigurationSerialization) -> None:
    registry.register_class(Location, "Location")

    result = registry.deserialize_object({"==": "Location", "x": 1, "y": 2})

    assert result == Location(1, 2)
    assert registry.get_alias(Location) == "Location"


def test_register_plain_function(registry: ConfigurationSerialization) -> None:
    registry.register("pair", lambda data: (data["a"], data["b"]))
    assert registry.deserialize_object({"==": "pair", "a": 1, "b": 2}) == (1, 2)


def test_unknown_tag_raises(registry: ConfigurationSerialization) -> None:
    with pytest.raises(DeserializationError) as info:
        registry.deserialize_object({"==": "Nope"})
    assert info.value.type_tag == "Nope"


def test_missing_tag_raises(registry: ConfigurationSerialization) -> None:
    with pytest.raises(DeserializationError):
        registry.deserialize_object({"==": None})


def test_failing_reconstruction_is_wrapped(registry: ConfigurationSerialization) -> None:
    registry.register_class(Location, "Location")

    with pytest.raises(DeserializationError) as info:
        registry.deserialize_object({"==": "Location", "x": 1})

    assert isinstance(info.value.__cause__, TypeError)


def test_unregister_removes_alias(registry: ConfigurationSerialization) -> None:
    registry.register_class(Location, "Location")
    registry.unregister("Location")

    assert registry.lookup("Location") is None
    assert registry.get_alias(Location) == f"{Location.__module__}.Location"


def test_register_validates_arguments(registry: ConfigurationSerialization) -> None:
    with pytest.raises(ValueError):
        registry.register("", lambda data: data)
    with pytest.raises(TypeError):
        registry.register("tag", "not callable")
