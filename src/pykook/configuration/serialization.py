"""
Custom-type registry for values stored in configurations.

A mapping in a configuration document that contains the reserved
:data:`SERIALIZED_TYPE_KEY` is not a nested section: it is a serialized
object, and the value under that key names the reconstruction function to use.

Example document::

    spawn:
      ==: Location
      x: 10
      y: 64

Classes opt in by subclassing :class:`ConfigurationSerializable` and being
registered with :meth:`ConfigurationSerialization.register_class`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from pykook.configuration.errors import DeserializationError

SERIALIZED_TYPE_KEY = "=="

Reconstructor = Callable[[Dict[str, Any]], Any]


class ConfigurationSerializable(ABC):
    """Object that can be written to and rebuilt from a configuration."""

    @abstractmethod
    def serialize(self) -> Dict[str, Any]:
        """Return the fields of this object as a plain mapping."""

    @classmethod
    def deserialize(cls, data: Dict[str, Any]) -> "ConfigurationSerializable":
        return cls(**data)


@dataclass(slots=True)
class UnresolvedSerializable:
    """Placeholder for a typed object whose type tag could not be resolved.

    Loading keeps going when one object fails; the raw mapping is kept so a
    later save writes it back untouched.
    """

    type_tag: Optional[str]
    data: Dict[str, Any]
    error: DeserializationError


class ConfigurationSerialization:
    """Mapping from type tag to reconstruction function."""

    def __init__(self) -> None:
        self._reconstructors: Dict[str, Reconstructor] = {}
        self._aliases: Dict[type, str] = {}

    def register(self, tag: str, reconstruct: Reconstructor) -> None:
        if not isinstance(tag, str) or not tag:
            raise ValueError("Type tag must be a non-empty string")
        if not callable(reconstruct):
            raise TypeError(f"Reconstruction function for {tag!r} is not callable")
        self._reconstructors[tag] = reconstruct

    def register_class(self, cls: type, alias: Optional[str] = None) -> type:
        """Register ``cls.deserialize`` under ``alias`` (defaults to the qualified class name).

        Returns ``cls`` so the method can be used as a class decorator.
        """
        tag = alias or _qualified_name(cls)
        self.register(tag, cls.deserialize)
        self._aliases[cls] = tag
        return cls

    def unregister(self, tag: str) -> None:
        self._reconstructors.pop(tag, None)
        for cls, alias in list(self._aliases.items()):
            if alias == tag:
                del self._aliases[cls]

    def lookup(self, tag: str) -> Optional[Reconstructor]:
        return self._reconstructors.get(tag)

    def get_alias(self, cls: type) -> str:
        return self._aliases.get(cls) or _qualified_name(cls)

    def deserialize_object(self, data: Mapping[str, Any]) -> Any:
        """Rebuild an object from a mapping carrying the type tag.

        Raises:
            DeserializationError: If the tag is missing, unregistered, or the
                reconstruction function fails.
        """
        tag = data.get(SERIALIZED_TYPE_KEY)
        if not isinstance(tag, str):
            raise DeserializationError(
                f"Cannot have null or non-string alias under {SERIALIZED_TYPE_KEY!r}", None
            )

        reconstruct = self.lookup(tag)
        if reconstruct is None:
            raise DeserializationError(f"Specified type does not exist ('{tag}')", tag)

        payload = {key: value for key, value in data.items() if key != SERIALIZED_TYPE_KEY}
        try:
            return reconstruct(payload)
        except DeserializationError:
            raise
        except Exception as exc:
            raise DeserializationError(f"Could not deserialize '{tag}': {exc}", tag) from exc


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


# Shared registry used when a configuration is not given its own
configuration_serialization = ConfigurationSerialization()
