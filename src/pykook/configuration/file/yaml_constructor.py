"""
Document node -> Python value.

Scalars are resolved through PyYAML's ``SafeConstructor`` so ``yes``,
``0x1F``, ``2024-01-01`` and friends come out as PyYAML users expect.
Mappings carrying the ``==`` type key are handed to the custom-type registry.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Set

import yaml
from yaml.constructor import SafeConstructor

from pykook.configuration.errors import DeserializationError, FormatError
from pykook.configuration.file.yaml_nodes import (
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
    deref,
    flatten_mapping,
    line_suffix,
)
from pykook.configuration.serialization import (
    SERIALIZED_TYPE_KEY,
    ConfigurationSerialization,
    UnresolvedSerializable,
    configuration_serialization,
)
from pykook.util.logger import get_logger

SET_TAG = "tag:yaml.org,2002:set"

logger = get_logger("yaml_constructor")


def has_serialized_type_key(node: Node) -> bool:
    """Whether ``node`` is a mapping with a ``==`` key among its own entries."""
    node = deref(node)
    if not isinstance(node, MappingNode):
        return False
    for key, _ in node.value:
        key = deref(key)
        if isinstance(key, ScalarNode) and key.value == SERIALIZED_TYPE_KEY:
            return True
    return False


class ConfigurationConstructor:
    def __init__(
        self,
        registry: Optional[ConfigurationSerialization] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.registry = registry or configuration_serialization
        self.logger = log or logger
        self._scalars = SafeConstructor()
        # Values built during the current document, keyed by node
        self.constructed_objects: Dict[Node, Any] = {}
        self.recursive_objects: Set[Node] = set()

    def reset(self) -> None:
        """Forget the values built for the previous document."""
        self.constructed_objects = {}
        self.recursive_objects = set()

    def construct(self, node: Node) -> Any:
        """Build the Python value of ``node``.

        A node reached through several aliases is built once and the same
        value is returned for every reference.

        Raises:
            FormatError: If a scalar carries a tag PyYAML cannot resolve, a
                mapping uses an unhashable key or an alias refers to a node
                that contains it.
        """
        node = deref(node)
        if node in self.constructed_objects:
            return self.constructed_objects[node]
        if node in self.recursive_objects:
            raise FormatError("Found recursive alias" + line_suffix(node))

        self.recursive_objects.add(node)
        try:
            data = self._construct_node(node)
        finally:
            self.recursive_objects.discard(node)
        self.constructed_objects[node] = data
        return data

    def _construct_node(self, node: Node) -> Any:
        if isinstance(node, ScalarNode):
            return self.construct_scalar(node)
        if isinstance(node, SequenceNode):
            return [self.construct(item) for item in node.value]
        if isinstance(node, MappingNode):
            flatten_mapping(node)
            if node.tag == SET_TAG:
                return {self._hashable(self.construct(key), key) for key, _ in node.value}
            if has_serialized_type_key(node):
                return self.construct_typed_object(node)
            return self.construct_mapping(node)
        raise FormatError(f"Unsupported node {type(node).__name__}")

    def construct_scalar(self, node: ScalarNode) -> Any:
        try:
            return self._scalars.construct_document(yaml.ScalarNode(node.tag, node.value, style=node.style))
        except yaml.YAMLError as exc:
            raise FormatError(str(exc)) from exc

    def construct_mapping(self, node: MappingNode) -> Dict[Any, Any]:
        data: Dict[Any, Any] = {}
        for key_node, value_node in node.value:
            key = self._hashable(self.construct(key_node), key_node)
            data[key] = self.construct(value_node)
        return data

    def construct_typed_object(self, node: MappingNode) -> Any:
        """Rebuild a ``==``-tagged mapping, or keep it raw when that fails."""
        data = {str(key): value for key, value in self.construct_mapping(node).items()}
        try:
            return self.registry.deserialize_object(data)
        except DeserializationError as exc:
            self.logger.warning("[CONFIGURATION] Keeping %r unresolved: %s", data.get(SERIALIZED_TYPE_KEY), exc)
            tag = data.get(SERIALIZED_TYPE_KEY)
            return UnresolvedSerializable(tag if isinstance(tag, str) else None, data, exc)

    @staticmethod
    def _hashable(value: Any, node: Node) -> Any:
        try:
            hash(value)
        except TypeError as exc:
            raise FormatError("Found unhashable key" + line_suffix(node)) from exc
        return value
