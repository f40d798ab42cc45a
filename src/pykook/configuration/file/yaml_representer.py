"""
Python value -> document node.

Built on PyYAML's ``SafeRepresenter`` so plain values are tagged the same way
``yaml.safe_dump`` would tag them. Sections are written as mappings and typed
objects as mappings whose first key is ``==``.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import yaml
from yaml.representer import SafeRepresenter
from yaml.resolver import Resolver

from pykook.configuration.file.yaml_composer import convert_node
from pykook.configuration.file.yaml_nodes import MERGE_TAG, STR_TAG, VALUE_TAG, Node, ScalarNode
from pykook.configuration.section import ConfigurationSection
from pykook.configuration.serialization import (
    SERIALIZED_TYPE_KEY,
    ConfigurationSerializable,
    ConfigurationSerialization,
    UnresolvedSerializable,
    configuration_serialization,
)
from pykook.util.logger import get_logger

logger = get_logger("yaml_representer")


class ConfigurationRepresenter(SafeRepresenter):
    def __init__(
        self,
        registry: Optional[ConfigurationSerialization] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(default_style=None, default_flow_style=False, sort_keys=False)
        self.registry = registry or configuration_serialization
        self.logger = log or logger
        self._resolver = Resolver()

    def to_node(self, data: Any) -> Node:
        """Represent ``data`` as a document node tree."""
        try:
            node = self.represent_data(data)
        finally:
            self.represented_objects = {}
            self.object_keeper = []
            self.alias_key = None
        return convert_node(node)

    def key_to_node(self, key: str) -> ScalarNode:
        """Represent a section key so that it loads back as the same text.

        Keys that read as another type (``yes``, ``1``) are tagged with that
        type and therefore written unquoted.
        """
        tag = self._resolver.resolve(yaml.ScalarNode, key, (True, False))
        if tag in (MERGE_TAG, VALUE_TAG):
            tag = STR_TAG
        return ScalarNode(tag=tag, value=key)

    def represent_section(self, data: ConfigurationSection):
        return self.represent_dict(data.get_values(False))

    def represent_serializable(self, data: ConfigurationSerializable):
        mapping = {SERIALIZED_TYPE_KEY: self.registry.get_alias(type(data))}
        mapping.update(data.serialize())
        return self.represent_dict(mapping)

    def represent_unresolved(self, data: UnresolvedSerializable):
        return self.represent_dict(data.data)

    def represent_tuple(self, data):
        return self.represent_list(list(data))

    def represent_unknown(self, data):
        self.logger.warning("[CONFIGURATION] No representation for %s, saving it as a string", type(data).__name__)
        return self.represent_str(str(data))


ConfigurationRepresenter.add_multi_representer(ConfigurationSection, ConfigurationRepresenter.represent_section)
ConfigurationRepresenter.add_multi_representer(
    ConfigurationSerializable, ConfigurationRepresenter.represent_serializable
)
ConfigurationRepresenter.add_representer(UnresolvedSerializable, ConfigurationRepresenter.represent_unresolved)
ConfigurationRepresenter.add_representer(tuple, ConfigurationRepresenter.represent_tuple)
ConfigurationRepresenter.add_representer(None, ConfigurationRepresenter.represent_unknown)
