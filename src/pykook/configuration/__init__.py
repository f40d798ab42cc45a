"""
Configuration layer for pykook.

- **section.py**: The in-memory tree. Path-based get/set over nested sections,
  per-key block and inline comments, and a defaults chain consulted on misses.

- **options.py**: Options of a configuration (path separator, copying of
  defaults, header/footer, comment parsing, indent and width for YAML).

- **serialization.py**: Registry of custom types. Mappings carrying the ``==``
  key are rebuilt through it instead of becoming sections.

- **file/**: Text-backed configurations, with the YAML document model, its
  comment-preserving parser and emitter, and :class:`YamlConfiguration`.
"""

from pykook.configuration.errors import ConfigurationError, DeserializationError, FormatError
from pykook.configuration.options import (
    ConfigurationOptions,
    FileConfigurationOptions,
    YamlConfigurationOptions,
)
from pykook.configuration.section import Configuration, ConfigurationSection
from pykook.configuration.serialization import (
    SERIALIZED_TYPE_KEY,
    ConfigurationSerializable,
    ConfigurationSerialization,
    UnresolvedSerializable,
    configuration_serialization,
)
from pykook.configuration.file.file_configuration import FileConfiguration
from pykook.configuration.file.yaml_configuration import YamlConfiguration

__all__ = [
    "Configuration",
    "ConfigurationError",
    "ConfigurationOptions",
    "ConfigurationSection",
    "ConfigurationSerializable",
    "ConfigurationSerialization",
    "DeserializationError",
    "FileConfiguration",
    "FileConfigurationOptions",
    "FormatError",
    "SERIALIZED_TYPE_KEY",
    "UnresolvedSerializable",
    "YamlConfiguration",
    "YamlConfigurationOptions",
    "configuration_serialization",
]
