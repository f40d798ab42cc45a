from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Optional

from pykook.configuration.file.file_configuration import FileConfiguration


class InvalidPluginError(Exception):
    """Raised when a plugin cannot be constructed or described."""


@dataclass(frozen=True, slots=True)
class PluginDescription:
    """Static metadata of a plugin, usually read from its ``plugin.yml``."""

    name: str
    version: str
    api_version: str
    main_class_name: str
    authors: List[str] = field(default_factory=list)
    description: str = ""
    website: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidPluginError("Plugin name cannot be empty")
        if not self.main_class_name:
            raise InvalidPluginError(f"Plugin {self.name} does not declare a main class")

    @property
    def full_name(self) -> str:
        return f"{self.name} v{self.version}"


class Plugin(ABC):
    """Contract every plugin exposes to the framework."""

    # --------------------------
    # Lifecycle
    # --------------------------
    @abstractmethod
    def on_load(self) -> None:
        """Called once after the plugin object is created, before enabling."""

    @abstractmethod
    def on_enable(self) -> None: ...

    @abstractmethod
    def on_disable(self) -> None: ...

    @property
    @abstractmethod
    def enabled(self) -> bool: ...

    @abstractmethod
    def set_enabled(self, enabled: bool) -> None:
        """Switch the plugin on or off, running the matching hook on change."""

    # --------------------------
    # Configuration and resources
    # --------------------------
    @property
    @abstractmethod
    def config(self) -> FileConfiguration: ...

    @abstractmethod
    def reload_config(self) -> None: ...

    @abstractmethod
    def save_default_config(self) -> None: ...

    @abstractmethod
    def save_resource(self, path: str, replace: bool = False, ignore_path_structure: bool = False) -> None: ...

    @abstractmethod
    def get_resource(self, path: str) -> Optional[IO[bytes]]:
        """Open a resource bundled with the plugin, or return ``None`` if there is none."""

    # --------------------------
    # Environment
    # --------------------------
    @property
    @abstractmethod
    def data_folder(self) -> Path: ...

    @property
    @abstractmethod
    def file(self) -> Path: ...

    @property
    @abstractmethod
    def description(self) -> PluginDescription: ...

    @property
    @abstractmethod
    def logger(self) -> logging.Logger: ...
