"""
Default :class:`Plugin` implementation.

Plugin authors subclass :class:`BasePlugin` and override the lifecycle hooks;
the framework's plugin loader builds the instance and passes in the paths and
logger. The configuration lives in ``<data_folder>/config.yml`` and falls back
to the ``config.yml`` shipped inside the plugin's package.
"""
from __future__ import annotations

import importlib.resources
import io
import logging
import shutil
import sys
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import IO, Optional, Union

from pykook.configuration.file.file_configuration import FileConfiguration
from pykook.configuration.file.yaml_configuration import YamlConfiguration
from pykook.plugin.plugin import Plugin, PluginDescription

CONFIG_RESOURCE = "config.yml"

PathLike = Union[str, Path]


class BasePlugin(Plugin):
    def __init__(
        self,
        config_file: PathLike,
        data_folder: PathLike,
        description: PluginDescription,
        file: PathLike,
        logger: logging.Logger,
    ) -> None:
        for name, value in (
            ("config_file", config_file),
            ("data_folder", data_folder),
            ("description", description),
            ("file", file),
            ("logger", logger),
        ):
            if value is None:
                raise ValueError(f"{name} cannot be None")
        self._config_file = Path(config_file)
        self._data_folder = Path(data_folder)
        self._description = description
        self._file = Path(file)
        self._logger = logger
        self._configuration: Optional[FileConfiguration] = None
        self._enabled = False

    # --------------------------
    # Lifecycle
    # --------------------------
    def on_load(self) -> None:
        pass

    def on_enable(self) -> None:
        pass

    def on_disable(self) -> None:
        pass

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Run ``on_enable``/``on_disable`` when the state changes.

        The new state is recorded only once the hook returns, so a hook that
        raises leaves the plugin in its previous state.
        """
        if self._enabled == enabled:
            return
        if enabled:
            self.on_enable()
        else:
            self.on_disable()
        self._enabled = enabled

    # --------------------------
    # Configuration
    # --------------------------
    @property
    def config(self) -> FileConfiguration:
        if self._configuration is None:
            self.reload_config()
        return self._configuration

    def reload_config(self) -> None:
        """Read the configuration file again, with the bundled ``config.yml`` as defaults."""
        self._configuration = YamlConfiguration.load_configuration(self._config_file, self._logger)

        backend = self.get_resource(CONFIG_RESOURCE)
        if backend is None:
            return
        defaults = YamlConfiguration.load_configuration(io.TextIOWrapper(backend, encoding="utf-8"), self._logger)
        self._configuration.set_defaults(defaults)

    def save_default_config(self) -> None:
        self.save_resource(CONFIG_RESOURCE, False, False)

    # --------------------------
    # Resources
    # --------------------------
    def resource_root(self) -> Traversable:
        """Directory bundled resources are read from: the package of the plugin class."""
        module = sys.modules[type(self).__module__]
        package = module.__package__ or module.__name__
        return importlib.resources.files(package)

    def get_resource(self, path: str) -> Optional[IO[bytes]]:
        if path is None:
            raise ValueError("Filename cannot be None")
        try:
            resource = self.resource_root().joinpath(path)
            if not resource.is_file():
                return None
            return resource.open("rb")
        except (OSError, ModuleNotFoundError):
            return None

    def save_resource(self, path: str, replace: bool = False, ignore_path_structure: bool = False) -> None:
        """Copy a bundled resource into the data folder.

        Raises:
            ValueError: If the plugin does not bundle ``path``.
        """
        stream = self.get_resource(path)
        if stream is None:
            raise ValueError(f"Resource {path!r} is not bundled with the plugin")

        with stream:
            target_path = path.split("/")[-1] if ignore_path_structure else path
            local = self._data_folder / target_path
            if local.exists() and not replace:
                self._logger.warning('Cannot save resource "%s" because it already exists.', path)
                return

            try:
                local.parent.mkdir(parents=True, exist_ok=True)
                with local.open("wb") as out:
                    shutil.copyfileobj(stream, out)
            except OSError:
                self._logger.warning('Cannot save resource "%s" because an error occurred.', path, exc_info=True)

    # --------------------------
    # Environment
    # --------------------------
    @property
    def config_file(self) -> Path:
        return self._config_file

    @property
    def data_folder(self) -> Path:
        return self._data_folder

    @property
    def file(self) -> Path:
        return self._file

    @property
    def description(self) -> PluginDescription:
        return self._description

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._description.full_name}, enabled={self._enabled})"
