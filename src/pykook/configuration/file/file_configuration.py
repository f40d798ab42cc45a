from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Optional, Union

from pykook.configuration.options import FileConfigurationOptions
from pykook.configuration.section import Configuration, ConfigurationSection

Source = Union[str, "os.PathLike[str]", IO]


class FileConfiguration(Configuration, ABC):
    """Configuration that can be read from and written to a text document.

    Subclasses provide the format through :meth:`load_from_string` and
    :meth:`save_to_string`.
    """

    def __init__(self, defaults: Optional[ConfigurationSection] = None) -> None:
        super().__init__(defaults)

    def _create_options(self) -> FileConfigurationOptions:
        return FileConfigurationOptions(self)

    # --------------------------
    # I/O
    # --------------------------
    def load(self, source: Source, encoding: str = "utf-8") -> None:
        """Replace the contents of this configuration with those of ``source``.

        ``source`` is either a path or a readable stream. Streams are closed
        once read, parse failure included.

        Raises:
            FileNotFoundError: If ``source`` is a path that does not exist.
            OSError: If reading fails.
            FormatError: If the contents are not a valid document.
        """
        if isinstance(source, (str, os.PathLike)):
            with open(source, "r", encoding=encoding) as handle:
                contents = handle.read()
        else:
            with source:
                contents = source.read()
            if isinstance(contents, bytes):
                contents = contents.decode(encoding)
        self.load_from_string(contents)

    def save(self, target: Source, encoding: str = "utf-8") -> None:
        """Write this configuration to ``target`` (a path or a writable stream).

        Missing parent directories of a path are created.
        """
        data = self.save_to_string()
        if isinstance(target, (str, os.PathLike)):
            path = Path(target)
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding=encoding) as handle:
                handle.write(data)
        else:
            target.write(data)

    # --------------------------
    # Format hooks
    # --------------------------
    @abstractmethod
    def load_from_string(self, contents: str) -> None:
        """Replace the contents of this configuration with the document ``contents``."""

    @abstractmethod
    def save_to_string(self) -> str:
        """Render this configuration as a document."""
