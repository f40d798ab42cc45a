from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from pykook.configuration.section import Configuration


class ConfigurationOptions:
    """Options shared by every :class:`Configuration`.

    Setters return the options object so calls can be chained::

        config.options.set_path_separator("/").set_copy_defaults(True)
    """

    def __init__(self, configuration: "Configuration") -> None:
        self._configuration = configuration
        self._path_separator = "."
        self._copy_defaults = False

    @property
    def configuration(self) -> "Configuration":
        return self._configuration

    @property
    def path_separator(self) -> str:
        return self._path_separator

    def set_path_separator(self, value: str) -> "ConfigurationOptions":
        if not isinstance(value, str) or len(value) != 1:
            raise ValueError(f"Path separator must be a single character, got {value!r}")
        self._path_separator = value
        return self

    @property
    def copy_defaults(self) -> bool:
        """Whether default values are reported (and saved) as if they were set."""
        return self._copy_defaults

    def set_copy_defaults(self, value: bool) -> "ConfigurationOptions":
        self._copy_defaults = bool(value)
        return self


class FileConfigurationOptions(ConfigurationOptions):
    """Options for configurations backed by a text document.

    ``header`` and ``footer`` are lists of comment lines without the leading
    ``#``; ``None`` entries stand for blank lines.
    """

    def __init__(self, configuration: "Configuration") -> None:
        super().__init__(configuration)
        self._header: List[Optional[str]] = []
        self._footer: List[Optional[str]] = []
        self._parse_comments = True

    @property
    def header(self) -> List[Optional[str]]:
        return list(self._header)

    def set_header(self, value: Optional[List[Optional[str]]]) -> "FileConfigurationOptions":
        self._header = list(value) if value else []
        return self

    @property
    def footer(self) -> List[Optional[str]]:
        return list(self._footer)

    def set_footer(self, value: Optional[List[Optional[str]]]) -> "FileConfigurationOptions":
        self._footer = list(value) if value else []
        return self

    @property
    def parse_comments(self) -> bool:
        """Whether comments are read on load and written on save."""
        return self._parse_comments

    def set_parse_comments(self, value: bool) -> "FileConfigurationOptions":
        self._parse_comments = bool(value)
        return self


class YamlConfigurationOptions(FileConfigurationOptions):
    MIN_INDENT = 2
    MAX_INDENT = 9

    def __init__(self, configuration: "Configuration") -> None:
        super().__init__(configuration)
        self._indent = 2
        self._width = 80

    @property
    def indent(self) -> int:
        """Spaces per nesting level."""
        return self._indent

    def set_indent(self, value: int) -> "YamlConfigurationOptions":
        if not self.MIN_INDENT <= value <= self.MAX_INDENT:
            raise ValueError(
                f"Indent must be between {self.MIN_INDENT} and {self.MAX_INDENT} characters, got {value}"
            )
        self._indent = value
        return self

    @property
    def width(self) -> int:
        """Preferred line width before long scalars are folded."""
        return self._width

    def set_width(self, value: int) -> "YamlConfigurationOptions":
        self._width = int(value)
        return self
