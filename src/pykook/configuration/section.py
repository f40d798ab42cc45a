"""
In-memory configuration tree.

A :class:`ConfigurationSection` maps keys to values. Values are plain Python
objects: ``None`` (absent), ``str``/``int``/``float``/``bool``, ``list``,
nested :class:`ConfigurationSection` objects, or typed objects rebuilt through
:mod:`pykook.configuration.serialization`. Every key may carry block comments
(the lines above it) and inline comments (the text after it on the same line).

Paths are split on the root's ``path_separator`` (``"."`` by default), so
``config.get("database.pool.size")`` walks two nested sections.

Sections are not synchronized. Callers sharing a tree between threads must
serialize their load/mutate/save cycles themselves.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from pykook.configuration.options import ConfigurationOptions
from pykook.configuration.serialization import ConfigurationSerializable

CommentLines = List[Optional[str]]

ConfigValue = Union[None, str, int, float, bool, list, "ConfigurationSection", ConfigurationSerializable]

_MISSING = object()


@dataclass(slots=True)
class _PathData:
    value: Any
    comments: CommentLines = field(default_factory=list)
    inline_comments: CommentLines = field(default_factory=list)


class ConfigurationSection:
    """A named node of the configuration tree."""

    def __init__(self, parent: Optional["ConfigurationSection"] = None, name: str = "") -> None:
        self._parent = parent
        self._name = name
        self._map: Dict[str, _PathData] = {}
        self._defaults: Optional[ConfigurationSection] = None

    # --------------------------
    # Tree position
    # --------------------------
    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Optional["ConfigurationSection"]:
        return self._parent

    @property
    def root(self) -> "ConfigurationSection":
        section = self
        while section._parent is not None:
            section = section._parent
        return section

    @property
    def path_separator(self) -> str:
        options = getattr(self.root, "options", None)
        return options.path_separator if options is not None else "."

    @property
    def current_path(self) -> str:
        """Full path of this section from the root, ``""`` for the root itself."""
        names = []
        section = self
        while section._parent is not None:
            names.append(section._name)
            section = section._parent
        return self.path_separator.join(reversed(names))

    def _copies_defaults(self) -> bool:
        options = getattr(self.root, "options", None)
        return bool(options is not None and options.copy_defaults)

    # --------------------------
    # Defaults chain
    # --------------------------
    @property
    def default_section(self) -> Optional["ConfigurationSection"]:
        """Section consulted when a lookup misses.

        An explicit :meth:`set_defaults` wins; otherwise the parent's default
        section is asked for the child of the same name.
        """
        if self._defaults is not None:
            return self._defaults
        if self._parent is None:
            return None
        parent_defaults = self._parent.default_section
        if parent_defaults is None:
            return None
        value = parent_defaults.get(self._name)
        return value if isinstance(value, ConfigurationSection) else None

    def set_defaults(self, defaults: Optional["ConfigurationSection"]) -> None:
        """Use ``defaults`` as the fallback source for missing keys.

        The reference is lookup-only: ``defaults`` is not copied or owned.

        Raises:
            ValueError: If following the chain from ``defaults`` leads back here.
        """
        section = defaults
        while section is not None:
            if section is self:
                raise ValueError("Defaults chain would loop back to this section")
            section = section._defaults
        self._defaults = defaults

    # --------------------------
    # Path helpers
    # --------------------------
    def _split(self, path: str) -> List[str]:
        return path.split(self.path_separator)

    def _walk(self, path: str) -> tuple[Optional["ConfigurationSection"], str]:
        """Return the section holding the last path segment, without creating anything."""
        segments = self._split(path)
        section: Optional[ConfigurationSection] = self
        for segment in segments[:-1]:
            entry = section._map.get(segment)
            if entry is None or not isinstance(entry.value, ConfigurationSection):
                return None, segments[-1]
            section = entry.value
        return section, segments[-1]

    def _entry(self, path: str) -> Optional[_PathData]:
        section, key = self._walk(path)
        if section is None:
            return None
        return section._map.get(key)

    def _store(self, key: str, value: Any) -> None:
        entry = self._map.get(key)
        if entry is None:
            self._map[key] = _PathData(value)
        else:
            entry.value = value

    # --------------------------
    # Values
    # --------------------------
    def get(self, path: str, default: Any = _MISSING) -> Any:
        """Return the value at ``path``.

        Missing keys fall back to the defaults chain, or to ``default`` when one
        is passed explicitly (the chain is then not consulted). Never raises for
        a missing key; ``None`` means absent.
        """
        if path == "":
            return self
        entry = self._entry(path)
        if entry is not None:
            return entry.value
        if default is not _MISSING:
            return default
        defaults = self.default_section
        return defaults.get(path) if defaults is not None else None

    def set(self, path: str, value: Any) -> None:
        """Store ``value`` at ``path``, creating intermediate sections.

        ``None`` removes the key together with its comments. A mapping becomes a
        nested section, and a :class:`ConfigurationSection` is moved under this
        section.
        """
        if path == "":
            raise ValueError("Cannot set a value at an empty path")

        segments = self._split(path)
        section = self
        for segment in segments[:-1]:
            entry = section._map.get(segment)
            if entry is not None and isinstance(entry.value, ConfigurationSection):
                section = entry.value
            elif value is None:
                return
            else:
                section = section.create_section(segment)

        key = segments[-1]
        if value is None:
            section._map.pop(key, None)
        elif isinstance(value, ConfigurationSection):
            section._adopt(key, value)
        elif isinstance(value, Mapping):
            section.create_section(key, value)
        else:
            section._store(key, value)

    def _adopt(self, key: str, child: "ConfigurationSection") -> None:
        ancestor: Optional[ConfigurationSection] = self
        while ancestor is not None:
            if ancestor is child:
                raise ValueError("Cannot nest a section inside itself")
            ancestor = ancestor._parent

        current = self._map.get(key)
        if current is not None and current.value is child:
            return
        previous = child._parent
        if previous is not None:
            entry = previous._map.get(child._name)
            if entry is not None and entry.value is child:
                del previous._map[child._name]
        child._parent = self
        child._name = key
        self._store(key, child)

    def create_section(self, path: str, values: Optional[Mapping[Any, Any]] = None) -> "ConfigurationSection":
        """Create an empty section at ``path`` and optionally fill it from ``values``.

        Missing intermediate sections are created. A non-section value found on
        the way is replaced by a section, and an existing value at ``path``
        itself is replaced (its comments are kept).
        """
        segments = self._split(path)
        section = self
        for segment in segments[:-1]:
            entry = section._map.get(segment)
            if entry is not None and isinstance(entry.value, ConfigurationSection):
                section = entry.value
            else:
                section = section.create_section(segment)

        key = segments[-1]
        result = ConfigurationSection(section, key)
        section._store(key, result)

        if values:
            for child_key, child_value in values.items():
                if isinstance(child_value, Mapping):
                    result.create_section(str(child_key), child_value)
                else:
                    result.set(str(child_key), child_value)
        return result

    def get_values(self, deep: bool = False) -> Dict[str, ConfigValue]:
        """Return an ordered ``{path: value}`` mapping.

        With ``deep`` the values of nested sections are listed as well, keyed by
        their path relative to this section. Default values are merged in first
        when the root's ``copy_defaults`` option is on.
        """
        result: Dict[str, ConfigValue] = {}
        if self._copies_defaults():
            defaults = self.default_section
            if defaults is not None:
                result.update(defaults.get_values(deep))
        self._collect_values(result, deep, "")
        return result

    def _collect_values(self, output: Dict[str, Any], deep: bool, prefix: str) -> None:
        for key, entry in self._map.items():
            path = prefix + key
            output[path] = entry.value
            if deep and isinstance(entry.value, ConfigurationSection):
                entry.value._collect_values(output, deep, path + self.path_separator)

    def keys(self, deep: bool = False) -> List[str]:
        return list(self.get_values(deep))

    def contains(self, path: str, ignore_defaults: bool = False) -> bool:
        if ignore_defaults:
            return path == "" or self._entry(path) is not None
        return self.get(path) is not None

    def is_set(self, path: str) -> bool:
        """Whether ``path`` holds a value in this tree (defaults count only with ``copy_defaults``)."""
        if self._copies_defaults():
            return self.contains(path)
        return self.get(path, None) is not None

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.contains(path)

    def __len__(self) -> int:
        return len(self._map)

    # --------------------------
    # Typed accessors
    # --------------------------
    def get_string(self, path: str, default: Optional[str] = None) -> Optional[str]:
        value = self.get(path)
        if value is None or isinstance(value, ConfigurationSection):
            return default
        return str(value)

    def get_int(self, path: str, default: int = 0) -> int:
        value = self.get(path)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return int(value)
        return default

    def get_float(self, path: str, default: float = 0.0) -> float:
        value = self.get(path)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return default

    def get_bool(self, path: str, default: bool = False) -> bool:
        value = self.get(path)
        return value if isinstance(value, bool) else default

    def get_list(self, path: str, default: Optional[list] = None) -> Optional[list]:
        value = self.get(path)
        return value if isinstance(value, list) else default

    def get_section(self, path: str) -> Optional["ConfigurationSection"]:
        """Return the section at ``path``.

        A section that only exists in the defaults is materialised as an empty
        section of this tree, so writes never reach the defaults.
        """
        value = self.get(path, None)
        if value is not None:
            return value if isinstance(value, ConfigurationSection) else None
        if isinstance(self.get(path), ConfigurationSection):
            return self.create_section(path)
        return None

    def is_section(self, path: str) -> bool:
        return isinstance(self.get(path), ConfigurationSection)

    # --------------------------
    # Comments
    # --------------------------
    def get_comments(self, path: str) -> CommentLines:
        """Block comments above the key; ``None`` entries are blank lines."""
        entry = self._entry(path)
        return list(entry.comments) if entry is not None else []

    def set_comments(self, path: str, comments: Optional[CommentLines]) -> None:
        entry = self._entry(path)
        if entry is not None:
            entry.comments = list(comments) if comments else []

    def get_inline_comments(self, path: str) -> CommentLines:
        entry = self._entry(path)
        return list(entry.inline_comments) if entry is not None else []

    def set_inline_comments(self, path: str, comments: Optional[CommentLines]) -> None:
        entry = self._entry(path)
        if entry is not None:
            entry.inline_comments = list(comments) if comments else []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.current_path!r}, keys={list(self._map)!r})"


class Configuration(ConfigurationSection):
    """Root section of a configuration tree.

    Holds the options of the tree and an optional defaults configuration.
    """

    def __init__(self, defaults: Optional[ConfigurationSection] = None) -> None:
        super().__init__(None, "")
        self._options: Optional[ConfigurationOptions] = None
        if defaults is not None:
            self.set_defaults(defaults)

    def _create_options(self) -> ConfigurationOptions:
        return ConfigurationOptions(self)

    @property
    def options(self) -> ConfigurationOptions:
        if self._options is None:
            self._options = self._create_options()
        return self._options

    @property
    def defaults(self) -> Optional[ConfigurationSection]:
        return self._defaults

    def add_default(self, path: str, value: Any) -> None:
        """Set ``value`` at ``path`` in the defaults, creating them if needed."""
        if self._defaults is None:
            self._defaults = Configuration()
        self._defaults.set(path, value)

    def add_defaults(self, values: Mapping[str, Any]) -> None:
        for path, value in values.items():
            self.add_default(path, value)

    def clear(self) -> None:
        """Drop every key of the root section (defaults and options are kept)."""
        for entry in self._map.values():
            if isinstance(entry.value, ConfigurationSection):
                entry.value._parent = None
        self._map.clear()
