"""
YAML-backed configuration.

Loading composes the text into a document node tree, moves the comments of
every entry into the matching section keys and splits the leading comments
into the header. Saving goes the other way. Comments survive a load/save
cycle; formatting details (quoting, flow style of lists, anchors of values
that were merged) are normalised.

Header and footer follow these rules:

- On load, the comment lines above the first key are split at their last
  blank line. Everything up to that blank line is the header (minus the blank
  line itself and any blank lines it starts with); the rest stays with the
  first key.
- On save, a non-empty header is followed by one blank line so it loads back
  as a header.
"""
from __future__ import annotations

import logging
from typing import Optional, Set, Union

import yaml

from pykook.configuration.errors import ConfigurationError, FormatError
from pykook.configuration.file.file_configuration import FileConfiguration, Source
from pykook.configuration.file.yaml_composer import compose
from pykook.configuration.file.yaml_constructor import ConfigurationConstructor, has_serialized_type_key
from pykook.configuration.file.yaml_emitter import emit
from pykook.configuration.file.yaml_nodes import (
    CommentLines,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
    deref,
    flatten_mapping,
    line_suffix,
)
from pykook.configuration.file.yaml_representer import ConfigurationRepresenter
from pykook.configuration.options import YamlConfigurationOptions
from pykook.configuration.section import ConfigurationSection
from pykook.configuration.serialization import ConfigurationSerialization, configuration_serialization
from pykook.util.logger import get_logger

logger = get_logger("yaml_configuration")

# Characters treated as filler around a document (everything up to U+0020)
_FILLER = "".join(chr(code) for code in range(0x21))


class YamlConfiguration(FileConfiguration):
    def __init__(
        self,
        defaults: Optional[ConfigurationSection] = None,
        registry: Optional[ConfigurationSerialization] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(defaults)
        self.registry = registry or configuration_serialization
        self._constructor = ConfigurationConstructor(self.registry, log)
        self._representer = ConfigurationRepresenter(self.registry, log)

    def _create_options(self) -> YamlConfigurationOptions:
        return YamlConfigurationOptions(self)

    @property
    def options(self) -> YamlConfigurationOptions:
        return super().options

    # --------------------------
    # Saving
    # --------------------------
    def save_to_string(self) -> str:
        options = self.options
        root = self._to_node_tree(self)
        root.block_comments = to_comment_lines(save_header(options.header))
        root.end_comments = to_comment_lines(options.footer)

        if not root.block_comments and not root.end_comments and not root.value:
            return ""
        if not root.value:
            root.flow_style = True

        return emit(
            root,
            indent=options.indent,
            width=options.width,
            process_comments=options.parse_comments,
        )

    def _to_node_tree(self, section: ConfigurationSection) -> MappingNode:
        entries = []
        for key, value in section.get_values(False).items():
            key_node = self._representer.key_to_node(key)
            if isinstance(value, ConfigurationSection):
                value_node = self._to_node_tree(value)
            else:
                value_node = self._representer.to_node(value)

            key_node.block_comments = to_comment_lines(section.get_comments(key))
            inline = to_comment_lines(section.get_inline_comments(key))
            if isinstance(value_node, (MappingNode, SequenceNode)):
                key_node.inline_comments = inline
            else:
                value_node.inline_comments = inline
            entries.append((key_node, value_node))
        return MappingNode(value=entries)

    # --------------------------
    # Loading
    # --------------------------
    def load_from_string(self, contents: str) -> None:
        """Replace the contents of this configuration with the document ``contents``.

        Empty or whitespace-only text gives an empty configuration.

        Raises:
            FormatError: If the text is not valid YAML or its top level is not a mapping.
        """
        if not contents.strip(_FILLER):
            self.clear()
            return

        options = self.options
        root = compose(contents, options.parse_comments)
        if root is not None and not isinstance(root, MappingNode):
            raise FormatError("Top level is not a mapping")

        self.clear()
        if root is None:
            return

        try:
            adjust_node_comments(root)
            options.set_header(load_header(from_comment_lines(root.block_comments)))
            options.set_footer(from_comment_lines(root.end_comments))
            self._from_node_tree(root, self, set())
        except yaml.YAMLError as exc:
            raise FormatError(str(exc)) from exc
        finally:
            self._constructor.reset()

    def _from_node_tree(self, node: MappingNode, section: ConfigurationSection, active: Set[Node]) -> None:
        if node in active:
            raise FormatError("Found recursive alias" + line_suffix(node))
        active.add(node)
        flatten_mapping(node)
        for key_node, value_node in node.value:
            key = self._key_text(key_node)
            if not key:
                raise FormatError("Found empty key" + line_suffix(key_node))
            value = deref(value_node)

            if isinstance(value, MappingNode) and not has_serialized_type_key(value):
                self._from_node_tree(value, section.create_section(key), active)
            else:
                section.set(key, self._constructor.construct(value))

            section.set_comments(key, from_comment_lines(key_node.block_comments))
            if isinstance(value, (MappingNode, SequenceNode)):
                section.set_inline_comments(key, from_comment_lines(key_node.inline_comments))
            else:
                section.set_inline_comments(key, from_comment_lines(value_node.inline_comments))
        active.discard(node)

    def _key_text(self, key_node: Node) -> str:
        # Scalar keys keep their text as written, so "yes" does not become "True"
        key = deref(key_node)
        if isinstance(key, ScalarNode):
            return key.value
        return str(self._constructor.construct(key))

    # --------------------------
    # Factory
    # --------------------------
    @classmethod
    def load_configuration(
        cls, source: Source, logger: Optional[logging.Logger] = None
    ) -> "YamlConfiguration":
        """Load ``source`` without raising.

        A missing file gives an empty configuration. Any other failure is
        logged and an empty configuration is returned.
        """
        log = logger or get_logger("yaml_configuration")
        config = cls()
        try:
            config.load(source)
        except FileNotFoundError:
            log.debug("[CONFIGURATION] %s does not exist, starting empty.", source)
        except (OSError, UnicodeError, ConfigurationError) as exc:
            log.error("[CONFIGURATION] Cannot load %s: %s", source, exc, exc_info=True)
            config.clear()
        return config


# --------------------------
# Comment conversion
# --------------------------
def adjust_node_comments(root: MappingNode) -> None:
    """Split the first key's comments at their last blank line into the root's."""
    if root.block_comments is not None or not root.value:
        return
    first_key = root.value[0][0]
    lines = first_key.block_comments
    if not lines:
        return
    blanks = [index for index, line in enumerate(lines) if line is None]
    if not blanks:
        return
    split = blanks[-1] + 1
    root.block_comments = lines[:split]
    first_key.block_comments = lines[split:]


def load_header(lines: CommentLines) -> CommentLines:
    """Drop the separator line ending the header and any blank lines it starts with."""
    header = list(lines)
    if header:
        header.pop()
    while header and header[0] is None:
        header.pop(0)
    return header


def save_header(header: CommentLines) -> CommentLines:
    lines = list(header)
    if lines:
        lines.append(None)
    return lines


def from_comment_lines(lines: Optional[CommentLines]) -> CommentLines:
    """Raw comment text -> section comment lines (one leading space removed)."""
    result: CommentLines = []
    for line in lines or []:
        if line is None:
            result.append(None)
        else:
            result.append(line[1:] if line.startswith(" ") else line)
    return result


def to_comment_lines(lines: Union[CommentLines, None]) -> CommentLines:
    """Section comment lines -> raw comment text (one leading space added)."""
    result: CommentLines = []
    for line in lines or []:
        if line is None:
            result.append(None)
            continue
        for part in line.splitlines() or [""]:
            result.append(" " + part if part else part)
    return result
