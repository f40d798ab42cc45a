"""
Document node tree: the text-level view of a YAML document.

Unlike PyYAML's own nodes, these keep the comments found around each node:

- ``block_comments``: full-line comments and blank lines right above the node.
  ``None`` means the list was never assigned, which the translator uses to
  tell a root that still has to be split into header and first-key comments.
- ``inline_comments``: comment text after the node on the same line.
- ``end_comments``: comments after the last entry (only used on the root).

Comment lines hold the raw text after ``#`` (leading space included); a
``None`` entry is a blank line.

Shared substructures stay shared: a second reference to an anchored node is an
:class:`AliasNode` pointing at the first one, so callers must go through
:func:`deref` before looking at the structure of a value.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pykook.configuration.errors import FormatError

CommentLines = List[Optional[str]]

STR_TAG = "tag:yaml.org,2002:str"
SEQ_TAG = "tag:yaml.org,2002:seq"
MAP_TAG = "tag:yaml.org,2002:map"
MERGE_TAG = "tag:yaml.org,2002:merge"
VALUE_TAG = "tag:yaml.org,2002:value"


@dataclass(eq=False, kw_only=True)
class Node:
    tag: str = ""
    block_comments: Optional[CommentLines] = None
    inline_comments: CommentLines = field(default_factory=list)
    end_comments: CommentLines = field(default_factory=list)
    start_line: Optional[int] = None
    end_line: Optional[int] = None


@dataclass(eq=False, kw_only=True)
class ScalarNode(Node):
    value: str
    style: Optional[str] = None


@dataclass(eq=False, kw_only=True)
class SequenceNode(Node):
    tag: str = SEQ_TAG
    value: List[Node] = field(default_factory=list)
    flow_style: bool = False


@dataclass(eq=False, kw_only=True)
class MappingNode(Node):
    tag: str = MAP_TAG
    value: List[Tuple[Node, Node]] = field(default_factory=list)
    flow_style: bool = False


@dataclass(eq=False, kw_only=True)
class AliasNode(Node):
    target: Node
    anchor: Optional[str] = None


def deref(node: Node) -> Node:
    """Follow an alias chain down to the anchored node."""
    while isinstance(node, AliasNode):
        node = node.target
    return node


def is_collection(node: Node) -> bool:
    return isinstance(deref(node), (MappingNode, SequenceNode))


def flatten_mapping(node: MappingNode) -> None:
    """Replace ``<<`` merge keys of ``node`` with the entries they pull in.

    Explicit entries keep priority over merged ones because they come later.
    """
    merge: List[Tuple[Node, Node]] = []
    index = 0
    while index < len(node.value):
        key_node, value_node = node.value[index]
        if key_node.tag == MERGE_TAG:
            del node.value[index]
            source = deref(value_node)
            if isinstance(source, MappingNode):
                flatten_mapping(source)
                merge.extend(source.value)
            elif isinstance(source, SequenceNode):
                submerge = []
                for subnode in source.value:
                    subnode = deref(subnode)
                    if not isinstance(subnode, MappingNode):
                        raise FormatError(
                            f"Expected a mapping for merging, but found {type(subnode).__name__}"
                            + line_suffix(subnode)
                        )
                    flatten_mapping(subnode)
                    submerge.append(subnode.value)
                submerge.reverse()
                for value in submerge:
                    merge.extend(value)
            else:
                raise FormatError(
                    "Expected a mapping or list of mappings for merging, but found "
                    f"{type(source).__name__}" + line_suffix(source)
                )
        elif key_node.tag == VALUE_TAG:
            key_node.tag = STR_TAG
            index += 1
        else:
            index += 1
    if merge:
        node.value = merge + node.value


def line_suffix(node: Node) -> str:
    return f" (line {node.start_line + 1})" if node.start_line is not None else ""
