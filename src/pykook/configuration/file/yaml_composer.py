"""
Text -> document node tree.

PyYAML's scanner throws comments away, so :class:`CommentLoader` hooks
``scan_to_next_token`` to record every comment it skips together with its
position. Once the document is composed, :func:`attach_comments` hands those
comments (and the blank lines of the source) to the nodes they belong to:

- A comment sharing a line with content is an inline comment of the last node
  that ends on that line. When a mapping value is a collection, the key owns
  the line instead, so ``key: # note`` stays with ``key``.
- Full-line comments and blank lines become block comments of the next mapping
  key or sequence item.
- Whatever follows the last entry becomes the root's end comments.
"""
from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

import yaml

from pykook.configuration.errors import FormatError
from pykook.configuration.file.yaml_nodes import (
    AliasNode,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
    is_collection,
)

_LINE_BREAK = re.compile("\r\n|[\n\r\x85\u2028\u2029]")
_END_OF_LINE = "\0\r\n\x85\u2028\u2029"


@dataclass(slots=True)
class RawComment:
    line: int
    column: int
    text: str


class AliasReference(yaml.Node):
    """Stand-in returned by the composer for ``*alias`` so sharing stays visible."""

    id = "alias"

    def __init__(self, target: yaml.Node, anchor: str, start_mark, end_mark) -> None:
        super().__init__(target.tag, target, start_mark, end_mark)
        self.anchor = anchor


class CommentLoader(yaml.SafeLoader):
    """Safe loader that keeps the comments the scanner would skip."""

    def __init__(self, stream, process_comments: bool = True) -> None:
        super().__init__(stream)
        self.process_comments = process_comments
        self.raw_comments: List[RawComment] = []

    def scan_to_next_token(self):
        if self.index == 0 and self.peek() == "\uFEFF":
            self.forward()
        found = False
        while not found:
            while self.peek() == " ":
                self.forward()
            if self.peek() == "#":
                mark = self.get_mark()
                self.forward()
                length = 0
                while self.peek(length) not in _END_OF_LINE:
                    length += 1
                if self.process_comments:
                    self.raw_comments.append(RawComment(mark.line, mark.column, self.prefix(length)))
                self.forward(length)
            if self.scan_line_break():
                if not self.flow_level:
                    self.allow_simple_key = True
            else:
                found = True

    def compose_node(self, parent, index):
        if self.check_event(yaml.AliasEvent):
            event = self.peek_event()
            target = super().compose_node(parent, index)
            return AliasReference(target, event.anchor, event.start_mark, event.end_mark)
        return super().compose_node(parent, index)


def compose(text: str, process_comments: bool = True) -> Optional[Node]:
    """Parse ``text`` into a document node tree.

    Returns ``None`` for a document without content.

    Raises:
        FormatError: If the text is not well-formed YAML.
    """
    try:
        loader = CommentLoader(text, process_comments)
    except yaml.YAMLError as exc:
        raise FormatError(str(exc)) from exc

    try:
        root = loader.get_single_node()
    except yaml.YAMLError as exc:
        raise FormatError(str(exc)) from exc
    finally:
        loader.dispose()

    if root is None:
        return None

    document = convert_node(root)
    if process_comments:
        attach_comments(document, loader.raw_comments, text)
    return document


def convert_node(node: yaml.Node, converted: Optional[Dict[int, Node]] = None) -> Node:
    """Turn a PyYAML node tree into a document node tree.

    Nodes reached a second time become :class:`AliasNode` references to the
    first conversion.
    """
    if converted is None:
        converted = {}

    if isinstance(node, AliasReference):
        target = converted.get(id(node.value)) or convert_node(node.value, converted)
        return AliasNode(tag=target.tag, target=target, anchor=node.anchor, **_lines(node))

    known = converted.get(id(node))
    if known is not None:
        return AliasNode(tag=known.tag, target=known)

    if isinstance(node, yaml.ScalarNode):
        result: Node = ScalarNode(tag=node.tag, value=node.value, style=node.style, **_lines(node))
        converted[id(node)] = result
    elif isinstance(node, yaml.SequenceNode):
        result = SequenceNode(tag=node.tag, flow_style=bool(node.flow_style), **_lines(node))
        converted[id(node)] = result
        result.value = [convert_node(item, converted) for item in node.value]
    elif isinstance(node, yaml.MappingNode):
        result = MappingNode(tag=node.tag, flow_style=bool(node.flow_style), **_lines(node))
        converted[id(node)] = result
        result.value = [
            (convert_node(key, converted), convert_node(value, converted)) for key, value in node.value
        ]
    else:
        raise FormatError(f"Unsupported node type {type(node).__name__}")
    return result


def _lines(node: yaml.Node) -> Dict[str, Optional[int]]:
    return {
        "start_line": node.start_mark.line if node.start_mark is not None else None,
        "end_line": node.end_mark.line if node.end_mark is not None else None,
    }


def split_lines(text: str) -> List[str]:
    """Split ``text`` on the line breaks the YAML reader counts."""
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def attach_comments(root: Node, comments: List[RawComment], text: str) -> None:
    anchors: List[Node] = []
    owners: Dict[int, Node] = {}
    interior: Set[int] = set()
    _index(root, anchors, owners, interior)

    lines = split_lines(text)
    pending: List[Tuple[int, Optional[str]]] = []

    for comment in comments:
        before = lines[comment.line][: comment.column] if comment.line < len(lines) else ""
        owner = owners.get(comment.line)
        if before.strip() and owner is not None:
            owner.inline_comments.append(comment.text)
        else:
            pending.append((comment.line, comment.text))

    for number, line in enumerate(lines):
        if not line.strip() and number not in interior:
            pending.append((number, None))

    pending.sort(key=lambda item: item[0])
    anchors.sort(key=lambda anchor: anchor.start_line)
    starts = [anchor.start_line for anchor in anchors]

    for line, comment in pending:
        position = bisect.bisect_right(starts, line)
        if position < len(anchors):
            target = anchors[position]
            if target.block_comments is None:
                target.block_comments = []
            target.block_comments.append(comment)
        elif root.start_line is not None and line < root.start_line:
            if root.block_comments is None:
                root.block_comments = []
            root.block_comments.append(comment)
        else:
            root.end_comments.append(comment)


def _index(node: Node, anchors: List[Node], owners: Dict[int, Node], interior: Set[int]) -> None:
    if isinstance(node, MappingNode):
        for key, value in node.value:
            if key.start_line is not None:
                anchors.append(key)
            _index(key, anchors, owners, interior)
            _index(value, anchors, owners, interior)
            if is_collection(value) and key.end_line is not None:
                owners[key.end_line] = key
    elif isinstance(node, SequenceNode):
        for item in node.value:
            if item.start_line is not None:
                anchors.append(item)
            _index(item, anchors, owners, interior)
    elif isinstance(node, ScalarNode):
        if node.start_line is None or node.end_line is None:
            return
        interior.update(range(node.start_line + 1, node.end_line))
        # block scalars end on the line after their content
        if node.style not in ("|", ">"):
            owners[node.end_line] = node
    elif isinstance(node, AliasNode) and node.end_line is not None:
        owners[node.end_line] = node
