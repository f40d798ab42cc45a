"""
Document node tree -> text.

The node tree is turned into PyYAML events and written by
:class:`CommentEmitter`, a PyYAML emitter that also writes the comments
carried by each node: block comments above mapping keys and sequence items,
inline comments after scalars and flow collections, the root's block comments
before the document and its end comments after it.

Inline comments of a key are written after its ``:`` when the value opens a
block collection, and after the value otherwise.
"""
from __future__ import annotations

import io
from typing import Dict, Optional, Set

import yaml
from yaml.emitter import Emitter
from yaml.events import (
    AliasEvent,
    DocumentEndEvent,
    DocumentStartEvent,
    MappingEndEvent,
    MappingStartEvent,
    ScalarEvent,
    SequenceEndEvent,
    SequenceStartEvent,
    StreamEndEvent,
    StreamStartEvent,
)

from pykook.configuration.file.yaml_nodes import (
    AliasNode,
    CommentLines,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
    deref,
)


class CommentEmitter(Emitter):
    """PyYAML emitter that writes the comments attached to events.

    Events produced by :class:`NodeSerializer` carry their source node as
    ``event.comment_source``.
    """

    def __init__(self, stream, process_comments: bool = True, **kwargs) -> None:
        super().__init__(stream, **kwargs)
        self.process_comments = process_comments
        self.pending_inline_comments: CommentLines = []
        self.key_inline_comments: CommentLines = []
        self.document_end_comments: CommentLines = []

    def _comment_source(self) -> Optional[Node]:
        if not self.process_comments:
            return None
        return getattr(self.event, "comment_source", None)

    # --------------------------
    # Writers
    # --------------------------
    def write_raw(self, data: str) -> None:
        self.whitespace = False
        self.indention = False
        self.open_ended = False
        self.column += len(data)
        if self.encoding:
            data = data.encode(self.encoding)
        self.stream.write(data)

    def write_comment_lines(self, lines: CommentLines) -> None:
        indent = self.indent or 0
        for line in lines:
            if self.column > 0:
                self.write_line_break()
            if line is None:
                self.write_line_break()
            else:
                self.write_raw(" " * indent + "#" + line)

    def write_inline_comments(self, lines: CommentLines) -> None:
        for line in lines:
            if line is not None:
                self.write_raw(" #" + line)

    def flush_inline_comments(self) -> None:
        if self.pending_inline_comments:
            comments, self.pending_inline_comments = self.pending_inline_comments, []
            self.write_inline_comments(comments)

    def _opens_block_collection(self) -> bool:
        return (
            isinstance(self.event, (SequenceStartEvent, MappingStartEvent))
            and not self.flow_level
            and not self.canonical
            and not self.event.flow_style
            and not self.check_empty_sequence()
            and not self.check_empty_mapping()
        )

    # --------------------------
    # States
    # --------------------------
    def expect_document_root(self):
        source = self._comment_source()
        if source is not None:
            self.write_comment_lines(source.block_comments or [])
            self.document_end_comments = list(source.end_comments)
        super().expect_document_root()

    def expect_document_end(self):
        if self.process_comments:
            self.flush_inline_comments()
            comments, self.document_end_comments = self.document_end_comments, []
            self.write_comment_lines(comments)
        super().expect_document_end()

    def expect_scalar(self):
        super().expect_scalar()
        source = self._comment_source()
        if (
            source is not None
            and not self.simple_key_context
            and not self.flow_level
            and self.event.style not in ("|", ">")
        ):
            self.pending_inline_comments = list(source.inline_comments)

    def expect_flow_sequence(self):
        self._remember_flow_comments()
        super().expect_flow_sequence()

    def expect_flow_mapping(self):
        self._remember_flow_comments()
        super().expect_flow_mapping()

    def _remember_flow_comments(self) -> None:
        source = self._comment_source()
        if source is not None and not self.flow_level and not self.simple_key_context:
            self.pending_inline_comments = list(source.inline_comments)

    def expect_block_sequence_item(self, first=False):
        if self.process_comments:
            self.flush_inline_comments()
            if first or not isinstance(self.event, SequenceEndEvent):
                source = self._comment_source()
                if source is not None:
                    self.write_comment_lines(source.block_comments or [])
        super().expect_block_sequence_item(first)

    def expect_block_mapping_key(self, first=False):
        if self.process_comments:
            self.flush_inline_comments()
            if first or not isinstance(self.event, MappingEndEvent):
                source = self._comment_source()
                self.key_inline_comments = list(source.inline_comments) if source is not None else []
                if source is not None:
                    self.write_comment_lines(source.block_comments or [])
        super().expect_block_mapping_key(first)

    def expect_block_mapping_simple_value(self):
        comments, self.key_inline_comments = self.key_inline_comments, []
        if comments and self._opens_block_collection():
            self.write_indicator(":", False)
            self.write_inline_comments(comments)
            self.states.append(self.expect_block_mapping_key)
            self.expect_node(mapping=True)
        else:
            super().expect_block_mapping_simple_value()
            self.pending_inline_comments = comments + self.pending_inline_comments


class NodeSerializer:
    """Feeds a document node tree to an emitter as PyYAML events."""

    ANCHOR_TEMPLATE = "id%03d"

    def __init__(self, emitter: Emitter) -> None:
        self.emitter = emitter
        self.resolver = yaml.resolver.Resolver()
        self.anchors: Dict[int, str] = {}
        self.serialized: Set[int] = set()

    def serialize(self, root: Node) -> None:
        self.anchors = {}
        self.serialized = set()
        self._anchor_aliases(root, set())

        self.emitter.emit(StreamStartEvent())
        self.emitter.emit(DocumentStartEvent(explicit=False))
        self._serialize_node(root)
        self.emitter.emit(DocumentEndEvent(explicit=False))
        self.emitter.emit(StreamEndEvent())

    def _anchor_aliases(self, node: Node, visited: Set[int]) -> None:
        if id(node) in visited:
            return
        visited.add(id(node))
        if isinstance(node, AliasNode):
            target = deref(node)
            if id(target) not in self.anchors:
                self.anchors[id(target)] = node.anchor or self.ANCHOR_TEMPLATE % (len(self.anchors) + 1)
            self._anchor_aliases(target, visited)
        elif isinstance(node, SequenceNode):
            for item in node.value:
                self._anchor_aliases(item, visited)
        elif isinstance(node, MappingNode):
            for key, value in node.value:
                self._anchor_aliases(key, visited)
                self._anchor_aliases(value, visited)

    def _emit(self, event, node: Node) -> None:
        event.comment_source = node
        self.emitter.emit(event)

    def _serialize_node(self, node: Node) -> None:
        if isinstance(node, AliasNode):
            target = deref(node)
            if id(target) in self.serialized:
                self._emit(AliasEvent(self.anchors[id(target)]), node)
            else:
                self._serialize_node(target)
            return

        anchor = self.anchors.get(id(node))
        self.serialized.add(id(node))

        if isinstance(node, ScalarNode):
            detected_tag = self.resolver.resolve(yaml.ScalarNode, node.value, (True, False))
            default_tag = self.resolver.resolve(yaml.ScalarNode, node.value, (False, True))
            implicit = (node.tag == detected_tag), (node.tag == default_tag)
            self._emit(ScalarEvent(anchor, node.tag, implicit, node.value, style=node.style), node)
        elif isinstance(node, SequenceNode):
            implicit = node.tag == self.resolver.resolve(yaml.SequenceNode, node.value, True)
            self._emit(SequenceStartEvent(anchor, node.tag, implicit, flow_style=node.flow_style), node)
            for item in node.value:
                self._serialize_node(item)
            self.emitter.emit(SequenceEndEvent())
        elif isinstance(node, MappingNode):
            implicit = node.tag == self.resolver.resolve(yaml.MappingNode, node.value, True)
            self._emit(MappingStartEvent(anchor, node.tag, implicit, flow_style=node.flow_style), node)
            for key, value in node.value:
                self._serialize_node(key)
                self._serialize_node(value)
            self.emitter.emit(MappingEndEvent())


def emit(root: Node, indent: int = 2, width: int = 80, process_comments: bool = True) -> str:
    """Render a document node tree as YAML text."""
    stream = io.StringIO()
    emitter = CommentEmitter(
        stream,
        process_comments=process_comments,
        indent=indent,
        width=width,
        allow_unicode=True,
    )
    try:
        NodeSerializer(emitter).serialize(root)
    finally:
        emitter.dispose()
    return stream.getvalue()
