import pytest

from pykook.configuration import FormatError
from pykook.configuration.file.yaml_composer import compose, split_lines
from pykook.configuration.file.yaml_nodes import (
    AliasNode,
    MappingNode,
    ScalarNode,
    SequenceNode,
    deref,
    flatten_mapping,
)


def entries(node: MappingNode):
    return {key.value: value for key, value in node.value}


def keys(node: MappingNode):
    return {key.value: key for key, _ in node.value}


def test_empty_document_has_no_root() -> None:
    assert compose("") is None
    assert compose("# only a comment\n") is None


def test_block_comments_attach_to_next_key(yaml_text) -> None:
    root = compose(yaml_text("""
        a: 1
        # about b

        # still about b
        b: 2
    """))

    assert keys(root)["a"].block_comments is None
    assert keys(root)["b"].block_comments == [" about b", None, " still about b"]


def test_inline_comment_on_scalar_value(yaml_text) -> None:
    root = compose(yaml_text("""
        a: 1 # one
        b: "two"   #two
    """))

    values = entries(root)
    assert values["a"].inline_comments == [" one"]
    assert values["b"].inline_comments == ["two"]
    assert keys(root)["a"].inline_comments == []


def test_inline_comment_on_collection_goes_to_key(yaml_text) -> None:
    root = compose(yaml_text("""
        section: # settings
          x: 1
        items: # list
          - 1
    """))

    assert keys(root)["section"].inline_comments == [" settings"]
    assert keys(root)["items"].inline_comments == [" list"]
    assert entries(root)["section"].inline_comments == []


def test_comments_in_sequences(yaml_text) -> None:
    root = compose(yaml_text("""
        items:
          # first item
          - a # inline a
          - b
    """))

    items = entries(root)["items"]
    assert isinstance(items, SequenceNode)
    assert items.value[0].block_comments == [" first item"]
    assert items.value[0].inline_comments == [" inline a"]


def test_trailing_comments_become_end_comments(yaml_text) -> None:
    root = compose(yaml_text("""
        # header

        a: 1
        # footer
    """))

    assert root.block_comments is None
    assert keys(root)["a"].block_comments == [" header", None]
    assert root.end_comments == [" footer"]


def test_block_scalar_interior_lines_are_not_blank_lines(yaml_text) -> None:
    root = compose(yaml_text("""
        text: |
          line one

          line three
        after: 1
    """))

    assert entries(root)["text"].value == "line one\n\nline three\n"
    assert keys(root)["after"].block_comments is None


def test_comments_skipped_when_disabled() -> None:
    root = compose("# c\na: 1 # i\n", process_comments=False)

    assert keys(root)["a"].block_comments is None
    assert entries(root)["a"].inline_comments == []


def test_aliases_stay_visible(yaml_text) -> None:
    root = compose(yaml_text("""
        base: &base
          x: 1
        copy: *base
    """))

    copy = entries(root)["copy"]
    assert isinstance(copy, AliasNode)
    assert copy.anchor == "base"
    assert deref(copy) is entries(root)["base"]


def test_merge_keys_are_flattened(yaml_text) -> None:
    root = compose(yaml_text("""
        base: &base
          x: 1
          y: 2
        child:
          <<: *base
          y: 3
    """))

    child = entries(root)["child"]
    flatten_mapping(child)

    assert [(key.value, value.value) for key, value in child.value] == [("x", "1"), ("y", "2"), ("y", "3")]


def test_merge_of_scalar_is_a_format_error() -> None:
    root = compose("a: &a 1\nb:\n  <<: *a\n")
    with pytest.raises(FormatError):
        flatten_mapping(entries(root)["b"])


def test_malformed_yaml_is_a_format_error() -> None:
    with pytest.raises(FormatError) as info:
        compose("a: [1, 2\n")
    assert info.value.__cause__ is not None


def test_scalar_tags_are_resolved() -> None:
    root = compose("a: 1\nb: text\nc: true\n")
    values = entries(root)

    assert isinstance(values["a"], ScalarNode)
    assert values["a"].tag == "tag:yaml.org,2002:int"
    assert values["b"].tag == "tag:yaml.org,2002:str"
    assert values["c"].tag == "tag:yaml.org,2002:bool"


def test_split_lines_handles_all_line_breaks() -> None:
    assert split_lines("a\r\nb\rc\n") == ["a", "b", "c"]
    assert split_lines("a\n\n") == ["a", ""]
