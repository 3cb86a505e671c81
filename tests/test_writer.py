import pytest
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from yamlzoom.core.errors import ParseFailure, PathNotFound
from yamlzoom.field.materializer import FieldMaterializer
from yamlzoom.field.resolver import PathResolver
from yamlzoom.field.writer import FieldWriter

from conftest import DEPLOYMENT_YAML

CONTAINER = ".spec.template.spec.containers[0]"

writer = FieldWriter()
safe = YAML(typ='safe')


def test_quoted_value_keeps_its_quotes():
    updated = writer.apply('a:\n  b: "hello"\n', ".a.b", "# YAML Path: .a.b\n\nworld")
    assert updated == 'a:\n  b: "world"\n'

    updated = writer.apply("a: 'x'\n", ".a", "# YAML Path: .a\n\ny")
    assert updated == "a: 'y'\n"


def test_numeric_looking_text_stays_a_string():
    """
    TYPE SAFETY: the writer never turns an edited number back into an int;
    the emitter has to quote it.
    """
    updated = writer.apply("replicas: 3\n", ".replicas", "# YAML Path: .replicas\n\n5")
    assert safe.load(updated) == {"replicas": "5"}


def test_multiline_text_becomes_literal_block():
    updated = writer.apply("script: echo hi\n", ".script", "# YAML Path: .script\n\necho one\necho two\n")
    assert "script: |" in updated
    assert safe.load(updated) == {"script": "echo one\necho two\n"}


def test_crlf_inside_multiline_text_is_normalized():
    updated = writer.apply("script: x\n", ".script", "# YAML Path: .script\r\n\r\none\r\ntwo")
    assert safe.load(updated) == {"script": "one\ntwo"}
    assert "\r" not in updated


def test_text_is_stored_verbatim():
    updated = writer.apply("a: x\n", ".a", "# YAML Path: .a\n\n  padded  ")
    assert safe.load(updated) == {"a": "  padded  "}


def test_other_fields_are_untouched(codec):
    updated = writer.apply(DEPLOYMENT_YAML, CONTAINER + ".image", "# YAML Path: x\n\nnginx:1.27")
    assert updated == codec.roundtrip(DEPLOYMENT_YAML).replace("nginx:1.25", "nginx:1.27")


def test_bracket_write_builds_missing_structure():
    """
    CREATION TEST: writing into an empty document creates mappings and
    sequences from the shape of the path, padding skipped slots.
    """
    tree = writer.write(CommentedMap(), ".a.b[1].c", "x")
    assert tree == {"a": {"b": [{}, {"c": "x"}]}}


def test_digit_segment_addresses_existing_sequence(codec):
    tree = codec.parse("items:\n  - x: 1\n  - x: 2\n")
    writer.write(tree, ".items.1.x", "9")
    assert PathResolver().resolve(tree, ".items[1].x") == "9"


def test_null_parent_is_replaced(codec):
    tree = codec.parse("a: null\n")
    writer.write(tree, ".a.b", "x")
    assert tree == {"a": {"b": "x"}}


def test_append_past_the_end(codec):
    tree = codec.parse("items:\n  - one\n")
    writer.write(tree, ".items[2]", "three")
    assert list(tree["items"]) == ["one", {}, "three"]


@pytest.mark.parametrize("path", [
    ".",
    ".metadata.name.deeper",
    CONTAINER.rsplit("[", 1)[0] + ".name",
    ".metadata[0]",
])
def test_impossible_writes_raise(deployment, path):
    with pytest.raises(PathNotFound):
        writer.write(deployment, path, "x")


def test_invalid_source_raises_parse_failure():
    with pytest.raises(ParseFailure):
        writer.apply("a: [1, 2\n", ".a", "x")


@pytest.mark.parametrize("content", [
    "hello",
    "",
    "line one\nline two\n",
    "# YAML Path: .nested\n\nlooks like a header",
    "\n\nleading blank lines",
])
@pytest.mark.parametrize("eol", ["\n", "\r\n"])
def test_header_strip_inverts_render(content, eol):
    buffer_text = FieldMaterializer().render_buffer(".a.b", content, eol)
    assert writer.strip_header(buffer_text) == content


def test_text_without_header_is_kept():
    assert writer.strip_header("no header here") == "no header here"


@pytest.mark.parametrize("path", [
    ".metadata.name",
    ".spec.replicas",
    CONTAINER + ".image",
    CONTAINER + ".command",
    CONTAINER + ".env[0].value",
    CONTAINER + ".ports[1]",
    ".metadata.labels.tier",
])
def test_written_value_resolves_back(codec, path):
    """
    CONSISTENCY TEST: whatever is written at a path is exactly what the
    resolver returns for that path after a full serialize/parse cycle.
    """
    tree = codec.parse(DEPLOYMENT_YAML)
    writer.write(tree, path, "edited value")
    reparsed = codec.parse(writer.serialize(tree))
    assert PathResolver().resolve(reparsed, path) == "edited value"


def test_editing_an_alias_leaves_the_anchor_alone():
    """
    ISOLATION TEST: a field reached through an alias is written on its own;
    the anchored original keeps its value.
    """
    source = "base: &base\n  cpu: 100m\nlimits: *base\n"
    updated = writer.apply(source, ".limits.cpu", "# YAML Path: .limits.cpu\n\n200m")
    assert updated == "base:\n  cpu: 100m\nlimits:\n  cpu: 200m\n"


def test_unindented_sequences_survive_an_unrelated_edit():
    source = "rules:\n- apiGroups: ['']\n  verbs: [get]\nname: a\n"
    updated = writer.apply(source, ".name", "# YAML Path: .name\n\nb")
    assert updated == "rules:\n- apiGroups: ['']\n  verbs: [get]\nname: b\n"


def test_wide_mapping_indent_survives_an_edit():
    source = "spec:\n    replicas: 1\n    name: a\n"
    updated = writer.apply(source, ".spec.name", "# YAML Path: .spec.name\n\nb")
    assert updated == "spec:\n    replicas: 1\n    name: b\n"


def test_document_start_marker_is_kept():
    updated = writer.apply("---\na: 1\nb: x\n", ".b", "# YAML Path: .b\n\ny")
    assert updated == "---\na: 1\nb: y\n"

    updated = writer.apply("a: 1\nb: x\n", ".b", "# YAML Path: .b\n\ny")
    assert updated == "a: 1\nb: y\n"
