import pytest
from ruamel.yaml import YAML

from yamlzoom.core.errors import ParseFailure
from yamlzoom.field.document import DocumentLayout, YamlDocument, detect_layout, has_explicit_start

from conftest import DEPLOYMENT_YAML

codec = YamlDocument()
safe = YAML(typ='safe')

SAMPLES = [
    DEPLOYMENT_YAML,
    "apiVersion: v1\nkind: Service\nmetadata:\n  name: web-svc\nspec:\n  ports:\n    - port: 80\n      targetPort: 8080\n",
    "rules:\n- apiGroups: ['']\n  resources: [\"pods\"]\n  verbs: [\"get\", \"list\"]\n",
    "# top comment\nkey: value  # trailing\nempty: {}\nlist: []\n",
    "script: |\n  #!/bin/bash\n  echo hi\nfolded: >\n  one\n  two\n",
    "base: &base\n  cpu: 100m\nlimits: *base\n",
]


@pytest.mark.parametrize("text", SAMPLES)
def test_serialize_is_idempotent(text):
    """
    STABILITY TEST: a second parse/serialize cycle never changes the text
    produced by the first.
    """
    once = codec.roundtrip(text)
    assert codec.roundtrip(once) == once


@pytest.mark.parametrize("text", SAMPLES)
def test_roundtrip_keeps_the_data(text):
    assert safe.load(codec.roundtrip(text)) == safe.load(text)


def test_simple_document_is_byte_identical():
    text = 'a:\n  b: "hello"\nitems:\n  - x: 1\n  - x: 2\n'
    assert codec.roundtrip(text) == text


def test_aliases_are_expanded():
    out = codec.roundtrip("base: &base\n  cpu: 100m\nlimits: *base\n")
    assert "&" not in out and "*" not in out
    assert safe.load(out) == {"base": {"cpu": "100m"}, "limits": {"cpu": "100m"}}


def test_long_lines_are_never_folded():
    value = " ".join(["word"] * 200)
    out = codec.roundtrip(f"long: {value}\n")
    assert out == f"long: {value}\n"


def test_empty_document_is_an_empty_mapping():
    assert codec.parse("") == {}
    assert codec.parse("# only a comment\n") == {}


@pytest.mark.parametrize("text", [
    "a: [1, 2\n",
    "a: b: c\n",
    "a: 1\n---\nb: 2\n",
])
def test_invalid_text_raises_parse_failure(text):
    with pytest.raises(ParseFailure) as info:
        codec.parse(text)
    assert info.value.message.startswith("Invalid YAML")


def test_aliases_become_independent_copies():
    tree = codec.parse("base: &base\n  cpu: 100m\nlimits: *base\nlist:\n  - *base\n")
    assert tree["limits"] == tree["base"]
    assert tree["limits"] is not tree["base"]
    assert tree["list"][0] is not tree["base"]


@pytest.mark.parametrize("text, layout", [
    (DEPLOYMENT_YAML, (2, 4, 2, False)),
    ("rules:\n- verbs: [get]\n  resources: [pods]\n", (2, 2, 0, False)),
    ("spec:\n    replicas: 1\n", (4, 4, 2, False)),
    ("# manifest\n---\nkind: Pod\n", (2, 4, 2, True)),
    ("kind: Pod\n", (2, 4, 2, False)),
])
def test_layout_follows_the_source(text, layout):
    fallback = DocumentLayout(mapping=2, sequence=4, offset=2)
    found = detect_layout(text, fallback)
    assert (found.mapping, found.sequence, found.offset, found.explicit_start) == layout


@pytest.mark.parametrize("text, expected", [
    ("---\na: 1\n", True),
    ("%YAML 1.2\n---\na: 1\n", True),
    ("\n# comment\n--- \na: 1\n", True),
    ("a: 1\n---\n", False),
    ("", False),
])
def test_explicit_start_detection(text, expected):
    assert has_explicit_start(text) is expected
