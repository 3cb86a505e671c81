import pytest

from yamlzoom.core.errors import PathNotFound
from yamlzoom.field.resolver import PathResolver

resolver = PathResolver()


def test_resolve_nested_scalar(deployment):
    assert resolver.resolve(deployment, ".metadata.name") == "web"
    assert resolver.resolve(deployment, "spec.replicas") == 3


def test_bracket_and_digit_segments_are_equivalent(deployment):
    """
    READ/WRITE SYMMETRY: bracket indices resolve on read exactly like the
    bare digit form.
    """
    bracket = resolver.resolve(deployment, ".spec.template.spec.containers[0].image")
    dotted = resolver.resolve(deployment, ".spec.template.spec.containers.0.image")
    assert bracket == dotted == "nginx:1.25"


def test_wrapped_strings_come_back_as_plain_str(deployment):
    command = resolver.resolve(deployment, ".spec.template.spec.containers[0].command")
    assert type(command) is str
    assert command == "#!/bin/bash\necho starting\n"

    value = resolver.resolve(deployment, ".spec.template.spec.containers[0].env[0].value")
    assert type(value) is str
    assert value == "production"


def test_structured_values_are_returned(deployment):
    container = resolver.resolve(deployment, ".spec.template.spec.containers[0]")
    assert container["name"] == "app"
    assert list(resolver.resolve(deployment, ".spec.template.spec.containers[0].ports")) == [80, 443]


def test_integer_keys(codec):
    tree = codec.parse("ports:\n  80: http\n  443: https\n")
    assert resolver.resolve(tree, ".ports.443") == "https"


def test_null_is_a_value_not_a_miss(codec):
    tree = codec.parse("a:\n  b: null\n")
    assert resolver.resolve(tree, ".a.b") is None
    assert resolver.exists(tree, ".a.b")


@pytest.mark.parametrize("path", [
    ".metadata.missing",
    ".spec.template.spec.containers[5]",
    ".spec.template.spec.containers.name",
    ".metadata[0]",
    ".metadata.name.deeper",
])
def test_missing_paths_raise(deployment, path):
    with pytest.raises(PathNotFound):
        resolver.resolve(deployment, path)
    assert not resolver.exists(deployment, path)
