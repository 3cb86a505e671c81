import pytest

from yamlzoom.core.config import ZoomConfig
from yamlzoom.core.engine import ZoomEngine
from yamlzoom.field.document import YamlDocument
from yamlzoom.host.memory import MemoryHost

# A realistic manifest shared by resolver, inference and writer tests
DEPLOYMENT_YAML = (
    "apiVersion: apps/v1\n"
    "kind: Deployment\n"
    "metadata:\n"
    "  name: web\n"
    "spec:\n"
    "  replicas: 3\n"
    "  template:\n"
    "    spec:\n"
    "      containers:\n"
    "        - name: app\n"
    "          image: nginx:1.25\n"
    "          command: |\n"
    "            #!/bin/bash\n"
    "            echo starting\n"
    "          env:\n"
    "            - name: MODE\n"
    "              value: \"production\"\n"
    "          ports: [80, 443]\n"
)


@pytest.fixture
def codec():
    return YamlDocument()


@pytest.fixture
def deployment(codec):
    return codec.parse(DEPLOYMENT_YAML)


@pytest.fixture
def host():
    return MemoryHost()


@pytest.fixture
def engine(host):
    return ZoomEngine(host, ZoomConfig())
