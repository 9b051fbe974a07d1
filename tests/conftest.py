"""Shared test fixtures for the docbundle test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from docbundle.bundle import Bundle
from docbundle.document import Document
from doc_helpers import FakeSource, make_doc


@pytest.fixture
def rc_doc() -> Document:
    """A ReplicationController with a small spec."""
    return make_doc(
        "ReplicationController",
        "test-rc",
        namespace="test",
        labels={"app": "web", "tier": "frontend"},
        annotations={"owner": "team-a"},
        data={
            "apiVersion": "v1",
            "kind": "ReplicationController",
            "metadata": {"name": "test-rc", "namespace": "test"},
            "spec": {
                "replicas": 3,
                "template": {
                    "spec": {
                        "containers": [
                            {"name": "nginx", "image": "nginx:1.25", "ports": [{"containerPort": 80}]},
                            {"name": "sidecar", "image": "busybox"},
                        ]
                    }
                },
            },
        },
    )


@pytest.fixture
def ns_doc() -> Document:
    """A cluster-scoped Namespace."""
    return make_doc(
        "Namespace",
        "test",
        labels={"app": "web"},
        data={"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "test"}},
    )


@pytest.fixture
def deploy_doc() -> Document:
    """An apps/v1 Deployment."""
    return make_doc(
        "Deployment",
        "web",
        group="apps",
        namespace="test",
        labels={"app": "web", "tier": "backend"},
        data={
            "apiVersion": "apps/v1",
            "kind": "Deployment",
            "metadata": {"name": "web", "namespace": "test"},
            "spec": {"selector": {"matchLabels": {"app": "web"}}, "template": {"spec": {}}},
        },
    )


@pytest.fixture
def bundle(rc_doc: Document, ns_doc: Document, deploy_doc: Document) -> Bundle:
    """Bundle of ReplicationController, Namespace and Deployment, in that order."""
    return Bundle([rc_doc, ns_doc, deploy_doc])


@pytest.fixture
def fake_source(rc_doc: Document, ns_doc: Document) -> FakeSource:
    """An in-memory source yielding the ReplicationController and the Namespace."""
    return FakeSource([rc_doc, ns_doc])


@pytest.fixture
def scheme_yaml(tmp_path: Path) -> Path:
    """Write a sample scheme YAML file and return its path."""
    content = """
kinds:
  - kind: Namespace
    version: v1
    namespaced: false
  - kind: ReplicationController
    version: v1
    required:
      - spec.replicas
      - spec.template.spec.containers[0].image
  - group: apps
    version: v1
    kind: Deployment
    required: [spec.selector, spec.template]
"""
    path = tmp_path / "scheme.yaml"
    path.write_text(content)
    return path
