"""Tests for Validator."""

from __future__ import annotations

from pathlib import Path

import pytest

from docbundle.config import Config
from docbundle.document import Document
from docbundle.errors import ConfigNotFoundError, DocumentMalformedError, ErrorCodes
from docbundle.scheme import KindSpec, Scheme, default_scheme
from docbundle.validator import ValidationResult, Validator
from doc_helpers import make_doc


@pytest.fixture
def validator() -> Validator:
    return Validator(scheme=default_scheme())


# === validate() ===


class TestValidate:
    def test_valid_documents(self, validator: Validator, rc_doc: Document, ns_doc: Document, deploy_doc: Document) -> None:
        for doc in (rc_doc, ns_doc, deploy_doc):
            validator.validate(doc)

    def test_missing_kind(self, validator: Validator) -> None:
        with pytest.raises(DocumentMalformedError) as exc_info:
            validator.validate(make_doc("", "nameless-kind"))
        err = exc_info.value
        assert err.doc_name == "nameless-kind"
        assert err.reason == "kind is required"
        assert err.code == ErrorCodes.DOCUMENT_MALFORMED
        assert str(err) == '[DOCUMENT_MALFORMED] document "nameless-kind" is malformed: "kind is required"'

    def test_missing_name(self, validator: Validator) -> None:
        with pytest.raises(DocumentMalformedError, match="metadata.name is required"):
            validator.validate(make_doc("ConfigMap", ""))

    def test_placeholder_may_omit_name(self, validator: Validator) -> None:
        doc = make_doc("ConfigMap", "", annotations={"docbundle.io/placeholder": "true"})
        validator.validate(doc)

    def test_custom_placeholder_check(self) -> None:
        v = Validator(placeholder_check=lambda d: d.kind == "Template")
        v.validate(make_doc("Template", ""))
        with pytest.raises(DocumentMalformedError):
            v.validate(make_doc("ConfigMap", ""))

    def test_require_name_disabled(self) -> None:
        Validator(require_name=False).validate(make_doc("ConfigMap", ""))

    def test_missing_required_key(self, validator: Validator) -> None:
        doc = make_doc("Deployment", "web", group="apps", data={"spec": {"selector": {}}})
        with pytest.raises(DocumentMalformedError) as exc_info:
            validator.validate(doc)
        assert exc_info.value.reason == "required key 'spec.template' is missing for kind Deployment"

    def test_cluster_scoped_kind_with_namespace(self, validator: Validator) -> None:
        doc = make_doc("Namespace", "test", namespace="default")
        with pytest.raises(DocumentMalformedError, match="cluster-scoped"):
            validator.validate(doc)

    def test_unknown_kind_only_checks_identity(self, validator: Validator) -> None:
        validator.validate(make_doc("Widget", "w", group="example.com", data={}))

    def test_unrepresentable_data(self, validator: Validator) -> None:
        doc = make_doc("Widget", "w", data={"spec": {"when": object()}})
        with pytest.raises(DocumentMalformedError, match="spec.when"):
            validator.validate(doc)

    def test_idempotent(self, validator: Validator) -> None:
        doc = make_doc("Deployment", "web", group="apps", data={})
        first = validator.check(doc)
        second = validator.check(doc)
        assert first == second
        for _ in range(2):
            with pytest.raises(DocumentMalformedError) as exc_info:
                validator.validate(doc)
            assert exc_info.value.reason == "required key 'spec.selector' is missing for kind Deployment"

    def test_does_not_mutate(self, validator: Validator, rc_doc: Document) -> None:
        before = rc_doc.data
        validator.validate(rc_doc)
        assert rc_doc.data == before


# === check() ===


class TestCheck:
    def test_collects_every_violation(self, validator: Validator) -> None:
        doc = make_doc("Deployment", "", group="apps", namespace="x", data={})
        result = validator.check(doc)
        assert not result.valid
        assert result.errors == [
            "metadata.name is required",
            "required key 'spec.selector' is missing for kind Deployment",
            "required key 'spec.template' is missing for kind Deployment",
        ]

    def test_valid_result(self, validator: Validator, rc_doc: Document) -> None:
        result = validator.check(rc_doc)
        assert result.valid
        assert result.errors == []

    def test_valid_result_to_error_raises(self) -> None:
        with pytest.raises(ValueError):
            ValidationResult(doc_name="x").to_error()


# === validate_all() ===


class TestValidateAll:
    def test_fail_fast(self, validator: Validator, rc_doc: Document) -> None:
        docs = [rc_doc, make_doc("", "first-bad"), make_doc("", "second-bad")]
        with pytest.raises(DocumentMalformedError, match="first-bad"):
            validator.validate_all(docs)

    def test_collect(self, validator: Validator, rc_doc: Document) -> None:
        docs = [rc_doc, make_doc("", "first-bad"), make_doc("", "second-bad")]
        errors = validator.validate_all(docs, fail_fast=False)
        assert [e.doc_name for e in errors] == ["first-bad", "second-bad"]

    def test_all_valid(self, validator: Validator, rc_doc: Document, ns_doc: Document) -> None:
        assert validator.validate_all([rc_doc, ns_doc]) == []


# === from_config() ===


class TestFromConfig:
    def test_defaults(self) -> None:
        v = Validator.from_config(Config())
        assert v.scheme.count == 0
        with pytest.raises(DocumentMalformedError):
            v.validate(make_doc("ConfigMap", ""))

    def test_scheme_file_and_options(self, scheme_yaml: Path) -> None:
        config = Config(
            {
                "validation": {
                    "scheme_file": str(scheme_yaml),
                    "placeholder_annotation": "example.com/template",
                }
            }
        )
        v = Validator.from_config(config)
        assert v.scheme.has("", "v1", "ReplicationController")
        v.validate(make_doc("ConfigMap", "", annotations={"example.com/template": "TRUE"}))
        with pytest.raises(DocumentMalformedError, match=r"spec.template.spec.containers\[0\].image"):
            v.validate(make_doc("ReplicationController", "rc", data={"spec": {"replicas": 1}}))

    def test_require_name_false(self) -> None:
        v = Validator.from_config(Config({"validation": {"require_name": False}}))
        v.validate(make_doc("ConfigMap", ""))

    def test_explicit_scheme_wins(self, tmp_path: Path) -> None:
        scheme = Scheme([KindSpec(group="", version="v1", kind="ConfigMap", required_keys=("data",))])
        config = Config({"validation": {"scheme_file": str(tmp_path / "missing.yaml")}})
        v = Validator.from_config(config, scheme=scheme)
        assert v.scheme is scheme

    def test_missing_scheme_file(self, tmp_path: Path) -> None:
        config = Config({"validation": {"scheme_file": str(tmp_path / "missing.yaml")}})
        with pytest.raises(ConfigNotFoundError):
            Validator.from_config(config)
