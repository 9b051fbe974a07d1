"""Tests for the docbundle error hierarchy."""

from __future__ import annotations

import pytest

from docbundle.errors import (
    ConfigError,
    ConfigNotFoundError,
    DocIndexOutOfRangeError,
    DocNotFoundError,
    DocumentDataKeyNotFoundError,
    DocumentError,
    DocumentMalformedError,
    ErrorCodes,
    InvalidInputError,
    MultiDocsFoundError,
)
from docbundle.selector import Selector


class TestDocumentError:
    def test_base_fields(self) -> None:
        cause = ValueError("boom")
        err = DocumentError(code="X", message="something", details={"k": 1}, cause=cause)
        assert err.code == "X"
        assert err.message == "something"
        assert err.details == {"k": 1}
        assert err.cause is cause
        assert str(err) == "[X] something"

    def test_details_default_to_empty(self) -> None:
        assert DocumentError(code="X", message="m").details == {}


class TestTaxonomy:
    def test_not_found(self) -> None:
        sel = Selector(kind="Pod")
        err = DocNotFoundError(selector=sel)
        assert err.code == ErrorCodes.DOC_NOT_FOUND
        assert err.selector is sel
        assert err.message == "document filtered by selector {kind=Pod} found no documents"

    def test_multi(self) -> None:
        sel = Selector(kind="Pod")
        err = MultiDocsFoundError(selector=sel)
        assert err.code == ErrorCodes.MULTI_DOCS_FOUND
        assert err.message == "document filtered by selector {kind=Pod} found more than one document"

    def test_index_out_of_range(self) -> None:
        err = DocIndexOutOfRangeError(selector=Selector(kind="Pod"), index=3, count=2)
        assert err.code == ErrorCodes.DOC_INDEX_OUT_OF_RANGE
        assert (err.index, err.count) == (3, 2)
        assert "index 3 (2 matched)" in err.message

    def test_data_key_not_found(self) -> None:
        err = DocumentDataKeyNotFoundError(doc_name="web", key="spec.replicas")
        assert err.code == ErrorCodes.DOCUMENT_DATA_KEY_NOT_FOUND
        assert (err.doc_name, err.key) == ("web", "spec.replicas")
        assert err.message == 'document "web" cannot retrieve data key "spec.replicas"'

    def test_malformed(self) -> None:
        err = DocumentMalformedError(doc_name="web", reason="kind is required")
        assert err.code == ErrorCodes.DOCUMENT_MALFORMED
        assert err.message == 'document "web" is malformed: "kind is required"'

    def test_config_errors(self) -> None:
        assert ConfigError(message="bad").code == ErrorCodes.CONFIG_INVALID
        err = ConfigNotFoundError(config_path="/x.yaml")
        assert err.code == ErrorCodes.CONFIG_NOT_FOUND
        assert err.details == {"config_path": "/x.yaml"}

    def test_invalid_input_default_message(self) -> None:
        assert InvalidInputError().message == "Invalid input"

    @pytest.mark.parametrize(
        "err",
        [
            DocNotFoundError(selector=Selector()),
            MultiDocsFoundError(selector=Selector()),
            DocIndexOutOfRangeError(selector=Selector(), index=0, count=0),
            DocumentDataKeyNotFoundError(doc_name="d", key="k"),
            DocumentMalformedError(doc_name="d", reason="r"),
            InvalidInputError(),
            ConfigError(message="m"),
            ConfigNotFoundError(config_path="p"),
        ],
    )
    def test_all_derive_from_document_error(self, err: DocumentError) -> None:
        assert isinstance(err, DocumentError)

    def test_index_error_is_not_not_found(self) -> None:
        assert not issubclass(DocIndexOutOfRangeError, DocNotFoundError)


class TestErrorCodes:
    def test_immutable(self) -> None:
        with pytest.raises(AttributeError):
            ErrorCodes().DOC_NOT_FOUND = "x"
