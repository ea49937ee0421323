"""Unit tests for Google Docs URL parsing."""

import pytest

from docfeedback.core.document_feedback.url_parser import (
    document_edit_url,
    extract_document_id,
    require_document_id,
)
from docfeedback.core.exceptions import InvalidDocumentUrlError, ValidationError


class TestExtractDocumentId:
    """Test suite for extract_document_id."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://docs.google.com/document/d/1AbC-dEf_123/edit",
            "https://docs.google.com/document/d/1AbC-dEf_123/edit?usp=sharing",
            "https://drive.google.com/file/d/1AbC-dEf_123/view",
            "https://docs.google.com/open?id=1AbC-dEf_123",
            "1AbC-dEf_123",
            "  1AbC-dEf_123  ",
        ],
    )
    def test_accepted_shapes(self, url: str) -> None:
        assert extract_document_id(url) == "1AbC-dEf_123"

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "   ",
            "https://example.com/some/page",
            "not a url at all",
        ],
    )
    def test_rejected_inputs(self, url: str) -> None:
        assert extract_document_id(url) is None


class TestRequireDocumentId:
    """Test suite for require_document_id."""

    def test_raises_validation_error(self) -> None:
        with pytest.raises(InvalidDocumentUrlError) as exc_info:
            require_document_id("https://example.com/page")

        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.message == "Invalid Google Docs URL"
        assert exc_info.value.details["field"] == "documentUrl"

    def test_edit_url(self) -> None:
        assert document_edit_url("abc") == "https://docs.google.com/document/d/abc/edit"
