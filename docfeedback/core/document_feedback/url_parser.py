"""
Google Docs URL parsing.

Accepts the URL shapes students paste from the browser (edit links, short
/d/ links, open?id= links) or a bare document id.
"""

import re

from docfeedback.core.exceptions import InvalidDocumentUrlError

_DOCUMENT_ID_PATTERNS = (
    re.compile(r"/document/d/([a-zA-Z0-9_-]+)"),
    re.compile(r"/d/([a-zA-Z0-9_-]+)"),
    re.compile(r"docs\.google\.com/.*[?&]id=([a-zA-Z0-9_-]+)"),
    re.compile(r"^([a-zA-Z0-9_-]+)$"),
)


def extract_document_id(url: str) -> str | None:
    """
    Extract the document id from a Google Docs URL or bare id.

    Args:
        url: Document URL or id

    Returns:
        str | None: Document id, or None when nothing matches
    """
    candidate = url.strip()
    if not candidate:
        return None
    for pattern in _DOCUMENT_ID_PATTERNS:
        match = pattern.search(candidate)
        if match:
            return match.group(1)
    return None


def require_document_id(url: str) -> str:
    """
    Extract the document id or raise.

    Raises:
        InvalidDocumentUrlError: URL does not identify a document
    """
    document_id = extract_document_id(url)
    if document_id is None:
        raise InvalidDocumentUrlError(url)
    return document_id


def document_edit_url(document_id: str) -> str:
    return f"https://docs.google.com/document/d/{document_id}/edit"
