"""Google Docs boundary."""

from docfeedback.boundary.google.docs_source import GoogleDocsSource

__all__ = ["GoogleDocsSource"]
