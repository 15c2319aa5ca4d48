from typing import Optional, Protocol

from batch_pipeline.document import Document

ORIGINAL_MARKUPS = "Original markups"


class DocumentFormat(Protocol):
    """Loads one document from a path."""

    def load(self, path: str, encoding: Optional[str] = None) -> Document:
        ...
