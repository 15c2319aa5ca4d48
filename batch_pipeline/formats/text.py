from pathlib import Path
from typing import Optional

from batch_pipeline.config import default_encoding
from batch_pipeline.document import Document
from batch_pipeline.registry import document_formats


@document_formats.register("text", suffixes=(".txt",))
class TextFormat:
    """Plain text files."""

    def load(self, path: str, encoding: Optional[str] = None) -> Document:
        encoding = encoding or default_encoding()
        text = Path(path).read_text(encoding=encoding)
        return Document(
            text=text,
            name=Path(path).name,
            features={"source": path, "encoding": encoding, "mimeType": "text/plain"},
        )
