from pathlib import Path
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import CData, NavigableString, PreformattedString, Tag

from batch_pipeline.config import default_encoding
from batch_pipeline.document import Document
from batch_pipeline.formats.base import ORIGINAL_MARKUPS
from batch_pipeline.registry import document_formats

SKIPPED_TAGS = ("script", "style")


def _attributes(tag: Tag) -> Dict[str, Any]:
    # multi-valued attributes such as class come back as lists
    return {
        name: " ".join(value) if isinstance(value, list) else value
        for name, value in tag.attrs.items()
    }


@document_formats.register("html", suffixes=(".html", ".htm"))
class HTMLFormat:
    """Parses HTML; keeps the visible text and records tags as markup annotations."""

    def load(self, path: str, encoding: Optional[str] = None) -> Document:
        encoding = encoding or default_encoding()
        html = Path(path).read_text(encoding=encoding)
        soup = BeautifulSoup(html, "lxml")

        parts: List[str] = []
        markups: List[Dict[str, Any]] = []
        length = 0

        def walk(tag: Tag) -> None:
            nonlocal length
            for child in tag.children:
                if isinstance(child, Tag):
                    if child.name in SKIPPED_TAGS:
                        continue
                    entry = {"type": child.name, "start": length, "features": _attributes(child)}
                    markups.append(entry)
                    walk(child)
                    entry["end"] = length
                elif isinstance(child, NavigableString):
                    # comments, doctypes and processing instructions are not text
                    if isinstance(child, PreformattedString) and not isinstance(child, CData):
                        continue
                    parts.append(str(child))
                    length += len(child)

        walk(soup)

        document = Document(
            text="".join(parts),
            name=Path(path).name,
            features={"source": path, "encoding": encoding, "mimeType": "text/html"},
        )
        markup_set = document.annotations(ORIGINAL_MARKUPS)
        for entry in markups:
            markup_set.add(entry["start"], entry["end"], entry["type"], entry["features"])
        return document
