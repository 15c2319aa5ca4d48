from pathlib import Path
from typing import Any, Dict, List, Optional

from lxml import etree

from batch_pipeline.document import Document
from batch_pipeline.formats.base import ORIGINAL_MARKUPS
from batch_pipeline.registry import document_formats
from batch_pipeline.serialization import FULL_ROOT, parse_xml, read_full_layout


@document_formats.register("xml", suffixes=(".xml",))
class XMLFormat:
    """
    XML files.

    Documents saved in the full annotated layout are restored with their
    text, features and annotation sets. Any other XML keeps its character
    content as text and records each element in the Original markups set.
    """

    def load(self, path: str, encoding: Optional[str] = None) -> Document:
        root = parse_xml(Path(path).read_bytes(), encoding)
        features = {
            "source": path,
            "encoding": encoding or root.getroottree().docinfo.encoding,
            "mimeType": "text/xml",
        }
        if root.tag == FULL_ROOT:
            text, saved_features, annotation_sets = read_full_layout(root)
            document = Document(text=text, name=Path(path).name, features={**features, **saved_features})
            document.adopt_annotation_sets(annotation_sets)
            return document
        return self._load_markup(root, Path(path).name, features)

    def _load_markup(self, root: etree._Element, name: str, features: Dict[str, Any]) -> Document:
        parts: List[str] = []
        markups: List[Dict[str, Any]] = []
        length = 0

        def add_text(value: Optional[str]) -> None:
            nonlocal length
            if value:
                parts.append(value)
                length += len(value)

        def walk(element: etree._Element) -> None:
            entry = {
                "type": etree.QName(element).localname,
                "start": length,
                "features": {etree.QName(k).localname: v for k, v in element.attrib.items()},
            }
            markups.append(entry)
            add_text(element.text)
            for child in element:
                # comments and processing instructions have no string tag
                if isinstance(child.tag, str):
                    walk(child)
                add_text(child.tail)
            entry["end"] = length

        walk(root)

        document = Document(text="".join(parts), name=name, features=features)
        markup_set = document.annotations(ORIGINAL_MARKUPS)
        for entry in markups:
            markup_set.add(entry["start"], entry["end"], entry["type"], entry["features"])
        return document
