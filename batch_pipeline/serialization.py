"""
XML serialization of annotated documents.

Two layouts are written:

- The full layout keeps the text, the document features and every
  annotation set. Text is stored in ``TextWithNodes`` with a ``Node``
  element at every annotation boundary, so the document can be read back
  exactly with :func:`parse_document_xml`.
- The inline layout writes the text once, wrapping each selected
  annotation in an element named after its type, with the features as
  attributes.
"""

import codecs
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from lxml import etree

from batch_pipeline.types import Annotation, AnnotationSet

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1"
FULL_ROOT = "AnnotatedDocument"
INLINE_ROOT = "Document"

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")
# Characters XML 1.0 does not allow anywhere in a document
_ILLEGAL_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")
XML_REPLACEMENT_CHAR = " "

# Python codec names whose IANA spelling is not a simple upper-casing
_IANA_NAMES = {
    "ascii": "US-ASCII",
    "mac-roman": "macintosh",
    "shift_jis": "Shift_JIS",
    "euc_jp": "EUC-JP",
    "euc_kr": "EUC-KR",
    "big5": "Big5",
}
_ISO_8859 = re.compile(r"iso8859-(\d+)")
_WINDOWS_CP = re.compile(r"cp(125\d)")


# ============================================================================
# Helpers
# ============================================================================


def xml_name(value: str) -> str:
    """Turn an annotation type or feature name into a valid ASCII XML name."""
    name = _INVALID_NAME_CHARS.sub("_", value)
    if not name or not (name[0].isalpha() or name[0] == "_"):
        name = "_" + name
    return name


def xml_text(value: str) -> str:
    """
    Replace characters XML cannot carry, one for one.

    The result has the same length as ``value``, so annotation offsets
    into it stay valid.
    """
    return _ILLEGAL_XML_CHARS.sub(XML_REPLACEMENT_CHAR, value)


def xml_encoding(encoding: str) -> str:
    """
    Name a Python codec the way XML declarations and libxml2 expect.

    ``latin-1`` becomes ``ISO-8859-1``, ``cp1252`` becomes ``windows-1252``.

    Raises:
        LookupError: If Python does not know the encoding
    """
    name = codecs.lookup(encoding).name
    if name in _IANA_NAMES:
        return _IANA_NAMES[name]
    match = _ISO_8859.fullmatch(name)
    if match:
        return f"ISO-8859-{match.group(1)}"
    match = _WINDOWS_CP.fullmatch(name)
    if match:
        return f"windows-{match.group(1)}"
    return name.replace("_", "-").upper()


def parse_xml(data: Union[str, bytes], encoding: Optional[str] = None) -> etree._Element:
    """Parse XML from text or bytes; ``encoding`` overrides the declaration."""
    if isinstance(data, str):
        data = data.encode("utf-8")
        encoding = "utf-8"
    parser = etree.XMLParser(encoding=xml_encoding(encoding) if encoding else None)
    return etree.fromstring(data, parser)


def _with_declaration(root: etree._Element, encoding: str) -> str:
    body = etree.tostring(root, encoding="unicode")
    return f"<?xml version='1.0' encoding='{xml_encoding(encoding)}'?>\n{body}\n"


def _feature_type(value: Any) -> str:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    return "str"


def _encode_feature(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _decode_feature(type_name: Optional[str], raw: str) -> Any:
    if type_name == "bool":
        return raw == "true"
    if type_name == "int":
        return int(raw)
    if type_name == "float":
        return float(raw)
    return raw


def _append_features(parent: etree._Element, features: Dict[str, Any]) -> None:
    items = [(k, v) for k, v in features.items() if v is not None]
    if not items:
        return
    parent.text = "\n"
    for name, value in items:
        feature = etree.SubElement(
            parent, "Feature", name=xml_text(str(name)), type=_feature_type(value)
        )
        feature.text = xml_text(_encode_feature(value))
        feature.tail = "\n"


def _read_features(parent: Optional[etree._Element]) -> Dict[str, Any]:
    if parent is None:
        return {}
    return {
        el.get("name"): _decode_feature(el.get("type"), el.text or "")
        for el in parent.iterchildren("Feature")
    }


def _append_text(element: etree._Element, text: str) -> None:
    if not text:
        return
    if len(element):
        last = element[-1]
        last.tail = (last.tail or "") + xml_text(text)
    else:
        element.text = (element.text or "") + xml_text(text)


# ============================================================================
# Full layout
# ============================================================================


def document_to_xml(
    text: str,
    features: Dict[str, Any],
    annotation_sets: Sequence[AnnotationSet],
    encoding: str = "utf-8",
) -> str:
    """
    Serialize a whole document, every annotation set included.

    Args:
        text: Document text
        features: Document-level features
        annotation_sets: Sets to write, in output order
        encoding: Encoding named in the XML declaration

    Returns:
        The XML document as a string
    """
    root = etree.Element(FULL_ROOT, version=FORMAT_VERSION)
    root.text = "\n"

    doc_features = etree.SubElement(root, "DocumentFeatures")
    _append_features(doc_features, features)
    doc_features.tail = "\n"

    text_with_nodes = etree.SubElement(root, "TextWithNodes")
    offsets = {0, len(text)}
    for annotation_set in annotation_sets:
        for annotation in annotation_set:
            offsets.add(annotation.start)
            offsets.add(annotation.end)
    ordered = sorted(offsets)
    for i, offset in enumerate(ordered):
        node = etree.SubElement(text_with_nodes, "Node", id=str(offset))
        next_offset = ordered[i + 1] if i + 1 < len(ordered) else len(text)
        node.tail = xml_text(text[offset:next_offset]) or None
    text_with_nodes.tail = "\n"

    for annotation_set in annotation_sets:
        set_el = etree.SubElement(root, "AnnotationSet")
        if annotation_set.name is not None:
            set_el.set("name", xml_text(annotation_set.name))
        set_el.text = "\n"
        set_el.tail = "\n"
        for annotation in annotation_set:
            ann_el = etree.SubElement(
                set_el,
                "Annotation",
                id=str(annotation.id),
                type=xml_text(annotation.type),
                start=str(annotation.start),
                end=str(annotation.end),
            )
            _append_features(ann_el, annotation.features)
            ann_el.tail = "\n"

    return _with_declaration(root, encoding)


def parse_document_xml(
    data: Union[str, bytes], encoding: Optional[str] = None
) -> Tuple[str, Dict[str, Any], List[AnnotationSet]]:
    """
    Read a document written by :func:`document_to_xml`.

    Returns:
        Tuple of (text, document features, annotation sets). The sets are
        detached and keep the annotation ids found in the file.
    """
    root = parse_xml(data, encoding)
    if root.tag != FULL_ROOT:
        raise ValueError(f"Expected <{FULL_ROOT}> root element, found <{root.tag}>")
    return read_full_layout(root)


def read_full_layout(root: etree._Element) -> Tuple[str, Dict[str, Any], List[AnnotationSet]]:
    features = _read_features(root.find("DocumentFeatures"))

    text_with_nodes = root.find("TextWithNodes")
    if text_with_nodes is None:
        raise ValueError("Missing <TextWithNodes> element")
    parts = [text_with_nodes.text or ""]
    length = len(parts[0])
    for node in text_with_nodes.iterchildren("Node"):
        node_id = int(node.get("id"))
        if node_id != length:
            raise ValueError(f"Node {node_id} does not match text offset {length}")
        tail = node.tail or ""
        parts.append(tail)
        length += len(tail)
    text = "".join(parts)

    annotation_sets: List[AnnotationSet] = []
    for set_el in root.iterchildren("AnnotationSet"):
        annotations = []
        for ann_el in set_el.iterchildren("Annotation"):
            annotation = Annotation(
                id=int(ann_el.get("id")),
                type=ann_el.get("type"),
                start=int(ann_el.get("start")),
                end=int(ann_el.get("end")),
                features=_read_features(ann_el),
            )
            if annotation.end > len(text):
                raise ValueError(
                    f"Annotation {annotation.id} ends at {annotation.end}, "
                    f"beyond the text length {len(text)}"
                )
            annotations.append(annotation)
        annotation_sets.append(AnnotationSet(name=set_el.get("name"), annotations=annotations))

    return text, features, annotation_sets


# ============================================================================
# Inline layout
# ============================================================================


def annotations_to_inline_xml(
    text: str,
    annotations: Iterable[Annotation],
    encoding: str = "utf-8",
) -> str:
    """
    Serialize the text with the given annotations as inline elements.

    Annotations are nested by offset. One that starts inside an open
    annotation but ends after it cannot be nested and is left out.
    """
    root = etree.Element(INLINE_ROOT)
    # (element, end offset) for every open element, root at the bottom
    stack: List[Tuple[etree._Element, int]] = [(root, len(text))]
    cursor = 0

    def close_top() -> None:
        nonlocal cursor
        element, end = stack.pop()
        _append_text(element, text[cursor:end])
        cursor = end

    for annotation in sorted(annotations, key=lambda a: (a.start, -a.end, a.id)):
        while len(stack) > 1 and stack[-1][1] <= annotation.start:
            close_top()
        if annotation.end > stack[-1][1]:
            logger.warning(
                f"Skipping {annotation.type} annotation {annotation.id} "
                f"({annotation.start}-{annotation.end}): crosses an enclosing annotation"
            )
            continue

        parent = stack[-1][0]
        _append_text(parent, text[cursor:annotation.start])
        cursor = annotation.start

        element = etree.SubElement(parent, xml_name(annotation.type))
        for name, value in annotation.features.items():
            if value is not None:
                element.set(xml_name(str(name)), xml_text(str(value)))
        element.set("annotationId", str(annotation.id))
        stack.append((element, annotation.end))

    while len(stack) > 1:
        close_top()
    _append_text(root, text[cursor:])

    return _with_declaration(root, encoding)
