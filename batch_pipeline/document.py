"""
Annotated documents.

A Document holds the text of one input file and the annotation sets that
pipeline execution attaches to it: the default (unnamed) set plus any
number of named sets.
"""

import logging
from itertools import count
from typing import Any, Dict, Iterable, Iterator, List, Optional

from spacy.tokens import Doc, Token

from batch_pipeline.serialization import annotations_to_inline_xml, document_to_xml
from batch_pipeline.types import Annotation, AnnotationSet

logger = logging.getLogger(__name__)


def token_features(token: Token) -> Dict[str, Any]:
    """Features recorded on Token annotations."""
    text = token.text
    if token.like_num:
        kind = "number"
    elif token.is_punct:
        kind = "punctuation"
    elif token.is_alpha:
        kind = "word"
    else:
        kind = "symbol"

    if text.isupper():
        orth = "allCaps"
    elif text.islower():
        orth = "lowercase"
    elif text[:1].isupper() and text[1:].islower():
        orth = "upperInitial"
    else:
        orth = "mixedCaps"

    features: Dict[str, Any] = {
        "string": text,
        "length": len(text),
        "kind": kind,
        "orth": orth,
    }
    # only what the pipeline actually predicted
    if token.tag_:
        features["category"] = token.tag_
    if token.pos_:
        features["pos"] = token.pos_
    if token.lemma_:
        features["lemma"] = token.lemma_
    return features


class Document:
    """Text plus annotation sets, released explicitly when no longer needed."""

    def __init__(
        self,
        text: str,
        name: Optional[str] = None,
        features: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.name = name
        self.features: Dict[str, Any] = dict(features or {})
        self._text = text
        self._ids = count(1)
        self._sets: Dict[Optional[str], AnnotationSet] = {}
        self._released = False

    @property
    def text(self) -> str:
        self._check_live()
        return self._text

    @property
    def released(self) -> bool:
        return self._released

    def _check_live(self) -> None:
        if self._released:
            raise RuntimeError(f"Document {self.name!r} has been released.")

    def _next_id(self) -> int:
        return next(self._ids)

    def annotations(self, name: Optional[str] = None) -> AnnotationSet:
        """The default set (``name=None``) or a named set, created on demand."""
        self._check_live()
        if name not in self._sets:
            self._sets[name] = AnnotationSet(name=name, id_source=self._next_id)
        return self._sets[name]

    def annotation_set_names(self) -> List[str]:
        self._check_live()
        return sorted(name for name in self._sets if name is not None)

    def annotation_sets(self) -> Iterator[AnnotationSet]:
        """Default set first, then named sets in name order."""
        yield self.annotations()
        for name in self.annotation_set_names():
            yield self._sets[name]

    def adopt_annotation_sets(self, annotation_sets: Iterable[AnnotationSet]) -> None:
        """Take over sets read from a file, keeping their annotation ids."""
        self._check_live()
        highest = 0
        for loaded in annotation_sets:
            target = self.annotations(loaded.name)
            for annotation in loaded:
                target.add_annotation(annotation)
                highest = max(highest, annotation.id)
        self._ids = count(highest + 1)

    def add_spacy_annotations(self, spacy_doc: Doc) -> None:
        """
        Merge the output of a spaCy pipeline run into the annotation sets.

        Tokens, sentences and entities go into the default set. Every span
        group becomes a named set of the same name.
        """
        self._check_live()
        if spacy_doc.text != self._text:
            raise ValueError(f"spaCy Doc text does not match document {self.name!r}")

        default = self.annotations()
        for token in spacy_doc:
            annotation_type = "SpaceToken" if token.is_space else "Token"
            default.add(token.idx, token.idx + len(token.text), annotation_type, token_features(token))

        if spacy_doc.has_annotation("SENT_START"):
            for sent in spacy_doc.sents:
                default.add(sent.start_char, sent.end_char, "Sentence")

        for ent in spacy_doc.ents:
            default.add(ent.start_char, ent.end_char, ent.label_)

        for key, group in spacy_doc.spans.items():
            named = self.annotations(key)
            for span in group:
                named.add(span.start_char, span.end_char, span.label_ or key)

        logger.debug(
            f"Document {self.name}: {len(spacy_doc)} tokens, {len(spacy_doc.ents)} entities, "
            f"{len(spacy_doc.spans)} span groups"
        )

    def to_xml(
        self,
        annotations: Optional[Iterable[Annotation]] = None,
        encoding: str = "utf-8",
    ) -> str:
        """
        Serialize the document.

        Args:
            annotations: When given, write the text with just these
                annotations as inline tags. Otherwise write the full
                document with every annotation set.
            encoding: Encoding named in the XML declaration

        Returns:
            XML string
        """
        self._check_live()
        if annotations is not None:
            return annotations_to_inline_xml(self._text, annotations, encoding=encoding)
        return document_to_xml(
            self._text,
            self.features,
            list(self.annotation_sets()),
            encoding=encoding,
        )

    def release(self) -> None:
        """Drop the text and annotations; the document is unusable afterwards."""
        if self._released:
            return
        self._sets.clear()
        self._text = ""
        self._released = True
        logger.debug(f"Released document {self.name}")

    def __repr__(self) -> str:
        state = "released" if self._released else f"{len(self._text)} chars"
        return f"Document(name={self.name!r}, {state})"
