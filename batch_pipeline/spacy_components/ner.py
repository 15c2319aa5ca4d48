"""
Rule-based entity component.

Factory ``batch_pipeline_simple`` marks capitalised word sequences as
entities. It needs no trained model, which makes it usable in saved
pipelines built from ``spacy.blank``.
"""

import logging
import re

from spacy.language import Language
from spacy.tokens import Doc, Span
from spacy.util import filter_spans

logger = logging.getLogger(__name__)


@Language.factory(
    "batch_pipeline_simple",
    default_config={
        "min_len": 3,
        "label": "Mention",
    },
)
def create_simple_ner_component(
    nlp: Language,
    name: str,
    min_len: int,
    label: str,
):
    """Factory for the regex entity component."""
    return SimpleNERComponent(nlp=nlp, min_len=min_len, label=label)


class SimpleNERComponent:
    """
    Regex-based entity component for spaCy.

    Capitalised word sequences of at least ``min_len`` characters become
    entities with the configured label. Entities already on the Doc are
    kept; overlaps resolve to the longest span.
    """

    def __init__(
        self,
        nlp: Language,
        min_len: int = 3,
        label: str = "Mention",
    ):
        self.nlp = nlp
        self.pattern = re.compile(
            r"\b([A-Z][a-zA-Z0-9_-]+(?:\s+[A-Z][a-zA-Z0-9_-]+)*)\b"
        )
        self.min_len = min_len
        self.label = label

    def __call__(self, doc: Doc) -> Doc:
        spans = []
        for match in self.pattern.finditer(doc.text):
            if len(match.group(1)) < self.min_len:
                continue
            span = doc.char_span(match.start(1), match.end(1), alignment_mode="expand")
            if span is None:
                continue
            spans.append(Span(doc, span.start, span.end, label=self.label))

        doc.ents = filter_spans(list(doc.ents) + spans)
        logger.debug(f"Marked {len(spans)} {self.label} spans")
        return doc
