"""Unit tests for SimpleNERComponent (spaCy-based)."""

import pytest
import spacy
from spacy.tokens import Span

from batch_pipeline import spacy_components  # noqa: F401  Register factories


class TestSimpleNERComponent:
    """Tests for SimpleNERComponent class."""

    @pytest.fixture
    def nlp(self) -> spacy.language.Language:
        nlp = spacy.blank("en")
        nlp.add_pipe("batch_pipeline_simple", config={"min_len": 3})
        return nlp

    def test_extract_capitalized_words(self, nlp):
        doc = nlp("Barack Obama is the president.")
        assert "Barack Obama" in [ent.text for ent in doc.ents]

    def test_default_label(self, nlp):
        doc = nlp("Barack Obama visited London.")
        assert doc.ents
        assert all(ent.label_ == "Mention" for ent in doc.ents)

    def test_custom_label(self):
        nlp = spacy.blank("en")
        nlp.add_pipe("batch_pipeline_simple", config={"label": "Name"})
        doc = nlp("Ada Lovelace wrote notes.")
        assert [(ent.text, ent.label_) for ent in doc.ents] == [("Ada Lovelace", "Name")]

    def test_min_length_filter(self):
        nlp = spacy.blank("en")
        nlp.add_pipe("batch_pipeline_simple", config={"min_len": 5})
        doc = nlp("Al is here. Barack is too.")
        texts = [ent.text for ent in doc.ents]
        assert "Al" not in texts
        assert "Barack" in texts

    def test_returns_span_objects(self, nlp):
        doc = nlp("Obama spoke.")
        assert len(doc.ents) > 0
        assert all(isinstance(ent, Span) for ent in doc.ents)

    def test_offsets_are_correct(self, nlp):
        text = "the Barack Obama there."
        doc = nlp(text)
        ent = [ent for ent in doc.ents if ent.text == "Barack Obama"][0]
        assert text[ent.start_char:ent.end_char] == "Barack Obama"

    def test_no_entities_in_lowercase_text(self, nlp):
        doc = nlp("this is all lowercase text without any entities.")
        assert len(doc.ents) == 0

    def test_empty_text(self, nlp):
        assert len(nlp("").ents) == 0

    def test_keeps_existing_entities(self):
        nlp = spacy.blank("en")
        ruler = nlp.add_pipe("entity_ruler")
        ruler.add_patterns([{"label": "Person", "pattern": "Barack Obama"}])
        nlp.add_pipe("batch_pipeline_simple")
        doc = nlp("Barack Obama visited London.")
        labels = {ent.text: ent.label_ for ent in doc.ents}
        assert labels["Barack Obama"] == "Person"
        assert labels["London"] == "Mention"
