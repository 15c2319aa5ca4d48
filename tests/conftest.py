"""Shared fixtures for batch pipeline tests."""

import os
import tempfile
from pathlib import Path
from typing import Iterator

import pytest
import spacy

from batch_pipeline import engine
from batch_pipeline.document import Document


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------


SAMPLE_TEXT = (
    "Barack Obama was born in Honolulu, Hawaii. "
    "He studied at Columbia University."
)


@pytest.fixture
def sample_text() -> str:
    """Sample text with people, places and an organisation."""
    return SAMPLE_TEXT


@pytest.fixture
def sample_nlp() -> spacy.language.Language:
    """
    Blank English pipeline with rule-based components.

    Entities (Person, Location) land in doc.ents; the Organization pattern
    lands in the "ruler" span group.
    """
    nlp = spacy.blank("en")
    nlp.add_pipe("sentencizer")
    entity_ruler = nlp.add_pipe("entity_ruler")
    entity_ruler.add_patterns(
        [
            {"label": "Person", "pattern": "Barack Obama"},
            {"label": "Location", "pattern": "Honolulu"},
            {"label": "Location", "pattern": "Hawaii"},
        ]
    )
    span_ruler = nlp.add_pipe("span_ruler")
    span_ruler.add_patterns([{"label": "Organization", "pattern": "Columbia University"}])
    return nlp


@pytest.fixture
def annotated_document(sample_nlp, sample_text: str) -> Document:
    """Document carrying the annotations of one sample_nlp run."""
    document = Document(text=sample_text, name="sample.txt", features={"source": "sample.txt"})
    document.add_spacy_annotations(sample_nlp(sample_text))
    return document


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def initialised_engine() -> None:
    """Make sure the engine has been started."""
    engine.init()


# ---------------------------------------------------------------------------
# Temporary file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Temporary working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def saved_pipeline(sample_nlp, temp_dir: Path) -> str:
    """sample_nlp written to disk with nlp.to_disk()."""
    path = temp_dir / "pipeline"
    sample_nlp.to_disk(path)
    return str(path)


@pytest.fixture
def pipeline_cfg(temp_dir: Path) -> str:
    """spaCy config file for a sentencizer plus the regex entity component."""
    path = temp_dir / "pipeline.cfg"
    path.write_text(
        "[nlp]\n"
        'lang = "en"\n'
        'pipeline = ["sentencizer","batch_pipeline_simple"]\n'
        "\n"
        "[components]\n"
        "\n"
        "[components.sentencizer]\n"
        'factory = "sentencizer"\n'
        "\n"
        "[components.batch_pipeline_simple]\n"
        'factory = "batch_pipeline_simple"\n'
        "min_len = 3\n"
        'label = "Mention"\n',
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture
def temp_text_file(sample_text: str, temp_dir: Path) -> str:
    """Sample text written to doc1.txt."""
    path = temp_dir / "doc1.txt"
    path.write_text(sample_text, encoding="utf-8")
    return str(path)


@pytest.fixture
def second_text_file(temp_dir: Path) -> str:
    """A second input with different content."""
    path = temp_dir / "doc2.txt"
    path.write_text("Hawaii is far from Columbia University.", encoding="utf-8")
    return str(path)


@pytest.fixture
def missing_file(temp_dir: Path) -> str:
    path = temp_dir / "missing.txt"
    assert not os.path.exists(path)
    return str(path)
