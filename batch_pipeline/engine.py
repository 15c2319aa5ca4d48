"""
Engine entry points.

Startup, pipeline loading, document creation and release. ``init()`` must
be called once, before any other function here.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import spacy
from spacy.language import Language

from batch_pipeline.corpus import Corpus
from batch_pipeline.document import Document
from batch_pipeline.registry import document_formats

if TYPE_CHECKING:
    from batch_pipeline.formats import DocumentFormat

logger = logging.getLogger(__name__)

_initialised = False


class EngineNotInitialisedError(RuntimeError):
    """An engine call was made before init()."""


def init() -> None:
    """Register the package's spaCy factories and document formats."""
    global _initialised
    if _initialised:
        logger.debug("Engine already initialised")
        return

    # Importing these modules registers their factories
    from batch_pipeline import formats  # noqa: F401
    from batch_pipeline import spacy_components  # noqa: F401

    _initialised = True
    logger.info(
        f"Engine initialised with spaCy {spacy.__version__}, "
        f"document formats: {sorted(document_formats.available())}"
    )


def is_initialised() -> bool:
    return _initialised


def _require_initialised() -> None:
    if not _initialised:
        raise EngineNotInitialisedError("Engine not initialised; call init() first.")


class CorpusController:
    """Runs a spaCy pipeline over every document of a corpus."""

    def __init__(self, nlp: Language) -> None:
        self.nlp = nlp
        self.corpus: Optional[Corpus] = None

    def set_corpus(self, corpus: Corpus) -> None:
        self.corpus = corpus

    def execute(self) -> None:
        if self.corpus is None:
            raise RuntimeError("No corpus set on controller.")
        for document in self.corpus:
            logger.debug(f"Running {self.nlp.pipe_names} over {document.name}")
            document.add_spacy_annotations(self.nlp(document.text))


def load_pipeline(path: str) -> CorpusController:
    """
    Load a saved pipeline definition.

    Args:
        path: Directory written by ``Language.to_disk`` or a spaCy ``.cfg``
            config file

    Returns:
        Controller wrapping the loaded pipeline
    """
    _require_initialised()
    pipeline_path = Path(path)
    if not pipeline_path.exists():
        raise FileNotFoundError(f"Pipeline definition not found: {path}")

    logger.info(f"Loading pipeline from {path}")
    if pipeline_path.is_dir():
        nlp = spacy.load(pipeline_path)
    else:
        config = spacy.util.load_config(pipeline_path)
        nlp = spacy.util.load_model_from_config(config, auto_fill=True)
        nlp.initialize()
    logger.info(f"Loaded pipeline '{nlp.lang}' with components: {nlp.pipe_names}")
    return CorpusController(nlp)


def new_document(path: str, encoding: Optional[str] = None) -> Document:
    """Load a file as a document, choosing the format from its suffix."""
    _require_initialised()
    format_name = document_formats.name_for_path(path)
    loader: "DocumentFormat" = document_formats.get(format_name)()
    document = loader.load(path, encoding)
    logger.debug(f"Loaded {path} as {format_name} ({len(document.text)} chars)")
    return document


def delete_resource(document: Document) -> None:
    document.release()
