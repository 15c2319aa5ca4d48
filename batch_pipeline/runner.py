"""
Batch processing of input files with a saved pipeline.

Each file is loaded, run through the pipeline and written back out as XML
beside the input, as ``<input name>.out.xml``. Errors are not handled: the
first failure ends the run.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from batch_pipeline import engine
from batch_pipeline.config import BatchConfig
from batch_pipeline.corpus import Corpus
from batch_pipeline.document import Document
from batch_pipeline.types import Annotation

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".out.xml"


def output_path_for(path: Path) -> Path:
    """Sibling of ``path`` named ``<name>.out.xml``."""
    return path.with_name(path.name + OUTPUT_SUFFIX)


def select_annotations(document: Document, types: Sequence[str]) -> List[Annotation]:
    """
    Annotations of the given types from the default set only.

    A type the document does not have contributes nothing. The result is
    ordered by annotation id and holds each annotation once.
    """
    default = document.annotations()
    selected: Dict[int, Annotation] = {}
    for annotation_type in types:
        for annotation in default.get(annotation_type):
            selected[annotation.id] = annotation
    return [selected[key] for key in sorted(selected)]


class BatchRunner:
    """Runs one pipeline over a list of files, strictly one after another."""

    def __init__(self, config: BatchConfig) -> None:
        self.config = config
        self.controller: Optional[engine.CorpusController] = None
        self.corpus: Optional[Corpus] = None

    def setup(self) -> None:
        """Load the pipeline and bind the corpus reused for every file."""
        self.controller = engine.load_pipeline(self.config.pipeline_path)
        self.corpus = Corpus("BatchRunner Corpus")
        self.controller.set_corpus(self.corpus)

    def serialize(self, document: Document) -> str:
        encoding = self.config.effective_encoding
        if self.config.annotation_types is not None:
            selected = select_annotations(document, self.config.annotation_types)
            return document.to_xml(selected, encoding=encoding)
        return document.to_xml(encoding=encoding)

    def process_file(self, input_file: str) -> Path:
        """Run the pipeline over one file and write its XML output."""
        if self.controller is None or self.corpus is None:
            self.setup()

        doc_file = Path(input_file)
        print(f"Processing document {doc_file}...", end="", flush=True)
        document = engine.new_document(str(doc_file), self.config.encoding)

        self.corpus.add(document)
        self.controller.execute()
        # the corpus holds at most one document at a time
        self.corpus.clear()

        xml = self.serialize(document)
        engine.delete_resource(document)

        output_file = output_path_for(doc_file)
        # characters the encoding cannot represent become XML character references
        with output_file.open(
            "w", encoding=self.config.effective_encoding, errors="xmlcharrefreplace"
        ) as out:
            out.write(xml)

        logger.info(f"Wrote {output_file}")
        print("done")
        return output_file

    def run(self) -> List[Path]:
        if self.controller is None or self.corpus is None:
            self.setup()

        written = [self.process_file(path) for path in self.config.input_files]

        print("All done")
        return written
