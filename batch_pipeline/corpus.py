from typing import Iterator, List

from batch_pipeline.document import Document


class Corpus:
    """Ordered container of documents that a controller runs over."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._documents: List[Document] = []

    def add(self, document: Document) -> None:
        self._documents.append(document)

    def clear(self) -> None:
        self._documents.clear()

    def __iter__(self) -> Iterator[Document]:
        return iter(list(self._documents))

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return f"Corpus(name={self.name!r}, size={len(self._documents)})"
