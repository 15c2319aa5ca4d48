from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Set


@dataclass
class Annotation:
    """Typed span over a document's text."""

    id: int
    type: str
    start: int
    end: int
    features: Dict[str, Any] = field(default_factory=dict)


class AnnotationSet:
    """
    Ordered collection of annotations.

    The default set of a document has ``name=None``; every other set is
    named. Sets owned by a document allocate ids through ``id_source`` so
    ids stay unique across all sets of that document. Sets returned by
    :meth:`get` are detached snapshots and cannot allocate ids.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        annotations: Optional[Iterable[Annotation]] = None,
        id_source: Optional[Callable[[], int]] = None,
    ) -> None:
        self.name = name
        self._annotations: List[Annotation] = list(annotations or [])
        self._id_source = id_source

    def add(
        self,
        start: int,
        end: int,
        type: str,
        features: Optional[Dict[str, Any]] = None,
    ) -> Annotation:
        if self._id_source is None:
            raise RuntimeError("Cannot add annotations to a detached annotation set.")
        if start < 0 or end < start:
            raise ValueError(f"Invalid offsets for '{type}' annotation: {start}-{end}")
        annotation = Annotation(
            id=self._id_source(),
            type=type,
            start=start,
            end=end,
            features=dict(features or {}),
        )
        self._annotations.append(annotation)
        return annotation

    def add_annotation(self, annotation: Annotation) -> None:
        """Add an annotation that already carries an id."""
        self._annotations.append(annotation)

    def get(self, type: str) -> "AnnotationSet":
        """Annotations of one type; empty when the type is absent."""
        return AnnotationSet(
            name=self.name,
            annotations=[a for a in self._annotations if a.type == type],
        )

    def types(self) -> Set[str]:
        return {a.type for a in self._annotations}

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self._annotations)

    def __len__(self) -> int:
        return len(self._annotations)

    def __repr__(self) -> str:
        return f"AnnotationSet(name={self.name!r}, size={len(self._annotations)})"
