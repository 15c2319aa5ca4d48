import locale
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


def default_encoding() -> str:
    """The platform's default text encoding."""
    return locale.getpreferredencoding(False)


@dataclass(frozen=True)
class BatchConfig:
    """Settings for one batch run, fixed once parsed."""

    pipeline_path: str
    encoding: Optional[str] = None
    # None exports every annotation set; a tuple restricts the export to
    # these types from the default set
    annotation_types: Optional[Tuple[str, ...]] = None
    input_files: Tuple[str, ...] = ()

    @property
    def effective_encoding(self) -> str:
        return self.encoding or default_encoding()

    @staticmethod
    def from_args(
        pipeline_path: str,
        encoding: Optional[str] = None,
        annotation_types: Optional[Iterable[str]] = None,
        input_files: Iterable[str] = (),
    ) -> "BatchConfig":
        types = None
        if annotation_types is not None:
            # repeated types have no additional effect; first occurrence order is kept
            types = tuple(dict.fromkeys(annotation_types))
        return BatchConfig(
            pipeline_path=pipeline_path,
            encoding=encoding,
            annotation_types=types,
            input_files=tuple(input_files),
        )
