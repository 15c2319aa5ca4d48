"""
Batch pipeline package.

Runs a saved spaCy pipeline over a list of files and writes the resulting
annotations as XML beside each input.
"""

__all__ = [
    "BatchConfig",
    "BatchRunner",
    "Document",
]

__version__ = "0.1.0"

from .config import BatchConfig  # noqa: E402
from .document import Document  # noqa: E402
from .runner import BatchRunner  # noqa: E402
