"""Document formats, registered by name and file suffix."""

from .base import ORIGINAL_MARKUPS, DocumentFormat  # noqa: F401
from .text import TextFormat  # noqa: F401
from .html import HTMLFormat  # noqa: F401
from .xml import XMLFormat  # noqa: F401
