"""
spaCy components shipped with batch_pipeline.

Import this module to register the factories with spaCy, so that saved
pipelines using them can be loaded.
"""

from . import ner

__all__ = [
    "ner",
]
