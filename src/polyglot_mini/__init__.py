"""polyglot-mini: language resolution and translation cache for mini apps."""

from polyglot_mini.config import POLY_VERSION, PolyglotSettings
from polyglot_mini.engine import Polyglot, SwitchResult, TranslationEntry
from polyglot_mini.storage import FileStorage
from polyglot_mini.utils import configure_logging, logger

__version__ = POLY_VERSION

__all__ = [
    "FileStorage",
    "Polyglot",
    "PolyglotSettings",
    "SwitchResult",
    "TranslationEntry",
    "configure_logging",
    "logger",
]
