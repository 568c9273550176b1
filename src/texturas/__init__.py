"""Texturas: lexicon-driven Spanish text analysis (frequencies, co-occurrence
communities, spreading activation, sentiment, Weave and Fibras views)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._config import AnalysisConfig
from ._errors import (
    ResourceError,
    TexturasChecksumError,
    TexturasError,
    TexturasVersionError,
)
from ._pipeline import analyze
from ._resources import (
    EmbeddingTable,
    Lemmatizer,
    LexicalResources,
    PosTagger,
    SentimentLexicon,
    SynsetGraph,
)
from ._stop_words import NEGATION_WORDS, STOP_WORDS
from ._tokenizer import tokenize
from ._types import (
    AnalysisResult,
    CooccurrenceScope,
    EnrichedToken,
    FibrasResult,
    Flow,
    PassageToken,
    RelationKind,
    ResourceState,
    SelectionMode,
    SortMode,
    StackWeave,
    TokenKind,
    WeaveResult,
    WeaveTerm,
)

if TYPE_CHECKING:
    from pathlib import Path

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "load",
    "AnalysisConfig",
    "AnalysisResult",
    "Analyzer",
    "CooccurrenceScope",
    "EmbeddingTable",
    "EnrichedToken",
    "FibrasResult",
    "Flow",
    "Lemmatizer",
    "LexicalResources",
    "NEGATION_WORDS",
    "PassageToken",
    "PosTagger",
    "RelationKind",
    "ResourceError",
    "ResourceState",
    "STOP_WORDS",
    "SelectionMode",
    "SentimentLexicon",
    "SortMode",
    "StackWeave",
    "SynsetGraph",
    "TexturasChecksumError",
    "TexturasError",
    "TexturasVersionError",
    "TokenKind",
    "WeaveResult",
    "WeaveTerm",
    "analyze",
    "tokenize",
]


def load(
    data_dir: Path | str | None = None,
    config: AnalysisConfig | None = None,
) -> "Analyzer":
    """Load a lexicon bundle and return a ready-to-use Analyzer.

    Args:
        data_dir: Path to the bundle directory. If None, every resource
            stays unloaded and the analysis runs in its degraded mode.
        config: Analysis settings; defaults to :class:`AnalysisConfig`.
    """
    from ._analyzer import Analyzer
    from ._loader import load_resources

    return Analyzer(load_resources(data_dir), config)


# Deferred import so Analyzer is available as texturas.Analyzer
# without circular import issues at module load time.
def __getattr__(name: str):
    if name == "Analyzer":
        from ._analyzer import Analyzer
        return Analyzer
    raise AttributeError(f"module 'texturas' has no attribute {name!r}")
