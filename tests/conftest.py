"""Shared fixtures for texturas tests: a tiny hand-built Spanish lexicon."""

import pytest

from texturas import (
    AnalysisConfig,
    Analyzer,
    EmbeddingTable,
    Lemmatizer,
    LexicalResources,
    PosTagger,
    SentimentLexicon,
    SynsetGraph,
)

LEMMAS = {
    "gato": "gato", "gatos": "gato",
    "perro": "perro", "perros": "perro",
    "felino": "felino", "animal": "animal", "animales": "animal",
    "cola": "cola", "casa": "casa", "jardín": "jardín",
    "pescado": "pescado", "carne": "carne", "leche": "leche",
    "come": "comer", "comen": "comer", "comer": "comer",
    "es": "ser", "tiene": "tener",
    "bueno": "bueno", "buena": "bueno", "malo": "malo",
    "miedo": "miedo", "alegría": "alegría", "triste": "triste",
}

POS = {
    **{w: "n" for w in LEMMAS},
    "come": "v", "comen": "v", "comer": "v", "es": "v", "ser": "v",
    "tiene": "v", "tener": "v",
    "bueno": "a", "buena": "a", "malo": "a", "triste": "a",
}

SYNSETS = {
    "gato#n": {"hypernyms": ["felino"], "meronyms": ["cola"]},
    "felino#n": {"hypernyms": ["animal"], "hyponyms": ["gato"]},
    "animal#n": {"hyponyms": ["felino", "perro"]},
    "perro#n": {"hypernyms": ["animal"]},
}

VAD = {
    "bueno": {"v": 0.8, "a": 0.5, "d": 0.6},
    "malo": {"v": 0.1, "a": 0.6, "d": 0.4},
    "miedo": {"v": 0.2, "a": 0.9, "d": 0.2},
    "alegría": {"v": 0.95, "a": 0.7, "d": 0.7},
}

EMOLEX = {
    "miedo": {"fear": 1, "sadness": 0, "joy": 0, "anger": 0},
    "alegría": {"joy": 1, "trust": 1},
    "triste": {"sadness": 1},
    "malo": {"anger": 1, "disgust": 1},
}

SWN = {
    "bueno#a": {"pos": 0.75, "neg": 0.0},
    "malo#a": {"pos": 0.0, "neg": 0.625},
}

VECTORS = {
    "gato": [1.0, 0.0, 0.0],
    "felino": [0.9, 0.1, 0.0],
    "perro": [0.0, 1.0, 0.0],
    "animal": [0.5, 0.5, 0.0],
    "leche": [0.0, 0.0, 1.0],
}

TEXT = (
    "El gato come pescado en la casa. El perro come carne en el jardín.\n\n"
    "El gato no es malo. El felino tiene miedo del perro. "
    "Un animal bueno come con alegría."
)


def make_resources(**skip: bool) -> LexicalResources:
    """Fully loaded resources; pass e.g. ``synsets=True`` to leave one unloaded."""
    res = LexicalResources()
    if not skip.get("pos"):
        res.pos = PosTagger(POS)
    if not skip.get("lemmatizer"):
        res.lemmatizer = Lemmatizer(LEMMAS)
    if not skip.get("synsets"):
        res.synsets = SynsetGraph(SYNSETS)
    if not skip.get("sentiment"):
        res.sentiment = SentimentLexicon(emolex=EMOLEX, vad=VAD, swn=SWN)
    if not skip.get("embeddings"):
        res.embeddings = EmbeddingTable(VECTORS)
    return res


@pytest.fixture
def lexicon():
    """Raw tables, keyed like the bundle builder arguments."""
    return {
        "pos": POS, "lemmas": LEMMAS, "synsets": SYNSETS,
        "emolex": EMOLEX, "vad": VAD, "swn": SWN, "vectors": VECTORS,
    }


@pytest.fixture
def text():
    return TEXT


@pytest.fixture
def resources():
    return make_resources()


@pytest.fixture
def bare_resources():
    """Lemmatizer and tagger only: every other resource unloaded."""
    return make_resources(synsets=True, sentiment=True, embeddings=True)


@pytest.fixture
def analyzer(resources):
    return Analyzer(resources, AnalysisConfig(top_n=10))


@pytest.fixture
def result(analyzer):
    return analyzer.analyze(TEXT)
