"""Texturas error types."""


class TexturasError(Exception):
    """Base error for all texturas failures."""


class TexturasVersionError(TexturasError):
    """Manifest version mismatch."""


class TexturasChecksumError(TexturasError):
    """File checksum verification failed."""


class ResourceError(TexturasError):
    """A lexical resource violated its query contract.

    Raised when a collaborator (tagger, lemmatizer, synset graph, lexicon,
    embedding table) throws while being queried. The analysis cannot repair
    a broken dependency, so the original exception is chained.
    """

    def __init__(self, resource: str, message: str) -> None:
        super().__init__(f"{resource}: {message}")
        self.resource = resource
