"""Lexicon bundle loading, manifest validation, and SHA-256 checksum verification."""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

import msgpack
import numpy as np

from ._errors import TexturasChecksumError, TexturasError, TexturasVersionError
from ._resources import (
    EmbeddingTable,
    Lemmatizer,
    LexicalResources,
    PosTagger,
    SentimentLexicon,
    SynsetGraph,
)

logger = logging.getLogger(__name__)

_EXPECTED_VERSION = "1.0"

_DATA_FILES = (
    "pos.bin",
    "lemmas.bin",
    "synsets.bin",
    "emolex.bin",
    "intensity.bin",
    "vad.bin",
    "swn.bin",
    "vectors.bin",
)

_VECTOR_DTYPES = {"float32": "<f4", "float16": "<f2"}


def _sha256(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()


def _read_manifest(data_dir: Path) -> dict[str, Any]:
    manifest_path = data_dir / "manifest.json"
    if not manifest_path.exists():
        raise TexturasError(f"manifest.json not found in {data_dir}")
    with open(manifest_path) as f:
        return json.load(f)


def _validate_manifest(manifest: dict[str, Any], data_dir: Path) -> list[str]:
    """Check version and checksums; return the data files present."""
    version = manifest.get("version")
    if version != _EXPECTED_VERSION:
        raise TexturasVersionError(
            f"Expected data version {_EXPECTED_VERSION!r}, got {version!r}"
        )
    checksums = manifest.get("files", {})
    present: list[str] = []
    for filename in _DATA_FILES:
        filepath = data_dir / filename
        expected = checksums.get(filename)
        if not filepath.exists():
            if expected is not None:
                logger.warning("%s listed in manifest but missing; resource stays unloaded", filename)
            continue
        if expected is None:
            raise TexturasError(f"No checksum in manifest for {filename}")
        actual = _sha256(filepath)
        if actual != expected:
            raise TexturasChecksumError(
                f"Checksum mismatch for {filename}: "
                f"expected {expected[:16]}..., got {actual[:16]}..."
            )
        present.append(filename)
    return present


def _load_msgpack(path: Path, **kwargs: Any) -> Any:
    with open(path, "rb") as f:
        return msgpack.unpackb(f.read(), raw=False, **kwargs)


def decode_vectors(payload: dict[str, Any]) -> tuple[dict[str, int], np.ndarray]:
    """Unpack a ``vectors.bin`` payload into (word -> row, matrix)."""
    dim = payload["dim"]
    dtype = payload.get("dtype", "float32")
    np_dtype = _VECTOR_DTYPES.get(dtype)
    if np_dtype is None:
        raise TexturasError(f"Unsupported vector dtype {dtype!r}")
    vocab: dict[str, int] = payload["vocab"]
    data: bytes = payload["data"]
    expected = np.dtype(np_dtype).itemsize * dim * len(vocab)
    if len(data) != expected:
        raise TexturasError(f"vectors.bin holds {len(data)} bytes, expected {expected}")
    matrix = np.frombuffer(data, dtype=np_dtype).reshape(len(vocab), dim)
    return vocab, matrix


def encode_vectors(vectors: dict[str, list[float]], dtype: str = "float32") -> dict[str, Any]:
    """Pack word vectors into the ``vectors.bin`` layout."""
    np_dtype = _VECTOR_DTYPES.get(dtype)
    if np_dtype is None:
        raise ValueError(f"Unsupported vector dtype {dtype!r}")
    dims = {len(v) for v in vectors.values()}
    if len(dims) > 1:
        raise ValueError(f"inconsistent vector dimensions: {sorted(dims)}")
    dim = dims.pop() if dims else 0
    words = list(vectors)
    matrix = np.array([vectors[w] for w in words], dtype=np_dtype).reshape(len(words), dim)
    return {
        "dim": dim,
        "dtype": dtype,
        "vocab": {w: i for i, w in enumerate(words)},
        "data": matrix.tobytes(),
    }


def load_resources(data_dir: Path | str | None = None) -> LexicalResources:
    """Load and validate a lexicon bundle.

    Every data file is optional; a resource whose file is absent stays
    unloaded and the analysis runs in its degraded mode. With no
    ``data_dir`` every resource stays unloaded.
    """
    if data_dir is None:
        logger.info("no lexicon bundle given; all resources unloaded")
        return LexicalResources()
    data_dir = Path(data_dir)

    manifest = _read_manifest(data_dir)
    present = set(_validate_manifest(manifest, data_dir))

    def table(name: str) -> Any:
        if name not in present:
            return None
        return _load_msgpack(data_dir / name)

    pos = table("pos.bin")
    lemmas = table("lemmas.bin")
    synsets = table("synsets.bin")
    vectors = table("vectors.bin")
    embeddings = EmbeddingTable()
    if vectors is not None:
        embeddings.load_matrix(*decode_vectors(vectors))

    res = LexicalResources(
        pos=PosTagger(pos),
        lemmatizer=Lemmatizer(lemmas),
        synsets=SynsetGraph(synsets),
        sentiment=SentimentLexicon(
            emolex=table("emolex.bin"),
            intensity=table("intensity.bin"),
            vad=table("vad.bin"),
            swn=table("swn.bin"),
        ),
        embeddings=embeddings,
    )
    logger.info(
        "loaded lexicon bundle from %s: %s",
        data_dir,
        ", ".join(f"{k}={v.value}" for k, v in res.status().items()),
    )
    return res


def build_bundle(
    data_dir: Path | str,
    *,
    pos: dict[str, str] | None = None,
    lemmas: dict[str, str] | None = None,
    synsets: dict[str, dict[str, list[str]]] | None = None,
    emolex: dict[str, dict[str, int]] | None = None,
    intensity: dict[str, dict[str, float]] | None = None,
    vad: dict[str, dict[str, float]] | None = None,
    swn: dict[str, dict[str, float]] | None = None,
    vectors: dict[str, list[float]] | None = None,
    vector_dtype: str = "float32",
) -> Path:
    """Write lexicon tables and a matching manifest to ``data_dir``.

    Tables left as None are not written.
    """
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    tables: dict[str, Any] = {
        "pos.bin": pos,
        "lemmas.bin": lemmas,
        "synsets.bin": synsets,
        "emolex.bin": emolex,
        "intensity.bin": intensity,
        "vad.bin": vad,
        "swn.bin": swn,
        "vectors.bin": encode_vectors(vectors, vector_dtype) if vectors is not None else None,
    }
    checksums: dict[str, str] = {}
    for filename, payload in tables.items():
        if payload is None:
            continue
        path = data_dir / filename
        with open(path, "wb") as f:
            f.write(msgpack.packb(payload, use_bin_type=True))
        checksums[filename] = _sha256(path)

    with open(data_dir / "manifest.json", "w") as f:
        json.dump({"version": _EXPECTED_VERSION, "files": checksums}, f, indent=2)
    logger.debug("wrote %d lexicon files to %s", len(checksums), data_dir)
    return data_dir
