"""Mapping file loading: JSON documents and streamed JSON Lines.

JSON documents (``{"entries": [...]}`` or a bare list) are parsed in one
go.  JSON Lines files (``.jsonl``) are read lazily, one entry per line, so
the detector pulls entries as the file is consumed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

import structlog
from pydantic import ValidationError

from pssdiv.errors import MappingFileError
from pssdiv.mapping.schemas import MappingDocument, MappingElementModel
from pssdiv.mapping.types import MappingElement

logger = structlog.get_logger()

JSON_LINES_SUFFIXES = {".jsonl", ".ndjson"}


def iter_mapping_file(path: str | Path) -> Iterator[MappingElement]:
    """Yield mapping elements from *path*.

    Raises
    ------
    MappingFileError
        If the file cannot be read, is not valid JSON, or an entry does not
        match the mapping schema.
    """
    path = Path(path)
    if path.suffix.lower() in JSON_LINES_SUFFIXES:
        yield from _iter_json_lines(path)
    else:
        yield from _load_document(path)


def load_mapping(path: str | Path) -> list[MappingElement]:
    """Load every mapping element from *path* into a list."""
    entries = list(iter_mapping_file(path))
    logger.info("mapping_file_loaded", path=str(path), entry_count=len(entries))
    return entries


def _load_document(path: Path) -> list[MappingElement]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise MappingFileError(str(path), str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise MappingFileError(str(path), f"not valid UTF-8: {exc.reason}") from exc
    except json.JSONDecodeError as exc:
        raise MappingFileError(str(path), f"invalid JSON: {exc.msg}", exc.lineno) from exc

    if isinstance(raw, list):
        raw = {"entries": raw}
    try:
        document = MappingDocument.model_validate(raw)
    except ValidationError as exc:
        raise MappingFileError(str(path), _summarize(exc)) from exc
    return [entry.to_domain() for entry in document.entries]


def _iter_json_lines(path: Path) -> Iterator[MappingElement]:
    try:
        handle = path.open("rb")
    except OSError as exc:
        raise MappingFileError(str(path), str(exc)) from exc

    # Decoded per line so an encoding error reports the offending line
    with handle:
        for lineno, raw_line in enumerate(handle, start=1):
            try:
                line = raw_line.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise MappingFileError(
                    str(path), f"not valid UTF-8: {exc.reason}", lineno
                ) from exc
            if not line.strip():
                continue
            try:
                model = MappingElementModel.model_validate_json(line)
            except ValidationError as exc:
                raise MappingFileError(str(path), _summarize(exc), lineno) from exc
            yield model.to_domain()


def _summarize(exc: ValidationError) -> str:
    """Condense a pydantic ValidationError into a single line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)
