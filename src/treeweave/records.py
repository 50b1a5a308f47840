"""Identifier-based records usable as forest payloads."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from treeweave.exceptions import InvalidInputError
from treeweave.utils.logging import get_logger

_LOGGER = get_logger(module=__name__)

Identifier = int | str


class Record(BaseModel):
    """A flat object that names its parent by identifier."""

    id: Identifier
    parent_id: Identifier | None = None
    label: str | None = None
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("label")
    @classmethod
    def _trim_label(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @property
    def display_label(self) -> str:
        return self.label or str(self.id)

    def is_parent_of(self, other: Any) -> bool:
        if not isinstance(other, Record):
            raise InvalidInputError(
                f"Record.is_parent_of expects a Record, got {type(other).__name__}"
            )
        return other.parent_id is not None and other.parent_id == self.id


def _parse_payload(path: Path, text: str) -> Any:
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(text)
    if suffix == ".jsonl":
        return [json.loads(line) for line in text.splitlines() if line.strip()]
    return json.loads(text)


def records_from_payload(payload: Any) -> List[Record]:
    """Validate a list of mappings into :class:`Record` objects, in order."""

    if payload is None:
        return []
    if not isinstance(payload, list):
        raise InvalidInputError(
            f"expected a list of records, got {type(payload).__name__}"
        )
    records: List[Record] = []
    for position, item in enumerate(payload):
        try:
            records.append(Record.model_validate(item))
        except ValidationError as exc:
            raise InvalidInputError(f"record #{position} is invalid: {exc}") from exc
    return records


def load_records(path: str | Path) -> List[Record]:
    """Read records from a JSON array, JSON Lines or YAML list file."""

    source = Path(path)
    if not source.exists():
        raise InvalidInputError(f"record file not found: {source}")
    try:
        text = source.read_text(encoding="utf-8")
        payload = _parse_payload(source, text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise InvalidInputError(f"could not parse {source}: {exc}") from exc
    except OSError as exc:
        raise InvalidInputError(f"could not read {source}: {exc}") from exc
    records = records_from_payload(payload)
    _LOGGER.info("Loaded records", path=str(source), total=len(records))
    return records


__all__ = ["Record", "Identifier", "load_records", "records_from_payload"]
