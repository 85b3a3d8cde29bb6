"""
Configuration loader (``tradedoc_config.loader``).

Loads a YAML configuration set and parses it into the frozen dataclasses
of ``tradedoc_config.schema``.  Runtime code goes through
``tradedoc_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Out-of-range values  -> ``ValueError`` from schema ``__post_init__``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from tradedoc_config.schema import (
    DocumentTypePolicy,
    FileRule,
    StoragePolicy,
    TradeDocConfig,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load one YAML file; an empty file yields an empty dict."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return data if data is not None else {}


def parse_file_rule(data: dict[str, Any]) -> FileRule:
    return FileRule(
        allowed_content_types=tuple(data["allowed_content_types"]),
        max_size_bytes=int(data["max_size_bytes"]),
    )


def parse_storage(data: dict[str, Any]) -> StoragePolicy:
    return StoragePolicy(
        root_dir=str(data["root_dir"]),
        receipts=parse_file_rule(data["receipts"]),
        images=parse_file_rule(data["images"]),
    )


def parse_document_type(document_type: str, data: dict[str, Any]) -> DocumentTypePolicy:
    return DocumentTypePolicy(
        document_type=document_type,
        code_prefix=str(data["code_prefix"]),
        code_width=int(data["code_width"]),
        deletable_statuses=tuple(data.get("deletable_statuses", ())),
        editable_in_terminal=bool(data.get("editable_in_terminal", False)),
        counter_lookup_by_name=bool(data.get("counter_lookup_by_name", False)),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of the parsed YAML, for identifying the active set."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_config(data: dict[str, Any]) -> TradeDocConfig:
    document_types = {
        name: parse_document_type(name, entry)
        for name, entry in data["document_types"].items()
    }
    return TradeDocConfig(
        name=str(data["name"]),
        version=int(data["version"]),
        default_currency=str(data.get("default_currency", "USD")),
        storage=parse_storage(data["storage"]),
        document_types=document_types,
        checksum=compute_checksum(data),
    )


def load_config(path: Path) -> TradeDocConfig:
    return parse_config(load_yaml_file(path))
