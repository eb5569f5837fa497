"""AMF startup configuration and YAML loading."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict

import yaml

_UINT8_FIELDS = frozenset({"region_id", "set_id", "pointer"})
_INT_FIELDS = frozenset({"sctp_port", "http_port"})


@dataclass
class AMFConfig:
    """Startup settings for the AMF; the defaults suit local development."""

    bind_address: str = ""
    name: str = "5g-sim-amf"
    plmn: str = "00101"
    region_id: int = 1
    set_id: int = 1
    pointer: int = 0
    sctp_port: int = 38412
    smf_address: str = "http://127.0.0.1:8001"
    udm_address: str = "http://127.0.0.1:8004"
    instance_id: str = "amf-sim-001"
    http_port: int = 8090


def _coerce(key: str, value: Any) -> Any:
    if key in _UINT8_FIELDS or key in _INT_FIELDS:
        if value is None:
            return 0
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"field {key}: expected an integer, got {value!r}")
        if key in _UINT8_FIELDS and not 0 <= value <= 0xFF:
            raise ValueError(f"field {key}: {value} does not fit in 8 bits")
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"field {key}: expected a string, got {type(value).__name__}")


def _merge(base: AMFConfig, document: Any) -> AMFConfig:
    if document is None:
        return base
    if not isinstance(document, dict):
        raise ValueError("top-level YAML value must be a mapping")
    known = {f.name for f in fields(AMFConfig)}
    updates: Dict[str, Any] = {
        key: _coerce(key, value) for key, value in document.items() if key in known
    }
    return replace(base, **updates)


def load_config(path) -> AMFConfig:
    """Read a YAML file and merge it over the defaults.

    Keys missing from the file keep their default values. A file that
    cannot be read raises ``OSError``; one that cannot be parsed raises
    ``ValueError``.
    """
    with open(path, "r", encoding="utf-8") as handle:
        text = handle.read()
    try:
        document = yaml.safe_load(text)
        return _merge(AMFConfig(), document)
    except (yaml.YAMLError, ValueError) as exc:
        raise ValueError(f"parse config {path}: {exc}") from exc