"""gNB startup configuration and YAML loading."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict

import yaml

_UINT32_FIELDS = frozenset({"global_gnb_id", "tac"})
_INT_FIELDS = frozenset({"amf_port", "ue_port", "ue_gtp_port", "upf_gtp_port"})


@dataclass
class GNBConfig:
    """Startup settings for the gNB; defaults match the AMF's test PLMN."""

    global_gnb_id: int = 0x1234
    name: str = "5g-sim-gnb-01"
    plmn: str = "00101"
    tac: int = 0x000001
    amf_address: str = "127.0.0.1"
    amf_port: int = 38412
    gtp_address: str = "127.0.0.1"
    ue_port: int = 38413
    ue_gtp_port: int = 2153
    upf_gtp_port: int = 2152


def _coerce(key: str, value: Any) -> Any:
    if key in _UINT32_FIELDS or key in _INT_FIELDS:
        if value is None:
            return 0
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"field {key}: expected an integer, got {value!r}")
        if key in _UINT32_FIELDS and not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"field {key}: {value} does not fit in 32 bits")
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"field {key}: expected a string, got {type(value).__name__}")


def _merge(base: GNBConfig, document: Any) -> GNBConfig:
    if document is None:
        return base
    if not isinstance(document, dict):
        raise ValueError("top-level YAML value must be a mapping")
    known = {f.name for f in fields(GNBConfig)}
    updates: Dict[str, Any] = {
        key: _coerce(key, value) for key, value in document.items() if key in known
    }
    return replace(base, **updates)


def load_config(path) -> GNBConfig:
    """Read a YAML file and merge it over the defaults.

    Keys missing from the file keep their default values. A file that
    cannot be read raises ``OSError``; one that cannot be parsed raises
    ``ValueError``.
    """
    with open(path, "r", encoding="utf-8") as handle:
        text = handle.read()
    try:
        document = yaml.safe_load(text)
        return _merge(GNBConfig(), document)
    except (yaml.YAMLError, ValueError) as exc:
        raise ValueError(f"parse config {path}: {exc}") from exc