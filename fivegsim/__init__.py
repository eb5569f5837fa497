"""5G simulation building blocks: GTP-U codec and tunnel, AMF/gNB config, NAS, PLMN and relay helpers."""

__version__ = "0.1.0"