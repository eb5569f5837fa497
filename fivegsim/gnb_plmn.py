"""BCD encoding of PLMN identities (MCC + MNC) into three octets."""

from __future__ import annotations


def encode_plmn(plmn: str) -> bytes:
    """Encode a 5- or 6-digit PLMN string into 3 BCD octets.

    A 2-digit MNC is padded with the filler nibble 0xF. Raises
    ``ValueError`` for any other length or for characters that are not
    digits (or 'f' as filler).
    """
    if len(plmn) == 5:
        plmn = plmn[:3] + "f" + plmn[3:]
    if len(plmn) != 6:
        raise ValueError(f"PLMN {plmn!r} must have 5 or 6 digits")

    def digit(ch: str) -> int:
        if ch in "fF":
            return 0xF
        if not ("0" <= ch <= "9"):
            raise ValueError(f"invalid PLMN digit {ch!r}")
        return ord(ch) - ord("0")

    d = [digit(ch) for ch in plmn]
    return bytes(
        (
            (d[1] << 4) | d[0],
            (d[3] << 4) | d[2],
            (d[5] << 4) | d[4],
        )
    )


def decode_plmn(data: bytes) -> str:
    """Decode 3 BCD octets back into a 5- or 6-digit PLMN string.

    Returns "unknown" when fewer than 3 octets are given.
    """
    if len(data) < 3:
        return "unknown"
    b0, b1, b2 = data[0], data[1], data[2]
    mcc1, mcc2 = b0 & 0x0F, (b0 >> 4) & 0x0F
    mcc3, mnc3 = b1 & 0x0F, (b1 >> 4) & 0x0F
    mnc1, mnc2 = b2 & 0x0F, (b2 >> 4) & 0x0F
    if mnc3 == 0xF:
        nibbles = (mcc1, mcc2, mcc3, mnc1, mnc2)
    else:
        nibbles = (mcc1, mcc2, mcc3, mnc3, mnc1, mnc2)
    return "".join(str(n) for n in nibbles)