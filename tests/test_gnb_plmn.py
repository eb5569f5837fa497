import pytest

from fivegsim.gnb_plmn import decode_plmn, encode_plmn


@pytest.mark.parametrize(
    "data, expected",
    [
        (bytes([0x00, 0xF1, 0x10]), "00101"),
        (bytes([0x00, 0x01, 0x10]), "001001"),
    ],
)
def test_decode_plmn(data, expected):
    assert decode_plmn(data) == expected


def test_encode_two_digit_mnc():
    assert encode_plmn("00101") == bytes([0x00, 0xF1, 0x10])


def test_encode_three_digit_mnc():
    assert encode_plmn("001001") == bytes([0x00, 0x01, 0x10])


@pytest.mark.parametrize("plmn", ["00101", "001001", "99970", "310260"])
def test_round_trip(plmn):
    assert decode_plmn(encode_plmn(plmn)) == plmn


def test_decode_short_input():
    assert decode_plmn(b"\x00\xf1") == "unknown"


@pytest.mark.parametrize("plmn", ["", "0010", "0010101"])
def test_encode_rejects_bad_length(plmn):
    with pytest.raises(ValueError):
        encode_plmn(plmn)


def test_encode_rejects_non_digit():
    with pytest.raises(ValueError):
        encode_plmn("00a01")