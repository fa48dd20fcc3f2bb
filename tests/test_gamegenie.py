import pytest

from nesdeck.gamegenie import (
    DecodedCode,
    GameGenieCode,
    concatenate_codes,
    decode,
    decode_fields,
    encode,
    encode_fields,
    extract_codes,
    is_valid_char,
)


def test_decode_worked_example():
    result = decode("SXIOPO")
    assert result == DecodedCode(addr=0x11D9, val=0xAD, compare=None)


def test_decode_is_case_insensitive():
    assert decode("sxiopo") == decode("SXIOPO")


def test_encode_worked_example_round_trip():
    assert encode(decode("SXIOPO")) == "SXIOPO"


def test_decode_wrong_length_gives_empty_code():
    assert decode("SXIOP") == DecodedCode()
    assert decode("") == DecodedCode()


def test_decode_invalid_letter_raises():
    with pytest.raises(ValueError):
        decode("SXIOPB")


@pytest.mark.parametrize(
    "patch",
    [
        DecodedCode(addr=0x11D9, val=0xAD),
        DecodedCode(addr=0x0000, val=0x00),
        DecodedCode(addr=0x7FFF, val=0xFF),
        DecodedCode(addr=0x1234, val=0x56, compare=0x78),
        DecodedCode(addr=0x7FFF, val=0xFF, compare=0xFF),
        DecodedCode(addr=0x0001, val=0x80, compare=0x00),
    ],
)
def test_decode_inverts_encode(patch):
    code = encode(patch)
    assert len(code) == (8 if patch.compare is not None else 6)
    assert decode(code) == patch


def test_encode_masks_high_address_bit():
    assert decode(encode(DecodedCode(addr=0x91D9, val=0xAD))) == DecodedCode(addr=0x11D9, val=0xAD)


def test_eight_letter_codes_have_compare():
    code = encode(DecodedCode(addr=0x0100, val=0x02, compare=0x03))
    assert decode(code).compare == 0x03
    assert all(is_valid_char(c) for c in code)


def test_extract_codes_trims_and_skips_blanks():
    assert extract_codes(" SXIOPO +\tAAAAAA + + ", "+") == ["SXIOPO", "AAAAAA"]
    assert extract_codes("", "+") == []


def test_concatenate_then_extract_round_trip():
    codes = ["SXIOPO", "AAAAAA", "GOSSIP"]
    joined = concatenate_codes(codes, " + ")
    assert joined == "SXIOPO + AAAAAA + GOSSIP"
    assert extract_codes(joined, "+") == codes


def test_concatenate_single_and_empty():
    assert concatenate_codes(["SXIOPO"], ",") == "SXIOPO"
    assert concatenate_codes([], ",") == ""


@pytest.mark.parametrize("char", ["A", "p", "N", "z"])
def test_valid_chars(char):
    assert is_valid_char(char) is True


@pytest.mark.parametrize("char", ["B", "1", " ", "", "AP"])
def test_invalid_chars(char):
    assert is_valid_char(char) is False


def test_encode_fields_worked_example():
    assert encode_fields("11D9", "AD", "") == "SXIOPO"


def test_encode_fields_needs_address_and_value():
    assert encode_fields("", "AD", "") is None
    assert encode_fields("11D9", "", "") is None


def test_encode_fields_rejects_non_hex():
    with pytest.raises(ValueError):
        encode_fields("XYZ", "AD", "")


def test_decode_fields_worked_example():
    assert decode_fields("SXIOPO") == ("11D9", "AD", "")


def test_decode_fields_wrong_length():
    assert decode_fields("SXIOP") is None


def test_fields_round_trip_with_compare():
    code = encode_fields("1234", "56", "78")
    assert decode_fields(code) == ("1234", "56", "78")


def test_game_genie_code_decodes_each_part():
    cheat = GameGenieCode(["SXIOPO", "sxiopo"], "Infinite lives")
    assert cheat.is_active is False
    assert cheat.decoded == [decode("SXIOPO"), decode("SXIOPO")]
    assert cheat.decoded[0].val == 0xAD