"""
End-to-end tests for decode().

Tests cover:
- Linear EAN-13 / UPC-A fast path
- Raw and bracketed GS1 streams
- Field validation warnings and the success flag
- Derived fields (GTIN, NDC, batch, serial, expiry)
- Barcode type classification
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest

from gs1_decoder import (
    BarcodeType,
    DecodeOptions,
    Decoder,
    IssueCode,
    decode,
)


GS = "\x1d"
REFERENCE = datetime(2025, 6, 1, 12, 0)
OPTIONS = DecodeOptions(reference_time=REFERENCE)

GTIN = "00036141456789"
BAD_GTIN = "00361414567890"


def run(text, reference_time=REFERENCE):
    return decode(text, options=DecodeOptions(reference_time=reference_time))


class TestLinearCodes:
    """Tests for the EAN-13 / UPC-A fast path."""

    def test_ean13(self):
        result = run("0036141456789")
        assert result.success
        assert result.barcode_type == BarcodeType.EAN_13
        assert result.gtin == GTIN
        assert list(result.elements) == ["01"]
        element = result.elements["01"]
        assert element.value == GTIN
        assert element.raw_value == "0036141456789"
        assert element.is_valid
        assert result.warnings == []

    def test_upca(self):
        result = run("036141456789")
        assert result.success
        assert result.barcode_type == BarcodeType.UPC_A
        assert result.gtin == GTIN
        assert result.elements["01"].raw_value == "036141456789"

    def test_ean13_with_symbology_prefix(self):
        result = run("]C15901234123457")
        assert result.barcode_type == BarcodeType.EAN_13
        assert result.gtin == "05901234123457"

    def test_linear_code_has_no_expiry(self):
        result = run("5901234123457")
        assert result.expiry_date is None
        assert result.is_expired is False
        assert result.days_to_expiry is None

    def test_12_digits_failing_checksum_falls_through(self):
        result = run("036141456788")
        assert not result.success
        assert result.barcode_type == BarcodeType.UNKNOWN
        assert result.gtin is None
        assert result.elements == {}
        assert result.warnings == ["Unparsed data segment: 0361414567..."]

    def test_13_digits_failing_checksum_falls_through(self):
        # "00" is the SSCC AI, which needs 18 digits
        result = run("0036141456788")
        assert not result.success
        assert result.barcode_type == BarcodeType.UNKNOWN
        assert [i.code for i in result.issues] == [IssueCode.TRUNCATED_DATA]

    def test_16_digits_are_not_linear(self):
        result = run("0800614141999996")
        assert not result.success
        assert result.barcode_type == BarcodeType.UNKNOWN
        assert result.warnings == ["Unparsed data segment: 0800614141..."]


class TestCompositeStreams:
    """Tests for GS1 DataMatrix / GS1-128 element strings."""

    def test_raw_fixed_length_stream(self):
        result = run("01" + GTIN + "17251231" "10BATCH001")
        assert result.success
        assert result.barcode_type == BarcodeType.GS1_DATAMATRIX
        assert result.gtin == GTIN
        assert result.expiry_date == "2025-12-31"
        assert result.batch_number == "BATCH001"
        assert result.serial_number is None
        assert result.ndc == "03614-1456-78"
        assert result.is_expired is False
        assert result.days_to_expiry == 214
        assert result.warnings == []

    def test_invalid_gtin_still_populates_fields(self):
        result = run("01003614145678901725123110BATCH001")
        assert not result.success
        assert result.warnings == ["Invalid GTIN Check Digit"]
        assert result.gtin == BAD_GTIN
        assert result.elements["01"].is_valid is False
        assert result.elements["01"].value == BAD_GTIN
        assert result.expiry_date == "2025-12-31"
        assert result.batch_number == "BATCH001"
        assert result.barcode_type == BarcodeType.GS1_DATAMATRIX

    def test_bracketed_matches_raw(self):
        raw = run("01" + GTIN + "17251231" "10BATCH001")
        bracketed = run("(01)" + GTIN + "(17)251231(10)BATCH001")
        assert bracketed.success
        for attr in ("gtin", "expiry_date", "batch_number", "barcode_type", "ndc"):
            assert getattr(bracketed, attr) == getattr(raw, attr)

    def test_group_separated_stream_with_symbology(self):
        text = "]d2" "01" + GTIN + "10ABC123" + GS + "21SER001" + GS + "17270301"
        result = run(text)
        assert result.success
        assert result.raw_data == text
        assert result.batch_number == "ABC123"
        assert result.serial_number == "SER001"
        assert result.expiry_date == "2027-03-01"
        assert list(result.elements) == ["01", "10", "21", "17"]

    def test_gtin_only_is_gs1_128(self):
        result = run("]C101" + GTIN)
        assert result.success
        assert result.barcode_type == BarcodeType.GS1_128

    def test_elements_without_gtin_are_unknown_type(self):
        result = run("10LOT42" + GS + "21SN1")
        assert result.success
        assert result.barcode_type == BarcodeType.UNKNOWN
        assert result.gtin is None
        assert result.ndc is None

    def test_date_element_value_is_iso(self):
        result = run("01" + GTIN + "11240115" "17260115")
        assert result.elements["11"].value == "2024-01-15"
        assert result.elements["11"].raw_value == "240115"
        assert result.elements["17"].value == "2026-01-15"
        assert result.elements["17"].raw_value == "260115"

    def test_day_zero_expiry(self):
        result = run("01" + GTIN + "17270200")
        assert result.expiry_date == "2027-02-28"

    def test_expiry_time_ai(self):
        result = run("01" + GTIN + "70032512311430")
        assert result.elements["7003"].value == "2025-12-31"
        assert result.expiry_date is None

    def test_repeated_ai_keeps_last(self):
        result = run("10AAA" + GS + "10BBB")
        assert result.success
        assert len(result.elements) == 1
        assert result.batch_number == "BBB"

    def test_bracketed_blank_batch_is_kept(self):
        result = run("(10)   (01)" + GTIN)
        assert result.elements["10"].value == "   "
        assert result.batch_number == "   "
        assert result.barcode_type == BarcodeType.GS1_DATAMATRIX

    def test_leading_group_separator_is_ignored(self):
        result = run(GS + "01" + GTIN)
        assert result.success
        assert result.gtin == GTIN


class TestWarnings:
    """Tests for warnings and the success flag."""

    def test_invalid_date(self):
        result = run("01" + GTIN + "1725AB31")
        assert not result.success
        assert result.warnings == ["Invalid Date for AI (17)"]
        assert result.issues[0].code == IssueCode.INVALID_DATE
        assert result.elements["17"].is_valid is False
        assert result.elements["17"].value == "25AB31"
        assert result.expiry_date is None
        assert result.is_expired is False
        assert result.days_to_expiry is None
        assert result.barcode_type == BarcodeType.GS1_128

    def test_truncated_fixed_field(self):
        result = run("01" + GTIN + "172512")
        assert not result.success
        assert result.gtin == GTIN
        assert result.warnings == ["Unparsed data segment: 172512..."]
        assert result.issues[0].code == IssueCode.TRUNCATED_DATA

    def test_unparsed_trailing_segment_fails_decode(self):
        result = run("01" + GTIN + "17251231" "99XYZ")
        assert not result.success
        assert result.gtin == GTIN
        assert result.expiry_date == "2025-12-31"
        assert result.warnings == ["Unparsed data segment: 99XYZ..."]

    def test_no_resync_after_unparsed_segment(self):
        result = run("01" + GTIN + "99XYZ" + GS + "10LOT")
        assert result.batch_number is None
        assert "10" not in result.elements

    def test_warning_order(self):
        result = run("01" + BAD_GTIN + "1725AB31" "99")
        assert result.warnings == [
            "Invalid GTIN Check Digit",
            "Invalid Date for AI (17)",
            "Unparsed data segment: 99...",
        ]

    def test_unknown_bracketed_ai(self):
        result = run("(01)" + GTIN + "(99)XYZ")
        assert not result.success
        assert result.warnings == ["Unknown AI (99)"]
        assert result.elements["99"].label == "Unknown AI"
        assert result.elements["99"].value == "XYZ"

    def test_bracketed_input_without_groups(self):
        result = run("(not a barcode)")
        assert not result.success
        assert result.warnings == ["Unparsed data segment: (not a bar..."]

    @pytest.mark.parametrize("text", ["", "   ", "\t\r\n"])
    def test_empty_input(self, text):
        result = run(text)
        assert not result.success
        assert result.barcode_type == BarcodeType.UNKNOWN
        assert result.elements == {}
        assert result.warnings == []
        assert result.raw_data == text

    def test_symbology_identifier_only(self):
        result = run("]d2")
        assert not result.success
        assert [i.code for i in result.issues] == [IssueCode.EMPTY_PAYLOAD]

    @pytest.mark.parametrize("text", [
        "((((", "()", "]d2(01)", "\x00\x01\x02", "01", "17", "ü€", "9" * 50,
    ])
    def test_garbage_never_raises(self, text):
        result = run(text)
        assert not result.success
        assert result.warnings


class TestExpiry:
    """Tests for expiry verdicts against an injected clock."""

    def test_expired(self):
        result = run("01" + GTIN + "17240101", reference_time=datetime(2025, 1, 1))
        assert result.success
        assert result.is_expired is True
        assert result.days_to_expiry == -365

    def test_expires_end_of_day(self):
        text = "01" + GTIN + "17251231"
        assert not run(text, datetime(2025, 12, 31, 23, 0)).is_expired
        assert run(text, datetime(2026, 1, 1, 0, 0)).is_expired

    def test_days_to_expiry_today(self):
        result = run("01" + GTIN + "17251231", datetime(2025, 12, 31, 8, 0))
        assert result.days_to_expiry == 1

    def test_century_pivot_option(self):
        options = DecodeOptions(reference_time=REFERENCE, century_pivot=50)
        result = decode("01" + GTIN + "17600101", options=options)
        assert result.expiry_date == "1960-01-01"
        assert result.is_expired


class TestResultHelpers:
    """Tests for caller-side helpers on DecodeResult."""

    def test_with_warning_returns_copy(self):
        result = run("01" + GTIN + "17251231")
        flagged = result.with_warning("Duplicate Scan detected within last 5 minutes")

        assert result.success
        assert result.warnings == []
        assert not flagged.success
        assert flagged.warnings == ["Duplicate Scan detected within last 5 minutes"]
        assert flagged.issues[-1].code == IssueCode.CALLER
        assert flagged.gtin == result.gtin
        assert flagged.elements == result.elements
        assert flagged.elements is not result.elements

    def test_elements_are_immutable(self):
        result = run("01" + GTIN)
        with pytest.raises(AttributeError):
            result.elements["01"].is_valid = False

    def test_lookup_key(self):
        assert run("01" + GTIN).lookup_key() == GTIN
        assert run("  SKU-1234 ").lookup_key() == "SKU-1234"


class TestDecoder:
    """Tests for the Decoder object."""

    def test_decoder_is_reusable(self):
        decoder = Decoder(OPTIONS)
        first = decoder.decode("01" + GTIN)
        second = decoder.decode("01" + BAD_GTIN)
        assert first.success
        assert not second.success
        assert first.warnings == []

    def test_concurrent_decodes(self):
        decoder = Decoder(OPTIONS)
        text = "]d201" + GTIN + "17251231" "10BATCH001"
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(decoder.decode, [text] * 64))
        assert all(r.success for r in results)
        assert {r.batch_number for r in results} == {"BATCH001"}

    def test_default_options_use_current_time(self):
        result = decode("01" + GTIN + "17000101")
        assert result.is_expired
