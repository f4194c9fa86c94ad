"""
Tests for the packed intent codec.
"""
import pytest

from userintent_sdk.codec import (
    decode_intent,
    get_lengths,
    get_sender_and_standard,
    pack_intent,
    split_intents,
    total_intent_length,
)
from userintent_sdk.exceptions import MalformedIntentError, ValidationOutcome
from userintent_sdk.utils import to_checksum

from tests.test_helpers import TEST_STANDARD, raw_intent

SENDER = "0x" + "aa" * 20


class TestPrefix:
    """Test reading the fixed 46-byte prefix."""

    def test_sender_and_standard(self):
        buffer = raw_intent(sender=SENDER)
        sender, standard = get_sender_and_standard(buffer)
        assert sender == to_checksum(SENDER)
        assert standard == to_checksum(TEST_STANDARD)

    def test_sender_and_standard_needs_40_bytes(self):
        buffer = raw_intent()
        assert get_sender_and_standard(buffer[:40])
        with pytest.raises(MalformedIntentError) as exc_info:
            get_sender_and_standard(buffer[:39])
        assert exc_info.value.outcome == ValidationOutcome.MALFORMED_INTENT

    def test_lengths(self):
        buffer = raw_intent(header=b"h" * 28, instructions=b"i" * 300, signature=b"s" * 65)
        assert get_lengths(buffer) == (28, 300, 65)

    def test_lengths_are_big_endian(self):
        buffer = raw_intent(header=b"", instructions=b"x" * 0x0102, signature=b"")
        assert buffer[42:44] == b"\x01\x02"
        assert get_lengths(buffer)[1] == 0x0102

    def test_lengths_need_46_bytes(self):
        buffer = raw_intent()
        assert get_lengths(buffer[:46])
        with pytest.raises(MalformedIntentError, match="too short"):
            get_lengths(buffer[:45])

    def test_total_intent_length_ignores_extra(self):
        buffer = raw_intent(header=b"h" * 8, instructions=b"i" * 37, signature=b"s" * 65, extra=b"tail")
        assert total_intent_length(buffer) == 46 + 8 + 37 + 65
        assert len(buffer) == total_intent_length(buffer) + 4


class TestPackIntent:
    """Test the reference packer."""

    def test_layout(self):
        buffer = pack_intent(SENDER, TEST_STANDARD, b"H", b"II", b"SSS", b"E")
        assert buffer[:20] == bytes.fromhex("aa" * 20)
        assert buffer[40:46] == b"\x00\x01\x00\x02\x00\x03"
        assert buffer[46:] == b"HIISSSE"

    def test_maximum_segment_length(self):
        buffer = pack_intent(SENDER, TEST_STANDARD, b"", b"x" * 65535, b"")
        assert get_lengths(buffer) == (0, 65535, 0)

    @pytest.mark.parametrize("segment", ["header", "instructions", "signature"])
    def test_rejects_overflowing_segment(self, segment):
        segments = {"header": b"", "instructions": b"", "signature": b""}
        segments[segment] = b"x" * 65536
        with pytest.raises(ValueError, match=segment):
            pack_intent(SENDER, TEST_STANDARD, **segments)

    def test_rejects_short_address(self):
        with pytest.raises(ValueError, match="20 bytes"):
            pack_intent("0x1234", TEST_STANDARD, b"", b"", b"")


class TestDecodeIntent:
    """Test slicing an intent into its segments."""

    def test_decode(self):
        buffer = pack_intent(SENDER, TEST_STANDARD, b"head", b"instr", b"sig", b"more")
        intent = decode_intent(buffer)
        assert intent.sender == to_checksum(SENDER)
        assert intent.standard == to_checksum(TEST_STANDARD)
        assert intent.header == b"head"
        assert intent.instructions == b"instr"
        assert intent.signature == b"sig"
        assert intent.extra == b"more"
        assert intent.total_length == len(buffer) - 4

    def test_decode_truncated(self):
        buffer = pack_intent(SENDER, TEST_STANDARD, b"head", b"instr", b"sig")
        with pytest.raises(MalformedIntentError, match="declares"):
            decode_intent(buffer[:-1])

    def test_json_dump_hex_encodes_bytes(self):
        intent = decode_intent(pack_intent(SENDER, TEST_STANDARD, b"\xff", b"", b""))
        dumped = intent.model_dump(mode="json")
        assert dumped["header"] == "0xff"
        assert dumped["extra"] == "0x"


class TestSplitIntents:
    """Test slicing concatenated intents from a transport buffer."""

    def test_split(self):
        first = pack_intent(SENDER, TEST_STANDARD, b"a", b"bb", b"c")
        second = pack_intent(TEST_STANDARD, SENDER, b"", b"x" * 10, b"y" * 65)
        assert split_intents(first + second) == [first, second]

    def test_split_empty(self):
        assert split_intents(b"") == []

    def test_split_truncated(self):
        first = pack_intent(SENDER, TEST_STANDARD, b"a", b"bb", b"c")
        with pytest.raises(MalformedIntentError):
            split_intents(first + first[:-1])

    def test_split_short_tail(self):
        first = pack_intent(SENDER, TEST_STANDARD, b"a", b"bb", b"c")
        with pytest.raises(MalformedIntentError, match="too short"):
            split_intents(first + b"\x00" * 10)
