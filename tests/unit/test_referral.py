"""Unit tests for referral code generation and share links."""
import re

import pytest
from src.utils.referral import (
    build_referral_url,
    build_share_message,
    generate_referral_code,
    to_base36,
)

CODE_PATTERN = re.compile(r"^SUBX[A-Z0-9]{1,6}$")


def _expected_code(email, timestamp_ms):
    checksum = sum(ord(char) for char in f"{email}{timestamp_ms}")
    digits = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    rendered = ""
    while checksum:
        checksum, remainder = divmod(checksum, 36)
        rendered = digits[remainder] + rendered
    return "SUBX" + (rendered or "0")[:6]


class TestToBase36:
    """Test base-36 rendering."""

    def test_zero(self):
        assert to_base36(0) == "0"

    def test_single_digits(self):
        assert to_base36(9) == "9"
        assert to_base36(10) == "A"
        assert to_base36(35) == "Z"

    def test_multi_digit(self):
        assert to_base36(36) == "10"
        assert to_base36(1295) == "ZZ"
        assert to_base36(46656) == "1000"

    def test_matches_int_parsing(self):
        for number in (1, 77, 1234, 987654321):
            assert int(to_base36(number), 36) == number

    def test_negative_raises_error(self):
        with pytest.raises(ValueError, match="negative"):
            to_base36(-1)


class TestGenerateReferralCode:
    """Test referral code generation."""

    def test_known_value(self):
        # "a@b.c" + "0": 97+64+98+46+99+48 = 452 = "CK" in base 36
        assert generate_referral_code("a@b.c", timestamp_ms=0) == "SUBXCK"

    def test_matches_checksum_algorithm(self):
        timestamp = 1730000000000
        assert generate_referral_code("ada@example.com", timestamp) == _expected_code(
            "ada@example.com", timestamp
        )

    def test_format(self):
        code = generate_referral_code("ada@example.com")
        assert CODE_PATTERN.match(code)
        assert len(code) <= 10

    def test_short_checksum_kept_as_is(self):
        # sum of "" + "1" is 49 = "1D"
        assert generate_referral_code("", timestamp_ms=1) == "SUBX1D"

    def test_long_checksum_truncated_to_six(self):
        # 2000 * 0x10FFFF exceeds 36 ** 6, so the checksum has seven base-36 digits
        email = "\U0010ffff" * 2000
        code = generate_referral_code(email, timestamp_ms=1730000000000)
        assert len(code) == 10
        assert code == _expected_code(email, 1730000000000)
        assert CODE_PATTERN.match(code)

    def test_uses_current_time_when_not_given(self, monkeypatch):
        monkeypatch.setattr("src.utils.referral.now_millis", lambda: 1730000000123)
        assert generate_referral_code("ada@example.com") == _expected_code(
            "ada@example.com", 1730000000123
        )

    def test_same_checksum_collides(self):
        # Anagrams share the code-point sum, so they collide in the same millisecond
        assert generate_referral_code("ab@c.d", 5) == generate_referral_code("ba@c.d", 5)


class TestReferralLinks:
    """Test share link helpers."""

    def test_build_referral_url(self):
        assert build_referral_url("SUBXCK") == "https://subx.ng/r/SUBXCK"

    def test_build_referral_url_custom_base_without_slash(self):
        assert build_referral_url("SUBXCK", "https://example.com/invite") == (
            "https://example.com/invite/SUBXCK"
        )

    def test_build_share_message(self):
        message = build_share_message("https://subx.ng/r/SUBXCK")
        assert message.startswith("I just joined Subx")
        assert message.endswith("https://subx.ng/r/SUBXCK")
