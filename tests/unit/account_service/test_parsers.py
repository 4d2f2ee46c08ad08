"""
Unit tests for phone number and website parsing
"""
import pytest

from microservices.account_service.parsers import parse_phone_number, parse_website
from microservices.account_service.protocols import InvalidArgumentError

pytestmark = pytest.mark.unit


class TestParsePhoneNumber:

    @pytest.mark.parametrize("raw,region", [
        ("+4971125242890", ""),
        ("+49 711 / 25 24 28-90", ""),
        ("+49 711 / 25 24 28-90", "DE"),
        ("0711 / 25 24 28-90", "DE"),
        ("0711 / 25 24 28-90", "de"),
    ])
    def test_valid_number_is_formatted_as_e164(self, raw, region):
        assert parse_phone_number(raw, region) == "+4971125242890"

    def test_national_number_without_region_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            parse_phone_number("0711 / 25 24 28-90", "")

    @pytest.mark.parametrize("raw", ["not a number", "+49 1", "+", ""])
    def test_garbage_is_rejected(self, raw):
        with pytest.raises(InvalidArgumentError):
            parse_phone_number(raw, "DE")

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_phone_number("abc", "DE")


class TestParseWebsite:

    @pytest.mark.parametrize("raw", [
        "https://example.com",
        "http://example.com/some/path?q=1",
        "HTTPS://Example.COM",
        "https://user@example.com:8443/",
    ])
    def test_http_urls_are_returned_unchanged(self, raw):
        assert parse_website(raw) == raw

    @pytest.mark.parametrize("raw", [
        "example.com",
        "//example.com",
        "ftp://example.com",
        "javascript:alert(1)",
        "https://",
        "http://[invalid",
    ])
    def test_other_inputs_are_rejected(self, raw):
        with pytest.raises(InvalidArgumentError):
            parse_website(raw)
