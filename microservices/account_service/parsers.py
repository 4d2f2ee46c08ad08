"""
Account Property Value Parsers

Validation and normalization of phone numbers and websites.
"""

from urllib.parse import urlsplit

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat

from .protocols import InvalidArgumentError

ALLOWED_WEBSITE_SCHEMES = ("http", "https")


def parse_phone_number(raw_input: str, default_region: str = "") -> str:
    """
    Parse a phone number into E.164 format.

    Args:
        raw_input: Number as typed by the user
        default_region: ISO 3166 region used when the number has no country code

    Returns:
        E.164 formatted number, e.g. "+4971125242890"

    Raises:
        InvalidArgumentError: If the number cannot be parsed or is not valid
    """
    region = default_region.strip().upper() or None
    try:
        number = phonenumbers.parse(raw_input, region)
    except NumberParseException as e:
        raise InvalidArgumentError(f"Invalid phone number: {e}") from e

    if not phonenumbers.is_valid_number(number):
        raise InvalidArgumentError("Invalid phone number for the region")

    return phonenumbers.format_number(number, PhoneNumberFormat.E164)


def parse_website(raw_input: str) -> str:
    """
    Check that a website is an absolute http(s) URL with a host.

    Returns:
        The input unchanged

    Raises:
        InvalidArgumentError: Other scheme, protocol-relative URL or missing host
    """
    try:
        parts = urlsplit(raw_input)
        hostname = parts.hostname
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid website: {e}") from e

    if parts.scheme.lower() not in ALLOWED_WEBSITE_SCHEMES:
        raise InvalidArgumentError("Unsupported website scheme")
    if not hostname:
        raise InvalidArgumentError("Website has no host")

    return raw_input
