"""Normalization helpers for phone numbers, MAC addresses and IPs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

PHONE_DIGITS = 10
MAC_HEX_DIGITS = 12

_NON_DIGITS = re.compile(r"\D")
_NON_HEX = re.compile(r"[^0-9A-Fa-f]")
_IPV4_PATTERN = re.compile(r"^(\d{1,3}\.){3}\d{1,3}$")


@dataclass(frozen=True)
class PhoneCountry:
    value: str
    label: str
    flag: str
    code: str


PHONE_COUNTRIES = (
    PhoneCountry(value="MX", label="México", flag="🇲🇽", code="+52"),
    PhoneCountry(value="US", label="EE.UU.", flag="🇺🇸", code="+1"),
)

STATUS_TRANSLATIONS = {
    "pending": "PENDIENTE",
    "finalized": "FINALIZADO",
    "cancelled": "CANCELADO",
    "active": "ACTIVO",
}


def get_country_info(country: Optional[str]) -> PhoneCountry:
    """Return the dialing info for ``country``, defaulting to Mexico."""

    for option in PHONE_COUNTRIES:
        if option.value == country:
            return option
    return PHONE_COUNTRIES[0]


def unformat_phone_number(value: str) -> str:
    return _NON_DIGITS.sub("", value or "")


def format_phone_number(value: str) -> str:
    """Format up to ten digits as ``XXX-XXX-XXXX``."""

    digits = unformat_phone_number(value)[:PHONE_DIGITS]
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]}-{digits[3:]}"
    return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"


def format_phone_with_country(phone: Optional[str], country: Optional[str]) -> str:
    if not phone:
        return ""
    info = get_country_info(country)
    return f"{info.flag} {info.code} {format_phone_number(phone)}"


def format_phone_display(phone: Optional[str], country: Optional[str] = None) -> str:
    if not phone:
        return "-"
    info = get_country_info(country)
    return f"{info.flag} {format_phone_number(phone)}"


def is_phone_complete(phone: Optional[str]) -> bool:
    # Blank values are accepted for optional fields.
    if not phone:
        return True
    return len(unformat_phone_number(phone)) == PHONE_DIGITS


def format_mac_address(value: str) -> str:
    """Group up to twelve hex digits as ``XX:XX:XX:XX:XX:XX``."""

    hex_digits = _NON_HEX.sub("", value or "").upper()[:MAC_HEX_DIGITS]
    return ":".join(hex_digits[index : index + 2] for index in range(0, len(hex_digits), 2))


def unformat_mac_address(value: str) -> str:
    return (value or "").replace(":", "")


def is_valid_mac_address(value: str) -> bool:
    return re.fullmatch(r"[0-9A-Fa-f]{12}", unformat_mac_address(value)) is not None


def is_mac_address_complete(value: Optional[str]) -> bool:
    if not value:
        return True
    return len(unformat_mac_address(value)) == MAC_HEX_DIGITS


def is_valid_ip_address(ip: Optional[str]) -> bool:
    if not ip:
        return True
    if not _IPV4_PATTERN.match(ip):
        return False
    return all(int(octet) <= 255 for octet in ip.split("."))


def translate_status(status: str) -> str:
    return STATUS_TRANSLATIONS.get(status, status.upper())
