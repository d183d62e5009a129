"""
Built-in nameserver presets.

Lets the command line accept a well-known public resolver by name
instead of its address.
"""

import ipaddress


# Pre-configured nameserver addresses
PRESETS: dict[str, str] = {
    "cloudflare": "1.1.1.1",
    "cloudflare-secondary": "1.0.0.1",
    "google": "8.8.8.8",
    "google-secondary": "8.8.4.4",
    "quad9": "9.9.9.9",
    "quad9-unsecured": "9.9.9.10",
    "opendns": "208.67.222.222",
    "adguard": "94.140.14.14",
    "controld": "76.76.2.0",
}


def parse_nameserver(value: str) -> str:
    """
    Turn a nameserver argument into an IP address string.

    Args:
        value: An IPv4/IPv6 address or a preset name (case-insensitive)

    Returns:
        The normalised address

    Raises:
        ValueError: if the value is neither an address nor a known preset
    """
    key = value.strip().lower()
    if key in PRESETS:
        return PRESETS[key]
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        raise ValueError(
            f"{value!r} is not an IP address or a known preset. "
            f"Available: {', '.join(sorted(PRESETS))}"
        ) from None


def list_presets() -> list[tuple[str, str]]:
    """List all preset names with their addresses."""
    return sorted(PRESETS.items())
