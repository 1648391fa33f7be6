"""Settings for a sync run, loaded from environment variables.

Environment Variables:
    UNIFI_ALIAS_SYNC_CONTROLLER: Controller URL with protocol and port (required)
    UNIFI_ALIAS_SYNC_USER: Admin username (required)
    UNIFI_ALIAS_SYNC_PASSWORD: Admin password (required)
    UNIFI_ALIAS_SYNC_VERIFY_SSL: Verify the controller certificate (default: true)
    UNIFI_ALIAS_SYNC_DRY_RUN: Only report what would change (default: true)
    UNIFI_ALIAS_SYNC_DEBUG: Trace controller traffic (default: false)
    UNIFI_ALIAS_SYNC_ALIASES: JSON object of MAC -> alias (default: {})
    UNIFI_ALIAS_SYNC_PRIORITIZED_SITES: Comma-separated site names (default: none)
    UNIFI_ALIAS_SYNC_UNIFI_OS: Controller runs on UniFi OS (default: false)

Values in a ``.env`` file are picked up via python-dotenv by the CLI.
"""
import json
import os
import re
from collections.abc import Mapping
from typing import Optional

from .api.exceptions import ConfigurationError
from .sync.domain.entities import is_valid_mac, normalize_mac

REQUIRED_SETTINGS = {
    "UNIFI_ALIAS_SYNC_CONTROLLER": "URL of the UniFi controller, including full protocol and port number.",
    "UNIFI_ALIAS_SYNC_USER": "Username of admin user.",
    "UNIFI_ALIAS_SYNC_PASSWORD": "Password for admin user.",
}

_PORT_SUFFIX = re.compile(r":[0-9]+/?$")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class SyncConfig:
    """Configuration loaded from environment variables.

    Every problem is collected first and reported in a single
    ConfigurationError, so an operator can fix them all at once.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        env = os.environ if environ is None else environ
        problems: list[str] = []

        missing = [key for key in REQUIRED_SETTINGS if not env.get(key)]
        for key in missing:
            problems.append(f"Required setting {key} was not defined: {REQUIRED_SETTINGS[key]}")

        controller = env.get("UNIFI_ALIAS_SYNC_CONTROLLER", "")
        if controller:
            if not controller.startswith("https://"):
                problems.append(
                    "The URL defined in UNIFI_ALIAS_SYNC_CONTROLLER does not include the protocol 'https://'."
                )
            if not _PORT_SUFFIX.search(controller):
                problems.append(
                    "The URL defined in UNIFI_ALIAS_SYNC_CONTROLLER does not include the port number. "
                    "This is usually 8443 or 443."
                )

        self.controller_url = controller.rstrip("/")
        self.username = env.get("UNIFI_ALIAS_SYNC_USER", "")
        self.password = env.get("UNIFI_ALIAS_SYNC_PASSWORD", "")

        self.verify_ssl = _parse_bool(env, "UNIFI_ALIAS_SYNC_VERIFY_SSL", True, problems)
        self.dry_run = _parse_bool(env, "UNIFI_ALIAS_SYNC_DRY_RUN", True, problems)
        self.debug = _parse_bool(env, "UNIFI_ALIAS_SYNC_DEBUG", False, problems)
        self.unifi_os = _parse_bool(env, "UNIFI_ALIAS_SYNC_UNIFI_OS", False, problems)

        self.aliases = _parse_aliases(env.get("UNIFI_ALIAS_SYNC_ALIASES", ""), problems)
        self.prioritized_sites = [
            name.strip()
            for name in env.get("UNIFI_ALIAS_SYNC_PRIORITIZED_SITES", "").split(",")
            if name.strip()
        ]

        if problems:
            raise ConfigurationError(problems, missing_keys=missing)

    @classmethod
    def from_env(cls) -> "SyncConfig":
        return cls(os.environ)

    def __repr__(self):
        return (
            f"SyncConfig("
            f"controller={self.controller_url}, "
            f"user={self.username}, "
            f"verify_ssl={self.verify_ssl}, "
            f"dry_run={self.dry_run}, "
            f"debug={self.debug}, "
            f"unifi_os={self.unifi_os}, "
            f"aliases={len(self.aliases)}, "
            f"prioritized_sites={self.prioritized_sites})"
        )


def _parse_bool(env: Mapping[str, str], key: str, default: bool, problems: list[str]) -> bool:
    # Unset and empty ("KEY=" in .env) both mean the default
    value = (env.get(key) or "").strip().lower()
    if not value:
        return default
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    problems.append(f"Invalid boolean for {key}: {env[key]!r}")
    return default


def _parse_aliases(raw: str, problems: list[str]) -> dict[str, str]:
    """Parse and validate the JSON object of configured aliases."""
    if not raw.strip():
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        problems.append(f"Invalid format for UNIFI_ALIAS_SYNC_ALIASES: {e}")
        return {}

    if not isinstance(data, dict):
        problems.append("Invalid format for UNIFI_ALIAS_SYNC_ALIASES: expected a JSON object of MAC => alias")
        return {}

    aliases: dict[str, str] = {}
    for mac, alias in data.items():
        if not is_valid_mac(mac):
            problems.append(f"Invalid MAC address supplied in UNIFI_ALIAS_SYNC_ALIASES: {mac}")
            continue
        if not isinstance(alias, str) or not alias.strip():
            problems.append(f"Invalid alias supplied in UNIFI_ALIAS_SYNC_ALIASES for {mac}: {alias!r}")
            continue

        key = normalize_mac(mac)
        if key in aliases and aliases[key] != alias.strip():
            problems.append(f"MAC address configured more than once in UNIFI_ALIAS_SYNC_ALIASES: {mac}")
            continue
        aliases[key] = alias.strip()

    return aliases
