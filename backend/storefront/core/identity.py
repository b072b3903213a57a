"""Identity — Telegram Web App init-data verification and web pseudonym keys.

Invariants:
    - verify() never raises on bad input: malformed, unsigned or forged tokens
      all yield None ("no identity")
    - Secret derivation: HMAC-SHA256(key=b"WebAppData", msg=bot_token)
    - Signature: hex HMAC-SHA256(key=secret, msg=sorted "key=value" lines)
    - Every received pair is signed, repeated keys included; empty `&&` segments
      are skipped. `hash`, `user` and `auth_date` read their first occurrence
    - Comparison is constant-time (hmac.compare_digest)
    - An empty bot token is a ConfigurationError at construction, never a bypass

Design Decisions:
    - Freshness window (auth_date) is opt-in: max_age_seconds=0 keeps the
      historical permissive behavior where a captured token never expires
    - Pseudonym keys are lossy by design: "Jo Ann" and "joann" share a key
"""

import hashlib
import hmac
import json
import re
import time
from typing import Iterable
from urllib.parse import parse_qsl

from storefront.core.domain_types import PSEUDONYM_PREFIX, UserKey
from storefront.core.errors import ConfigurationError

WEB_APP_DATA_KEY: bytes = b"WebAppData"

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def compute_init_data_hash(
    fields: dict[str, str] | Iterable[tuple[str, str]], bot_token: str,
) -> str:
    """Hex signature over init-data pairs (hash excluded).

    Pairs are sorted by key only; repeated keys keep their received order.
    """
    pairs = fields.items() if isinstance(fields, dict) else fields
    payload = "\n".join(f"{k}={v}" for k, v in sorted(pairs, key=lambda kv: kv[0]))
    secret = hmac.new(
        WEB_APP_DATA_KEY, bot_token.encode("utf-8"), hashlib.sha256,
    ).digest()
    return hmac.new(
        secret, payload.encode("utf-8"), hashlib.sha256,
    ).hexdigest()


class IdentityVerifier:
    """Validates opaque init-data query strings against the shared bot secret."""

    def __init__(self, bot_token: str, max_age_seconds: int = 0):
        if not bot_token:
            raise ConfigurationError(
                "BOT_TOKEN is not configured; identity verification cannot run",
                "bot_token",
            )
        self._bot_token = bot_token
        self._max_age_seconds = max_age_seconds

    def verify(self, init_data: str | None, now: float | None = None) -> dict | None:
        """Return the signed `user` object, or None when the token does not check out."""
        if not init_data:
            return None
        pairs = parse_qsl(init_data, keep_blank_values=True)
        received_hash = _first(pairs, "hash")
        if not received_hash:
            return None
        signed = [(k, v) for k, v in pairs if k != "hash"]

        expected = compute_init_data_hash(signed, self._bot_token)
        if not hmac.compare_digest(expected.encode(), received_hash.encode("utf-8")):
            return None
        if not self._is_fresh(_first(signed, "auth_date"), now):
            return None
        return _parse_user(_first(signed, "user"))

    def _is_fresh(self, auth_date: str | None, now: float | None) -> bool:
        if self._max_age_seconds <= 0:
            return True
        try:
            issued = int(auth_date)
        except (TypeError, ValueError):
            return False
        current = time.time() if now is None else now
        return current - issued <= self._max_age_seconds


def _first(pairs: list[tuple[str, str]], key: str) -> str | None:
    return next((v for k, v in pairs if k == key), None)


def _parse_user(raw: str | None) -> dict | None:
    if not raw:
        return None
    try:
        user = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(user, dict) or user.get("id") is None:
        return None
    return user


def derive_pseudonym_key(display_name: str | None) -> UserKey | None:
    """Stable key for web users without a bot identity: lowercase, alphanumerics only."""
    if not isinstance(display_name, str):
        return None
    normalized = _NON_ALNUM.sub("", display_name.strip().lower())
    if not normalized:
        return None
    return UserKey(f"{PSEUDONYM_PREFIX}{normalized}")
