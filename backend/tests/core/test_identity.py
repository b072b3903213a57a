"""Identity tests — init-data signature verification and pseudonym keys.

Tests cover:
    - A correctly signed token yields the embedded user
    - Any altered field, wrong secret or missing hash yields None
    - Malformed input never raises
    - Optional auth_date freshness window
    - Pseudonym key normalization
"""

import json
from urllib.parse import parse_qsl, urlencode

import pytest

from storefront.core.errors import ConfigurationError
from storefront.core.identity import (
    IdentityVerifier, compute_init_data_hash, derive_pseudonym_key,
)

BOT_TOKEN = "123456:test-bot-token"
USER = {"id": 42, "username": "alice", "first_name": "Alice"}


@pytest.fixture
def verifier():
    return IdentityVerifier(BOT_TOKEN)


# --- Signature verification ---------------------------------------------------

def test_valid_token_returns_user(verifier, signed_init_data):
    user = verifier.verify(signed_init_data(USER, bot_token=BOT_TOKEN))
    assert user["id"] == 42
    assert user["username"] == "alice"


def test_altered_field_is_rejected(verifier, signed_init_data):
    fields = dict(parse_qsl(signed_init_data(USER, bot_token=BOT_TOKEN)))
    fields["user"] = json.dumps({**USER, "id": 43})
    assert verifier.verify(urlencode(fields)) is None


def test_wrong_bot_secret_is_rejected(verifier, signed_init_data):
    token = signed_init_data(USER, bot_token="999:other-bot")
    assert verifier.verify(token) is None


def test_missing_hash_is_rejected(verifier, signed_init_data):
    fields = dict(parse_qsl(signed_init_data(USER, bot_token=BOT_TOKEN)))
    del fields["hash"]
    assert verifier.verify(urlencode(fields)) is None


@pytest.mark.parametrize("init_data", [None, "", "not a query string", "hash=", "&&&"])
def test_malformed_input_yields_none(verifier, init_data):
    assert verifier.verify(init_data) is None


def test_signed_token_without_user_yields_none(verifier, signed_init_data):
    assert verifier.verify(signed_init_data(None, bot_token=BOT_TOKEN)) is None


def test_signature_covers_sorted_fields():
    a = compute_init_data_hash({"b": "2", "a": "1"}, BOT_TOKEN)
    b = compute_init_data_hash({"a": "1", "b": "2"}, BOT_TOKEN)
    assert a == b
    assert len(a) == 64


def test_empty_bot_token_is_configuration_error():
    with pytest.raises(ConfigurationError):
        IdentityVerifier("")


# --- Freshness window ---------------------------------------------------------

def test_freshness_disabled_by_default(verifier, signed_init_data):
    token = signed_init_data(USER, bot_token=BOT_TOKEN, auth_date=1)
    assert verifier.verify(token, now=2_000_000_000) is not None


def test_stale_token_rejected_when_window_set(signed_init_data):
    strict = IdentityVerifier(BOT_TOKEN, max_age_seconds=3600)
    token = signed_init_data(USER, bot_token=BOT_TOKEN, auth_date=1_700_000_000)
    assert strict.verify(token, now=1_700_000_000 + 3601) is None
    assert strict.verify(token, now=1_700_000_000 + 60)["id"] == 42


# --- Pseudonym keys -----------------------------------------------------------

def test_pseudonym_key_lowercases_and_strips():
    assert derive_pseudonym_key("  Jo Ann! ") == "pseudo_joann"


def test_pseudonyms_differing_only_in_punctuation_share_a_key():
    assert derive_pseudonym_key("Jo-Ann") == derive_pseudonym_key("joann")


@pytest.mark.parametrize("name", [None, "", "   ", "!!!", 12])
def test_pseudonym_without_alphanumerics_has_no_key(name):
    assert derive_pseudonym_key(name) is None


# --- Lenient parsing ----------------------------------------------------------

def _signed_pairs(pairs, bot_token=BOT_TOKEN):
    return urlencode([*pairs, ("hash", compute_init_data_hash(pairs, bot_token))])


def test_repeated_keys_are_all_signed(verifier):
    pairs = [
        ("auth_date", "1700000000"),
        ("tag", "a"),
        ("user", json.dumps(USER)),
        ("tag", "b"),
    ]
    assert verifier.verify(_signed_pairs(pairs))["id"] == 42

    # Signing only the last "tag" (what a dict would keep) must not verify
    collapsed = [("auth_date", "1700000000"), ("user", json.dumps(USER)), ("tag", "b")]
    forged = urlencode([*pairs, ("hash", compute_init_data_hash(collapsed, BOT_TOKEN))])
    assert verifier.verify(forged) is None


def test_empty_segments_are_tolerated(verifier, signed_init_data):
    token = signed_init_data(USER, bot_token=BOT_TOKEN)
    assert verifier.verify(f"&{token}&&")["id"] == 42


def test_non_ascii_hash_yields_none(verifier, signed_init_data):
    fields = dict(parse_qsl(signed_init_data(USER, bot_token=BOT_TOKEN)))
    fields["hash"] = "é" * 64
    assert verifier.verify(urlencode(fields)) is None
