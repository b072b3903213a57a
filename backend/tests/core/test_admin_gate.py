"""Admin gate tests — bcrypt hashing and credential checks."""

import pytest

from storefront.core.admin_gate import bootstrap_hash_factory, check_credential, hash_password


def test_hash_verifies_plain_password():
    hashed = hash_password("s3cret", rounds=4)
    assert hashed.startswith("$2b$04$")
    assert check_credential("s3cret", hashed)
    assert not check_credential("wrong", hashed)


@pytest.mark.parametrize("credential, stored", [
    (None, "$2b$04$abc"),
    ("", "$2b$04$abc"),
    (123, "$2b$04$abc"),
    ("pw", None),
    ("pw", ""),
    ("pw", "not-a-bcrypt-hash"),
])
def test_bad_inputs_never_raise(credential, stored):
    assert check_credential(credential, stored) is False


def test_bootstrap_factory_hashes_once():
    factory = bootstrap_hash_factory("changeme", rounds=4)
    first = factory()
    assert factory() == first
    assert check_credential("changeme", first)
