"""Admin Gate — password hashing and the password-as-credential check.

Invariants:
    - The stored secret is a bcrypt hash ($2a$/$2b$), never the password
    - check_credential returns False (never raises) for empty, non-str or
      malformed inputs
    - The credential handed back by authenticate() IS the admin password;
      every privileged call re-checks it against the current hash, so a
      password change revokes all outstanding credentials

Design Decisions:
    - Password-as-bearer kept for compatibility with the existing admin panel
      (no session store, no expiry)
    - bcrypt over hashlib: the persisted data.json already holds bcrypt hashes
"""

from typing import Callable

import bcrypt

DEFAULT_BCRYPT_ROUNDS: int = 10


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def check_credential(credential: object, password_hash: object) -> bool:
    """Compare a presented credential against the stored bcrypt hash."""
    if not isinstance(credential, str) or not credential:
        return False
    if not isinstance(password_hash, str) or not password_hash:
        return False
    try:
        return bcrypt.checkpw(
            credential.encode("utf-8"), password_hash.encode("utf-8"),
        )
    except ValueError:
        # Not a bcrypt hash (corrupted admin block)
        return False


def bootstrap_hash_factory(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> Callable[[], str]:
    """Lazily hash the bootstrap password once per process.

    Until the first save, every load of an empty store needs a hash; reusing one
    keeps reads cheap and any bcrypt hash of the same password verifies.
    """
    cached: list[str] = []

    def factory() -> str:
        if not cached:
            cached.append(hash_password(password, rounds))
        return cached[0]

    return factory
