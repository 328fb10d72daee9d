"""
Password hashing with Argon2id.

Argon2id is the recommended password hashing algorithm because:
- Memory-hard (resists GPU/ASIC attacks)
- Side-channel resistant (id variant)
- Winner of the Password Hashing Competition

The cost parameters come from settings so tests and small hosts can dial
them down; the defaults aim at ~250ms per hash with 64MB of memory.
"""

import secrets
import string
from functools import lru_cache
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

MIN_PASSWORD_LENGTH = 8


class PasswordManager:
    """Salted one-way hashing and verification."""

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4):
        self._ph = PasswordHasher(
            time_cost=time_cost,        # Number of iterations
            memory_cost=memory_cost,    # KiB of memory per hash
            parallelism=parallelism,    # Number of parallel lanes
            hash_len=32,                # Length of the hash in bytes
            salt_len=16,                # Length of the random salt
        )
        self._dummy_hash: Optional[str] = None

    def hash(self, password: str) -> str:
        """
        Hash a password.

        Returns the encoded digest (includes algorithm, params, salt, and hash).
        """
        return self._ph.hash(password)

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        """
        Verify a password against its hash.

        Returns False on mismatch and on a malformed or missing digest;
        never raises for bad input.
        """
        if not password_hash:
            return False
        try:
            return self._ph.verify(password_hash, password)
        except VerificationError:
            return False
        except InvalidHashError:
            # Hash is malformed - treat as verification failure
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """True if the digest was produced with different cost parameters."""
        try:
            return self._ph.check_needs_rehash(password_hash)
        except InvalidHashError:
            return True

    def dummy_verify(self, password: str) -> None:
        """
        Burn one verification worth of CPU.

        Called when no user matches an email so the response time does not
        reveal whether the account exists.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(16))
        self.verify(password, self._dummy_hash)


@lru_cache
def get_password_manager_for(time_cost: int, memory_cost: int, parallelism: int) -> PasswordManager:
    """One shared manager per cost configuration."""
    return PasswordManager(time_cost=time_cost, memory_cost=memory_cost, parallelism=parallelism)


def is_strong_enough(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def generate_temp_password(length: int = 16) -> str:
    """
    Generate a secure temporary password.

    Used when bootstrapping an administrator account.
    """
    if length < 12:
        length = 12

    # Ensure at least one of each required character type
    password = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
        secrets.choice("!@#$%^&*"),
    ]

    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    password.extend(secrets.choice(alphabet) for _ in range(length - 4))

    # Shuffle to avoid predictable positions
    secrets.SystemRandom().shuffle(password)

    return "".join(password)
