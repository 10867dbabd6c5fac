"""Password hashing utilities.

Uses argon2id, a memory-hard hash with tunable time and memory cost.
Each call draws a fresh 32-byte salt from the OS CSPRNG; the salt and
cost parameters are embedded in the encoded PHC string
("$argon2id$v=19$m=...,t=...,p=...$salt$hash"), so nothing besides the
hash itself has to be stored.

A wrong password is a normal outcome (``False``). A hash that can't be
parsed or computed is an InternalError: that's a broken record or a
broken runtime, not a failed login.
"""

import secrets

from argon2 import PasswordHasher, Type
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from ephemeris.config import settings
from ephemeris.errors import InternalError

SALT_BYTES = 32

_hasher = PasswordHasher(
    time_cost=settings.argon2_time_cost,
    memory_cost=settings.argon2_memory_cost,
    parallelism=settings.argon2_parallelism,
    salt_len=SALT_BYTES,
    type=Type.ID,
)


def hash_password(password: str) -> str:
    """Hash a password with argon2id and a fresh random salt."""
    salt = secrets.token_bytes(SALT_BYTES)
    try:
        return _hasher.hash(password, salt=salt)
    except HashingError as e:
        raise InternalError(f"Couldn't hash password: {e}") from e


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its encoded hash.

    The byte comparison happens inside argon2 in constant time.
    """
    try:
        return _hasher.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError) as e:
        raise InternalError(f"Couldn't verify hash: {e}") from e


def needs_rehash(password_hash: str) -> bool:
    """Check if a hash was made with different cost parameters than today's."""
    try:
        return _hasher.check_needs_rehash(password_hash)
    except InvalidHashError as e:
        raise InternalError(f"Couldn't parse hash: {e}") from e
