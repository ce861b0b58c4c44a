"""Security module for password hashing."""

from .passwords import DEFAULT_BCRYPT_ROUNDS, PasswordCodec

__all__ = [
    "DEFAULT_BCRYPT_ROUNDS",
    "PasswordCodec",
]
