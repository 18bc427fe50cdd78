"""Opaque token generation.

All tokens come from a cryptographic random source and are never
derived from user input.
"""

from __future__ import annotations

import secrets
import string

DEVICE_TOKEN_PREFIX = "fd_"
DEVICE_TOKEN_LENGTH = 32
DEVICE_TOKEN_CHARSET = string.ascii_letters + string.digits

INVITE_TOKEN_PREFIX = "inv_"
INVITE_TOKEN_LENGTH = 24
CHALLENGE_INVITE_CHARSET = string.digits + string.ascii_lowercase  # 0-9, a-z
FRIEND_INVITE_CHARSET = string.ascii_letters + string.digits


def _random_string(charset: str, length: int) -> str:
    return "".join(secrets.choice(charset) for _ in range(length))


def generate_device_token() -> str:
    """Generate a participant device token: ``fd_`` + 32 alphanumerics."""
    return DEVICE_TOKEN_PREFIX + _random_string(DEVICE_TOKEN_CHARSET, DEVICE_TOKEN_LENGTH)


def is_valid_device_token_format(token: str) -> bool:
    if not token.startswith(DEVICE_TOKEN_PREFIX):
        return False
    suffix = token[len(DEVICE_TOKEN_PREFIX):]
    return len(suffix) == DEVICE_TOKEN_LENGTH and suffix.isascii() and suffix.isalnum()


def generate_challenge_invite_token() -> str:
    """Generate an admin challenge invite token: ``inv_`` + 24 lowercase alphanumerics."""
    return INVITE_TOKEN_PREFIX + _random_string(CHALLENGE_INVITE_CHARSET, INVITE_TOKEN_LENGTH)


def generate_friend_invite_token() -> str:
    """Generate a friend invite link token: ``inv_`` + 24 mixed-case alphanumerics."""
    return INVITE_TOKEN_PREFIX + _random_string(FRIEND_INVITE_CHARSET, INVITE_TOKEN_LENGTH)
