"""Join code generation."""
from __future__ import annotations

import secrets
import string

JOIN_CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def generate_join_code(length: int = 4, alphabet: str = JOIN_CODE_ALPHABET) -> str:
    """Return ``length`` characters, each an independent uniform draw from ``alphabet``.

    ``secrets.choice`` draws from the OS CSPRNG without modulo bias.
    """
    if length <= 0:
        raise ValueError("join code length must be positive")
    return "".join(secrets.choice(alphabet) for _ in range(length))
