"""
Warranty code generation.

Codes look like ``CB-7KQX-M4PD``: two four-character segments drawn from
an alphabet without the look-alike characters I, L, O, 0 and 1, giving a
code space of 31^8 (about 8.5e11).
"""

from __future__ import annotations

import re
import secrets
from collections.abc import Awaitable, Callable

from services.warranty.errors import CodeGenerationExhausted
from shared.logging import get_logger

logger = get_logger(__name__)

CODE_PREFIX = "CB"
CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
SEGMENT_LENGTH = 4
CODE_PATTERN = re.compile(r"^CB-[A-HJKMNP-Z2-9]{4}-[A-HJKMNP-Z2-9]{4}$")


def generate_warranty_code(
    alphabet: str = CODE_ALPHABET,
    segment_length: int = SEGMENT_LENGTH,
) -> str:
    """Return a fresh random code. Uniqueness is the caller's job."""
    if not alphabet:
        raise ValueError("alphabet must not be empty")

    def segment() -> str:
        return "".join(secrets.choice(alphabet) for _ in range(segment_length))

    return f"{CODE_PREFIX}-{segment()}-{segment()}"


def normalize_code(text: str) -> str:
    """Trim and upper-case a code typed by a user."""
    return text.strip().upper()


def is_valid_code(text: str) -> bool:
    return bool(CODE_PATTERN.match(text))


async def generate_unique_code(
    exists: Callable[[str], Awaitable[bool]],
    max_attempts: int = 5,
    generator: Callable[[], str] = generate_warranty_code,
) -> str:
    """
    Generate a code not yet present in the store.

    Args:
        exists: Async predicate reporting whether a code is taken.
        max_attempts: Generation attempts before giving up.
        generator: Code factory, overridable for tests.

    Raises:
        CodeGenerationExhausted: If every attempt collided.
    """
    for attempt in range(1, max_attempts + 1):
        code = generator()
        if not await exists(code):
            return code
        logger.warning("warranty_code_collision", code=code, attempt=attempt)

    logger.error("warranty_code_generation_exhausted", attempts=max_attempts)
    raise CodeGenerationExhausted(
        f"Could not generate an unused warranty code after {max_attempts} attempts"
    )
