"""Tests for warranty code generation."""

import re
from collections import Counter

import pytest

from services.warranty.codes import (
    CODE_ALPHABET,
    generate_unique_code,
    generate_warranty_code,
    is_valid_code,
    normalize_code,
)
from services.warranty.errors import CodeGenerationExhausted


FORMAT = re.compile(r"^CB-[A-HJ-NP-Z2-9]{4}-[A-HJ-NP-Z2-9]{4}$")


class TestGenerateWarrantyCode:
    """Tests for generate_warranty_code."""

    def test_format(self) -> None:
        """Every generated code matches CB-XXXX-XXXX."""
        for _ in range(500):
            code = generate_warranty_code()
            assert FORMAT.match(code), code
            assert is_valid_code(code)

    def test_no_confusable_characters(self) -> None:
        """Codes never contain I, L, O, 0 or 1."""
        body = "".join(generate_warranty_code()[3:] for _ in range(500))
        assert not set(body) & set("ILO01")

    def test_alphabet(self) -> None:
        assert CODE_ALPHABET == "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
        assert len(set(CODE_ALPHABET)) == len(CODE_ALPHABET)

    def test_characters_spread_over_alphabet(self) -> None:
        """A large sample touches (nearly) every symbol."""
        counts = Counter(
            ch
            for _ in range(2000)
            for ch in generate_warranty_code().replace("CB-", "").replace("-", "")
        )
        assert len(counts) == len(CODE_ALPHABET)

    def test_alphabet_override(self) -> None:
        code = generate_warranty_code(alphabet="X")
        assert code == "CB-XXXX-XXXX"

    def test_empty_alphabet_rejected(self) -> None:
        with pytest.raises(ValueError):
            generate_warranty_code(alphabet="")

    def test_codes_differ(self) -> None:
        codes = {generate_warranty_code() for _ in range(200)}
        assert len(codes) == 200


class TestNormalizeCode:
    """Tests for code normalization and validation."""

    def test_trims_and_uppercases(self) -> None:
        assert normalize_code("  cb-abcd-efgh \n") == "CB-ABCD-EFGH"

    @pytest.mark.parametrize(
        "text",
        ["CB-ABC-DEF", "CB-ABCD-EFG0", "XX-ABCD-EFGH", "CB-ABCD-EFGI", "cb-abcd-efgh"],
    )
    def test_invalid_codes(self, text: str) -> None:
        assert not is_valid_code(text)


class TestGenerateUniqueCode:
    """Tests for collision retry."""

    @pytest.mark.asyncio
    async def test_retries_on_collision(self) -> None:
        candidates = iter(["CB-AAAA-AAAA", "CB-BBBB-BBBB", "CB-CCCC-CCCC"])
        taken = {"CB-AAAA-AAAA", "CB-BBBB-BBBB"}

        async def exists(code: str) -> bool:
            return code in taken

        code = await generate_unique_code(exists, generator=lambda: next(candidates))

        assert code == "CB-CCCC-CCCC"

    @pytest.mark.asyncio
    async def test_exhaustion_raises(self) -> None:
        calls = 0

        async def exists(code: str) -> bool:
            nonlocal calls
            calls += 1
            return True

        with pytest.raises(CodeGenerationExhausted):
            await generate_unique_code(exists, max_attempts=3)

        assert calls == 3
