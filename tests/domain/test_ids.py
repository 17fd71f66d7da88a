"""Tests for runtime id generation."""

from __future__ import annotations

import re

import pytest

from deskctl.domain.ids import ID_PREFIXES, generate_id


class TestGenerateId:
    @pytest.mark.parametrize("kind", sorted(ID_PREFIXES))
    def test_prefix_and_hex_suffix(self, kind: str) -> None:
        value = generate_id(kind)
        assert value.startswith(ID_PREFIXES[kind])
        assert re.fullmatch(r"[0-9a-f]{12}", value.removeprefix(ID_PREFIXES[kind]))

    def test_unique(self) -> None:
        assert len({generate_id("tag") for _ in range(100)}) == 100

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="Unknown id kind"):
            generate_id("widget")
