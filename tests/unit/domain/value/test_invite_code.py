"""Unit tests for InviteCode."""

import pytest
from pydantic import ValidationError

from nexus.domain.value import InviteCode


class TestInviteCode:
    """Tests for InviteCode."""

    def test_normalizes_to_upper_case(self):
        assert InviteCode(root=" nexus-ab12cd ").root == "NEXUS-AB12CD"

    def test_equal_regardless_of_input_case(self):
        assert InviteCode(root="nexus-ab12cd") == InviteCode(root="NEXUS-AB12CD")
        assert len({InviteCode(root="a1"), InviteCode(root="A1")}) == 1

    def test_str_is_root(self):
        assert str(InviteCode(root="NEXUS-AB12CD")) == "NEXUS-AB12CD"

    @pytest.mark.parametrize("value", ["", "-LEADING", "HAS SPACE", "BAD!", "X" * 65])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError):
            InviteCode(root=value)
