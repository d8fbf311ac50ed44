"""Unit tests for invite code generation."""

from nexus.domain.service import InviteCodeGenerator, generate_invite_code
from nexus.domain.service.code_generator import CODE_ALPHABET


class TestGenerateInviteCode:
    """Tests for generate_invite_code."""

    def test_default_shape(self):
        """Default codes look like NEXUS-AB12CD."""
        code = generate_invite_code()

        assert code.root.startswith("NEXUS-")
        suffix = code.root.removeprefix("NEXUS-")
        assert len(suffix) == 6
        assert all(ch in CODE_ALPHABET for ch in suffix)

    def test_custom_prefix_and_length(self):
        code = generate_invite_code(prefix="BETA-", length=10)

        assert code.root.startswith("BETA-")
        assert len(code.root) == len("BETA-") + 10

    def test_codes_vary(self):
        """Codes come from a CSPRNG, so a batch is almost surely distinct."""
        codes = {generate_invite_code().root for _ in range(200)}

        assert len(codes) > 190


class TestInviteCodeGenerator:
    """Tests for InviteCodeGenerator."""

    def test_callable_uses_configuration(self):
        generator = InviteCodeGenerator(prefix="X-", length=4)

        code = generator()

        assert code.root.startswith("X-")
        assert len(code.root) == 6
