"""Test configuration and fixtures."""

from collections.abc import Callable
from typing import Any

from dishka import AsyncContainer
import logfire

from nexus.config import InvitationSettings
from nexus.domain.model import Issuer
from nexus.domain.repository import UnitOfWorkFactory
from nexus.domain.service import (
    InviteChangeFeed,
    InviteCodeGenerator,
    InviteService,
    QuotaLedger,
)
from nexus.domain.value import InviteCode, IssuerId, IssuerRole
from nexus.persistence.repository.inmemory import InMemoryUnitOfWorkFactory

# Keep spans and logs local during test runs
logfire.configure(send_to_logfire=False, console=False)


async def seed_issuer(
    env: AsyncContainer | UnitOfWorkFactory,
    issuer_id: str,
    invites_available: int = 1,
    role: IssuerRole = IssuerRole.ORDINARY,
) -> Issuer:
    """Create or overwrite an issuer's ledger record.

    Args:
        env: Test container, or a unit of work factory
        issuer_id: Issuer ID
        invites_available: Quota to grant
        role: Issuer role

    Returns:
        The stored issuer
    """
    if isinstance(env, UnitOfWorkFactory):
        uow_factory = env
    else:
        uow_factory = await env.get(UnitOfWorkFactory)

    async with uow_factory() as uow:
        issuer = await uow.issuers.save(
            Issuer(
                id=IssuerId(issuer_id),
                role=role,
                invites_available=invites_available,
            )
        )
        await uow.commit()
    return issuer


def build_invite_service(
    uow_factory: UnitOfWorkFactory | None = None,
    code_generator: Callable[[], InviteCode] | None = None,
    **settings_overrides: Any,
) -> InviteService:
    """Wire an InviteService over an in-memory store.

    Retries back off with a bare yield unless overridden, so contention
    tests run fast.

    Args:
        uow_factory: Unit of work factory, defaults to a fresh in-memory one
        code_generator: Code generator, defaults to random codes
        **settings_overrides: InvitationSettings fields to override
    """
    settings_overrides.setdefault("retry_backoff_seconds", 0)
    settings = InvitationSettings(**settings_overrides)
    uow_factory = uow_factory or InMemoryUnitOfWorkFactory()
    return InviteService(
        uow_factory=uow_factory,
        quota_ledger=QuotaLedger(uow_factory, policy=settings.quota_policy),
        code_generator=code_generator
        or InviteCodeGenerator(settings.code_prefix, settings.code_length),
        change_feed=InviteChangeFeed(uow_factory, settings.feed_buffer_size),
        settings=settings,
    )


def fixed_codes(*codes: str) -> Callable[[], InviteCode]:
    """Code generator returning the given codes in order, repeating the last."""
    remaining = list(codes)

    def _next() -> InviteCode:
        code = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        return InviteCode(root=code)

    return _next
