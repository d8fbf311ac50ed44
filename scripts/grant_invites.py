#!/usr/bin/env python3
"""Replenish an issuer's invite quota.

Usage:
    python scripts/grant_invites.py alice                # Set alice's quota to 1
    python scripts/grant_invites.py alice --invites 5    # Set it to 5
    python scripts/grant_invites.py alice --invites 2 --add
    python scripts/grant_invites.py admin --role privileged
"""

import argparse
import asyncio
import sys

import logfire

from nexus.config import Settings
from nexus.domain.model import Issuer
from nexus.domain.repository import UnitOfWorkFactory
from nexus.domain.value import IssuerId, IssuerRole
from nexus.util.di.container import create_container
from nexus.util.logging import setup_logging
from nexus.util.observability import configure_logfire


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Grant invites to an issuer.")
    parser.add_argument("issuer_id", help="Issuer account ID")
    parser.add_argument(
        "--invites", type=int, default=1, help="Quota to grant (default: 1)"
    )
    parser.add_argument(
        "--add",
        action="store_true",
        help="Add to the current quota instead of replacing it",
    )
    parser.add_argument(
        "--role",
        choices=[role.value for role in IssuerRole],
        help="Also change the issuer's role",
    )
    return parser.parse_args()


async def grant(
    uow_factory: UnitOfWorkFactory,
    issuer_id: IssuerId,
    invites: int,
    add: bool = False,
    role: IssuerRole | None = None,
) -> Issuer:
    """Write the issuer's new quota.

    The write bumps the ledger version, so an issuance racing with it
    re-reads the new quota instead of overwriting it.
    """
    async with uow_factory() as uow:
        current = await uow.issuers.find_by_id(issuer_id)
        if current is None:
            current = Issuer(id=issuer_id)
        available = max(0, current.invites_available) + invites if add else invites
        issuer = await uow.issuers.save(
            current.model_copy(
                update={
                    "invites_available": available,
                    "role": role or current.role,
                }
            )
        )
        await uow.commit()
    return issuer


async def run(args: argparse.Namespace) -> Issuer:
    container = create_container()
    try:
        uow_factory = await container.get(UnitOfWorkFactory)
        return await grant(
            uow_factory,
            IssuerId(args.issuer_id),
            args.invites,
            add=args.add,
            role=IssuerRole(args.role) if args.role else None,
        )
    finally:
        await container.close()


def main() -> int:
    args = parse_args()
    if args.invites < 0:
        print("--invites must not be negative", file=sys.stderr)
        return 2

    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    issuer = asyncio.run(run(args))
    logfire.info(
        "Invites granted",
        issuer_id=issuer.id,
        role=issuer.role.value,
        invites_available=issuer.invites_available,
    )
    print(f"{issuer.id}: {issuer.invites_available} invites ({issuer.role.value})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
