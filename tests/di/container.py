"""Test container builder with selective unmocking."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from nexus.util.di import PROVIDERS, Component, get_provider


def build_test_container(
    unmock: set[Component] | None = None, with_fastapi: bool = False
) -> AsyncContainer:
    """Build test container with selective unmocking.

    Integration runs assume PostgreSQL is reachable at DATABASE__URL with
    migrations applied.

    Args:
        unmock: Components to use production implementations for.
                All others use mocks if available.
        with_fastapi: Include the FastAPI integration provider, needed when
                the container backs a FastAPI app

    Returns:
        Configured test container

    Raises:
        ValueError: If unknown components are requested

    Examples:
        # Unit tests - all mocks
        container = build_test_container()

        # Integration tests - real persistence
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    _validate_unmock(unmock)

    provider_instances = []
    for base in PROVIDERS:
        component_name = getattr(base, "__mock_component__", None)
        use_mock = component_name is not None and component_name not in unmock
        provider_class = get_provider(base, use_mock=use_mock)
        provider_instances.append(provider_class())

    if with_fastapi:
        provider_instances.append(FastapiProvider())

    return make_async_container(*provider_instances)


def _validate_unmock(unmock: set[Component]) -> None:
    """Validate unmock configuration.

    Raises:
        ValueError: If unknown components are requested
    """
    all_components = {
        p.__mock_component__ for p in PROVIDERS if p.__mock_component__ is not None
    }
    unknown = unmock - all_components
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")
