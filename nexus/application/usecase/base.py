"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """Base use case for orchestrating domain services.

    Use cases translate request models into domain calls. Engine errors
    propagate unchanged; the interface layer maps them to responses.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        pass
