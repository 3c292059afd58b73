# dosecalc/domain/ports.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional

from .models import Product, Route
from .plans import DosagePlan


class DosageResolverPort(ABC):
    """Maps (weight, route) to a concrete plan for one dosing scheme."""
    @abstractmethod
    def resolve(self, weight: float, product: Product, route: Optional[Route] = None) -> Optional[DosagePlan]: ...


class CachePort(ABC):
    @abstractmethod
    async def get_json(self, key: str) -> Any: ...
    @abstractmethod
    async def set_json(self, key: str, value: Any, ttl: Optional[int] = None): ...
    @abstractmethod
    async def delete(self, *keys: str) -> int: ...
