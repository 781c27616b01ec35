from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional

from ..core.constants import DEDUCTIONS_CACHE_TTL, EMPLOYEES_CACHE_TTL, STATS_CACHE_TTL
from ..deductions.model import installment_amount
from .api_client import ApiResult, BackofficeClient
from .cache import TTLCache

BASE = "/deductions"

_LIST_PREFIX = "deductions:"
_EMPLOYEE_PREFIX = "employee-deductions:"
_MONTH_PREFIX = "month-deductions:"
_STATS_KEY = "deduction-stats"
_EMPLOYEES_KEY = "active-employees"


def _list_key(filters: Mapping[str, Any]) -> str:
    parts = [f"{k}={filters[k]}" for k in sorted(filters) if filters[k] not in (None, "")]
    return _LIST_PREFIX + "&".join(parts)


class DeductionClient:
    """Deductions API with cached reads.

    Lists are cached for 2 minutes, stats for 1 minute and the employee
    dropdown for 5 minutes. Every write drops the deduction and stats entries.
    """

    def __init__(self, client: BackofficeClient, *, cache: Optional[TTLCache] = None):
        self._client = client
        self._cache = cache if cache is not None else TTLCache()

    async def _cached_get(self, key: str, path: str, ttl: float, params: Optional[Mapping[str, Any]] = None):
        hit = self._cache.get(key)
        if hit is not None:
            return hit
        result = await self._client.get(path, params=params, key=key)
        if result.success:
            self._cache.set(key, result, ttl)
        return result

    def invalidate(self) -> None:
        for prefix in (_LIST_PREFIX, _EMPLOYEE_PREFIX, _MONTH_PREFIX):
            self._cache.invalidate_prefix(prefix)
        self._cache.invalidate(_STATS_KEY)

    async def list_deductions(self, **filters: Any) -> ApiResult:
        params = {k: v for k, v in filters.items() if v not in (None, "")}
        return await self._cached_get(_list_key(params), f"{BASE}/deductions", DEDUCTIONS_CACHE_TTL, params)

    async def get_stats(self) -> ApiResult:
        return await self._cached_get(_STATS_KEY, f"{BASE}/deductions/stats", STATS_CACHE_TTL)

    async def get_active_employees(self) -> ApiResult:
        return await self._cached_get(_EMPLOYEES_KEY, f"{BASE}/employees/active", EMPLOYEES_CACHE_TTL)

    async def get_employee_deductions(self, employee_id: str) -> ApiResult:
        return await self._cached_get(
            _EMPLOYEE_PREFIX + employee_id, f"{BASE}/employees/{employee_id}/deductions", DEDUCTIONS_CACHE_TTL
        )

    async def get_month_deductions(self, year: int, month: int) -> ApiResult:
        return await self._cached_get(
            f"{_MONTH_PREFIX}{year}-{month:02d}", f"{BASE}/deductions/month/{year}/{month:02d}", DEDUCTIONS_CACHE_TTL
        )

    async def get_deduction(self, deduction_id: int) -> ApiResult:
        return await self._client.get(f"{BASE}/deductions/{deduction_id}")

    async def create_deduction(self, payload: Mapping[str, Any]) -> ApiResult:
        try:
            return await self._client.post(f"{BASE}/deductions", json=dict(payload))
        finally:
            self.invalidate()

    async def update_deduction(self, deduction_id: int, payload: Mapping[str, Any]) -> ApiResult:
        try:
            return await self._client.put(f"{BASE}/deductions/{deduction_id}", json=dict(payload))
        finally:
            self.invalidate()

    async def delete_deduction(self, deduction_id: int) -> ApiResult:
        try:
            return await self._client.delete(f"{BASE}/deductions/{deduction_id}")
        finally:
            self.invalidate()

    @staticmethod
    def installment_amount(amount: Any, repayment_months: int) -> Decimal:
        """Preview of the installment the server will store for an advance."""

        return installment_amount(Decimal(str(amount or 0)), int(repayment_months or 0))
