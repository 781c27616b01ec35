from __future__ import annotations

import asyncio
from collections import Counter
from decimal import Decimal

import httpx

from src.hr_backoffice.hr_backoffice.client.api_client import BackofficeClient
from src.hr_backoffice.hr_backoffice.client.cache import TTLCache
from src.hr_backoffice.hr_backoffice.client.deductions import DeductionClient


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _transport(hits: Counter) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        hits[(request.method, request.url.path)] += 1
        if request.method == "POST":
            return httpx.Response(201, json={"success": True, "data": {"id": 1}})
        return httpx.Response(200, json={"success": True, "data": []})

    return httpx.MockTransport(handler)


def test_reads_are_cached_until_ttl():
    hits: Counter = Counter()
    clock = FakeClock()

    async def run():
        async with BackofficeClient("http://test/api", transport=_transport(hits)) as client:
            deductions = DeductionClient(client, cache=TTLCache(clock=clock))
            await deductions.list_deductions(page=1, status="pending")
            await deductions.list_deductions(status="pending", page=1)
            await deductions.get_stats()
            clock.now = 61
            await deductions.get_stats()
            await deductions.list_deductions(page=1, status="pending")

    asyncio.run(run())

    assert hits[("GET", "/api/deductions/deductions")] == 1
    assert hits[("GET", "/api/deductions/deductions/stats")] == 2


def test_writes_invalidate_cached_reads():
    hits: Counter = Counter()

    async def run():
        async with BackofficeClient("http://test/api", transport=_transport(hits)) as client:
            deductions = DeductionClient(client, cache=TTLCache(clock=FakeClock()))
            await deductions.list_deductions()
            await deductions.get_active_employees()
            result = await deductions.create_deduction({"employeeId": "E1", "type": "fine", "amount": 100})
            await deductions.list_deductions()
            await deductions.get_active_employees()
            return result

    created = asyncio.run(run())

    assert created.success
    assert hits[("GET", "/api/deductions/deductions")] == 2
    assert hits[("GET", "/api/deductions/employees/active")] == 1


def test_installment_preview():
    assert DeductionClient.installment_amount("1000", 3) == Decimal("333.33")
    assert DeductionClient.installment_amount(1000, 0) == Decimal("1000.00")
