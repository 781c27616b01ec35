from __future__ import annotations

import asyncio
from dataclasses import dataclass

from .api_client import ApiResult, BackofficeClient


@dataclass(frozen=True)
class PayrollDashboard:
    month: str
    payroll: ApiResult
    structures: ApiResult
    slips: ApiResult
    summary: ApiResult

    @property
    def errors(self) -> list[str]:
        parts = (self.payroll, self.structures, self.slips, self.summary)
        return [r.message or "Request failed" for r in parts if not r.success]


async def load_payroll_dashboard(client: BackofficeClient, month: str) -> PayrollDashboard:
    """Fetch the four payroll screen datasets together and wait for all of them.

    A failed call leaves its slot as an unsuccessful ApiResult; the others
    are still returned.
    """

    payroll, structures, slips, summary = await asyncio.gather(
        client.get("/payroll", params={"month": month, "limit": 1000}, key="dashboard:payroll"),
        client.get("/salary-structures", params={"isActive": "true", "limit": 1000}, key="dashboard:structures"),
        client.get("/salary-slips", params={"month": month}, key="dashboard:slips"),
        client.get("/payroll/summary", params={"month": month}, key="dashboard:summary"),
    )
    return PayrollDashboard(month=month, payroll=payroll, structures=structures, slips=slips, summary=summary)
