"""Async HTTP client for the back-office API (dashboards, scripts)."""

from .api_client import ApiResult, BackofficeClient, api_base_url
from .cache import TTLCache
from .dashboard import PayrollDashboard, load_payroll_dashboard
from .deductions import DeductionClient

__all__ = [
    "ApiResult",
    "BackofficeClient",
    "DeductionClient",
    "PayrollDashboard",
    "TTLCache",
    "api_base_url",
    "load_payroll_dashboard",
]
