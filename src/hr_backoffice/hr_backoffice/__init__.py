"""HR back-office package.

This package is organized by feature modules (attendance, payroll, salary slips,
deductions, ...) with a thin Flask controller layer and service/repository layers.
"""
