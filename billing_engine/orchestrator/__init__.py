"""
Orchestrator package: exposes the monthly billing run.

NOTE: Functions are NOT imported at package level to avoid opening a
database engine on import. Import directly from billing_run when needed.
"""

__all__ = [
    "run_monthly_billing",
]
