"""
Derived state for the unit dashboards: loan progress, savings totals,
meeting attendance and membership age.

Everything here is a pure function of its arguments. Reading the source
records and writing results back is done by ``app.services``.
"""

from app.aggregation import attendance, loans, membership, savings

__all__ = ["attendance", "loans", "membership", "savings"]
