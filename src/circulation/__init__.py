"""CIRCULATION

A loan lifecycle and eligibility engine for library circulation. It issues
loans, takes returns, renews due dates and computes overdue fines while
keeping every book's availability consistent with its open loans.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
