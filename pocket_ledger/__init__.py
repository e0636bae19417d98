"""
Pocket Ledger - Source Package

A personal finance ledger: expenses and incomes merged into one
time-ordered ledger, period and category statistics, and expenses read
from scanned bills.

DESIGN PRINCIPLES:
1. Engine functions are pure; flows do the I/O
2. Fail early, fail visibly
3. No silent corrections
4. Every change must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Pocket Ledger Team"
