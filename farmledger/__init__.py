"""
Farm Ledger - Source Package

Local-first record keeping for small livestock operations.

DESIGN PRINCIPLES:
1. One store instance owns the live state
2. Every mutation goes through a pure reducer
3. Every commit is persisted before the next command
4. External writes replace state, they never merge into it
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Farm Ledger Team"
