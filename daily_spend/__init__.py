"""
Daily Spend - Source Package

A personal daily-spending tracker: one daily budget, the expenses entered
during the day, and an automatic rollover that archives each finished day
into a bounded history log.

DESIGN PRINCIPLES:
1. One owned state value, passed explicitly to every component
2. Invalid input is rejected up front, never half-applied
3. Corrupt persisted state heals itself on load
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Daily Spend Team"
