"""
Future Net-Worth Planner - Source Package

Planning core for a personal-finance app: spending analysis over logged
transactions and a month-by-month projection of future net worth.

DESIGN PRINCIPLES:
1. The projection engine is a pure function of its input
2. Analysis never fails on thin data, it reports zeros
3. Bad simulation input fails early and visibly
4. Every planning run is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Future Net-Worth Planner Team"
