"""
Squad Picker Package

A fantasy-sports squad optimization core: given a pool of candidate players
(position category, cost, precomputed score) and a formation, it selects one
player per slot under a budget. Provides an exact integer-programming solver,
an approximate budget-bucketed dynamic-programming solver, a greedy fallback,
and a formation selector that evaluates the whole formation catalog.
"""

__version__ = "1.0.0"
