"""Temporal argument parsing and range resolution.

The temporal layer turns loosely-typed finder arguments (numbers, names, phrases, dates) into a
strict `BoundaryPair`, which is then used to build a parameterized range query.
"""
