"""Routing — exact and parameterized path matching.

Routes are registered during setup and compiled into an immutable
lookup table when the app freezes.
"""
