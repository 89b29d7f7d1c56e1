"""Core mathematics for the bet journal.

This package contains pure, side-effect-free building blocks:

- ``settlement``      bet outcomes and realized profit per outcome
- ``kelly``           fractional Kelly stake sizing
- ``expected_value``  EV per unit staked, breakeven probability, edge

Nothing in this package imports from ``betjournal.services`` or
``betjournal.models``. Every function is deterministic and unit-testable in
isolation; none of them logs or raises on non-positive odds.
"""
