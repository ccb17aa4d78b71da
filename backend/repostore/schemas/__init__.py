"""Pydantic Schemas - option objects validated at the store boundary.

Invariants:
    - Schemas carry caller-supplied values only; name rules are enforced by the name validator
"""
