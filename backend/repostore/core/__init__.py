"""Core Layer - pure domain logic: errors, domain types, name rules, boundary protocols.

Invariants:
    - Core never imports SQLAlchemy or any other IO library
"""
