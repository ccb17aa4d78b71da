"""Services Layer - repository store, permission oracle and the shared relation-counter helpers.

Invariants:
    - Services own transaction boundaries; relation_counters helpers never commit
"""
