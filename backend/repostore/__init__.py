"""repostore - repository records, star/watch relations and their cached counters.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
