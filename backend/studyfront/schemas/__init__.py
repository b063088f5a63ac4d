"""Pydantic Schemas — request/response validation and local draft shapes.

Invariants:
    - Schemas validate at system boundaries (HTTP input, completion output, local store)
    - Wire format uses camelCase keys; Python attributes are snake_case
"""
