"""
Supplier booking eligibility gate.

This package provides:
- The canonical eligibility decision (field resolution, date blocks, gate)
- A read-only admin inspector built on the same decision
- Read-only admin reports for rate limiting and schema migration
"""
