"""Core business logic layer.

Subpackages:
- calendar: which weekdays a cadence delivers on
- schedule: end-date arithmetic over delivery days
- cutoff: the window in which deliveries may still change
- ledger: skip/restore with credit days
- selections: pending meal choices and the admin auto-fill
- orders: start-date rescheduling
- reporting: production summary and client calendar
"""
__all__ = ["calendar", "schedule", "cutoff", "ledger", "selections", "orders", "reporting"]
