"""
auth: host-platform session gating.

Provides:
  • ``SessionGate``: cookie session probe, email/password login, expiry
"""
