"""Confidential record subsystem: encrypted counseling notes, owner-only access, redacted audit trail."""

__version__ = "0.1.0"
