"""Roles service: tenant-scoped role management backed by Firestore."""

__version__ = "1.0.0"
