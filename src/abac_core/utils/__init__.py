"""Shared utilities: file helpers, logging, entitlement file I/O."""
