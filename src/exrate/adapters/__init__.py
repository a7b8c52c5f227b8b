# src/exrate/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (APIs)
- Telegram (bot interface)
- Persistence (storage)
- Formatting (output)
"""

__all__ = []

