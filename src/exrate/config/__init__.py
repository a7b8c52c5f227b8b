"""
Configuration Module

Provides centralized configuration management using Pydantic Settings.
Values are read from environment variables and an optional .env file.
"""

from exrate.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
