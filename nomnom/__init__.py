"""nomnom - recipe and meal planning with resilient storage operations."""

__version__ = "0.1.0"
