"""
Core domain models, geometric primitives, and storage contracts.

This module contains the foundational building blocks that are independent
of external systems (location providers, map renderers, databases, etc.).
"""
