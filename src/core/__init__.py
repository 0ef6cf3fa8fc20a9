"""
Core domain models, precision primitives, configuration and contracts.

This module contains the foundational building blocks that are independent
of external systems (exchanges, caches, notification channels).
"""
