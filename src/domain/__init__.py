"""Domain models and types for the currency converter.

This package contains immutable (Pydantic) value objects describing catalog
assets and conversion requests/results, together with the typed conversion
errors and the provider protocols the services depend on.
"""

__all__ = [
    "assets",
    "conversion",
    "pricing",
]
