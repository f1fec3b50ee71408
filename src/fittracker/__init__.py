"""
Fittracker backend services.

The package hosts the receipt (bill) analysis pipeline used by the finance
pages and the live translation helpers used by the recipe pages.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
