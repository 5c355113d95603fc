"""
fitcart shopping-list service.

Price estimation from a user's own purchase history, meal-plan list synthesis and
budget tracking for the shopping side of a fitness application.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
