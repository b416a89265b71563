"""Repository interfaces and implementations.

This package defines the abstract todo repository and its cache-backed
implementation under :mod:`repositories.cache`.
"""

from .todos import TodosRepo

__all__ = ["TodosRepo"]
