"""
Core domain layer: dataset abstraction, query model, search engine,
region/history aggregator, view base class and the view registry
"""

from .dataset import Dataset
from .query import DateRange, Query, SortSpec
from .base_view import BaseView
from .view_registry import ViewRegistry

__all__ = ["Dataset", "Query", "DateRange", "SortSpec", "BaseView", "ViewRegistry"]
