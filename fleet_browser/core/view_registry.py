from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

from .base_view import BaseView
from .dataset import Dataset


class ViewRegistry:
    """
    Catalogue of the chart/map views the statistics tab can show.

    Holds view classes keyed by their 'id'; a view is only instantiated
    when a figure is requested, bound to the collection currently selected.
    Views that declare a 'collection' are offered for that collection only.
    """

    def __init__(self):
        self._views: Dict[str, Type[BaseView]] = {}

    def __contains__(self, view_id: object) -> bool:
        return view_id in self._views

    def __len__(self) -> int:
        return len(self._views)

    def register(self, view_cls: Type[BaseView]) -> None:
        """
        :raises TypeError: view_cls is not a BaseView subclass
        :raises ValueError: another view already uses view_cls.id
        """
        if not isinstance(view_cls, type) or not issubclass(view_cls, BaseView):
            raise TypeError(f"Cannot register {view_cls!r}: views must subclass BaseView")

        if view_cls.id in self._views:
            raise ValueError(f"Duplicate view id '{view_cls.id}'")

        self._views[view_cls.id] = view_cls

    def create(self, view_id: str, dataset: Dataset, options: Optional[Dict[str, Any]] = None) -> BaseView:
        """:raises KeyError: unknown view_id"""
        if view_id not in self._views:
            raise KeyError(f"View '{view_id}' not found")
        return self._views[view_id](dataset, options)

    def all_classes(self, collection: Optional[str] = None) -> List[Type[BaseView]]:
        """
        Registered views in registration order, narrowed to those usable on
        `collection` when one is given.
        """
        if collection is None:
            return list(self._views.values())
        return [cls for cls in self._views.values() if cls.collection in (None, collection)]
