from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import plotly.graph_objs as go

from fleet_browser.core import search_engine
from fleet_browser.core.dataset import Dataset
from fleet_browser.core.query import Query
from fleet_browser.core.records import Record


class BaseView(ABC):
    """
    Abstract base class for all chart/map views.

    Defines the contract that every view in the app must follow
    - expose an 'id' - used internally
    - expose a 'label' - used for UI/human-readable applications
    - expose a 'collection' - id of the collection the view expects (None = any)
    - implement 'compute_data' - used to compute the data given the current Query
    - implement 'render_figure' - used to render the figure using Plotly
    """

    id: str = None
    label: str = None
    collection: Optional[str] = None

    def __init__(self, dataset: Dataset, options: Optional[Dict[str, Any]] = None):
        self.dataset = dataset
        # View-specific settings picked in the UI (counted field, timeframe, ...)
        self.options: Dict[str, Any] = dict(options or {})

    @abstractmethod
    def compute_data(self, query: Query) -> Any:
        """
        Compute the data given the current Query
        :param query: the current search/filter selection on this view's dataset
        :return: data: whatever render_figure needs (DataFrame, dataclass, ...)
        """
        raise NotImplementedError()

    @abstractmethod
    def render_figure(self, data: Any, query: Query) -> go.Figure:
        """
        Render the figure given the computed data
        :param data: the data provided by {@link compute_data()}
        :param query: the current Query
        :return: the Plotly figure for these parameters
        """
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Common helpers for all views
    # ------------------------------------------------------------------
    def filtered_records(self, query: Query) -> List[Record]:
        """
        Return this view's records filtered according to the given Query.

        All views should call this instead of filtering by hand,
        so if we ever need to change the matching rules, we do it in one place.
        """
        return search_engine.apply(self.dataset, query)

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
