from __future__ import annotations

from typing import Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from fleet_browser.core.base_view import BaseView
from fleet_browser.core.query import Query
from fleet_browser.core.statistics import suggest_chart_type, value_counts


class ValueCountsView(BaseView):
    """
    Distribution of one field's values over the filtered records.

    Options:
      - field: the field to count (defaults to the dataset's first field)
      - chart: "pie", "bar" or "auto" (bar once there are too many slices)
    """

    id = "value_counts"
    label = "התפלגות ערכים"

    @property
    def field(self) -> Optional[str]:
        field = self.options.get("field")
        if field:
            return field
        fields = self.dataset.fields
        return fields[0] if fields else None

    def compute_data(self, query: Query) -> pd.DataFrame:
        if self.field is None:
            return pd.DataFrame()
        return value_counts(self.filtered_records(query), self.field)

    def render_figure(self, data: pd.DataFrame, query: Query) -> go.Figure:
        if data is None or data.empty:
            return self.empty_figure("אין רשומות להצגה - שנו את הסינון")

        chart = self.options.get("chart") or "auto"
        if chart == "auto":
            chart = suggest_chart_type(data)

        if chart == "pie":
            fig = px.pie(data, names="value", values="count", hole=0.3)
            fig.update_traces(textinfo="percent+label")
        else:
            fig = px.bar(data, x="value", y="count", text="count")
            fig.update_layout(xaxis_title=self.field, yaxis_title="כמות")

        fig.update_layout(
            title=f"{self.field} ({int(data['count'].sum())} רשומות)",
            height=500,
            margin=dict(l=40, r=40, t=60, b=40),
        )
        return fig
