from __future__ import annotations

import plotly.graph_objects as go

from fleet_browser.core.base_view import BaseView
from fleet_browser.core.query import Query
from fleet_browser.core.statistics import Timeline, recruitment_timeline


class RecruitmentTimelineView(BaseView):
    """
    Recruitments per time bucket (year/month/week/day) over a trailing window.
    """

    id = "recruitment_timeline"
    label = "מגמת גיוסים"
    collection = "recruited"

    def compute_data(self, query: Query) -> Timeline:
        timeframe = self.options.get("timeframe") or "month"
        return recruitment_timeline(self.filtered_records(query), timeframe)

    def render_figure(self, data: Timeline, query: Query) -> go.Figure:
        if data is None or data.total == 0:
            return self.empty_figure("אין גיוסים בטווח הזמן שנבחר")

        fig = go.Figure(
            go.Scatter(
                x=data.frame["bucket"],
                y=data.frame["count"],
                mode="lines+markers",
                fill="tozeroy",
                name="גיוסים",
            )
        )
        fig.update_layout(
            title=f"סה\"כ {data.total} גיוסים ({data.percentage_change:+.1f}%)",
            xaxis_title="תקופה",
            yaxis_title="גיוסים",
            height=450,
            margin=dict(l=40, r=40, t=60, b=40),
        )
        return fig
