from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from fleet_browser.core.aggregator import DISPLAY_REGIONS, aggregate
from fleet_browser.core.base_view import BaseView
from fleet_browser.core.query import Query


class RegionSummaryView(BaseView):
    """
    Current status of units per region, one bar group per region.
    Only the latest report of each unit counts.
    """

    id = "region_summary"
    label = "סיכום לפי יצ\"מ"
    collection = "recruited"

    def compute_data(self, query: Query) -> pd.DataFrame:
        groups = aggregate(self.filtered_records(query), regions=DISPLAY_REGIONS)

        rows = []
        for region, group in groups.items():
            for status, count in group.tally.by_status.items():
                rows.append({"region": region, "status": status, "count": count})
        return pd.DataFrame(rows, columns=["region", "status", "count"])

    def render_figure(self, data: pd.DataFrame, query: Query) -> go.Figure:
        if data is None or data.empty or data["count"].sum() == 0:
            return self.empty_figure("אין דיווחים להצגה")

        fig = px.bar(data, x="region", y="count", color="status", barmode="group", text="count")
        fig.update_layout(
            xaxis_title="יצ\"מ",
            yaxis_title="כלים",
            legend_title="סטטוס",
            height=450,
            margin=dict(l=40, r=40, t=40, b=40),
        )
        return fig
