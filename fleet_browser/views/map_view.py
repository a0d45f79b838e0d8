from __future__ import annotations

import plotly.graph_objects as go

from fleet_browser.core.base_view import BaseView
from fleet_browser.core.geo import MapFrame, build_map_frame
from fleet_browser.core.query import Query


class FleetMapView(BaseView):
    """
    Vehicles/owners with usable coordinates on an OpenStreetMap base layer.

    Options:
      - exclude: field -> values marking placeholder rows (never mapped)
      - label_fields: fields shown in the hover popup
    """

    id = "map"
    label = "מפה"

    def compute_data(self, query: Query) -> MapFrame:
        return build_map_frame(
            self.filtered_records(query),
            exclude=self.options.get("exclude") or {},
            label_fields=self.options.get("label_fields") or (),
        )

    def render_figure(self, data: MapFrame, query: Query) -> go.Figure:
        if data is None or data.points.empty:
            return self.empty_figure("אין רשומות עם מיקום תקין")

        points = data.points
        labels = [c for c in points.columns if c not in ("lat", "lon")]
        hover = [
            "<br>".join(f"{c}: {row[c]}" for c in labels if row[c])
            for _, row in points.iterrows()
        ]

        fig = go.Figure(
            go.Scattermap(
                lat=points["lat"],
                lon=points["lon"],
                mode="markers",
                marker=dict(size=10),
                text=hover,
                hoverinfo="text",
            )
        )
        fig.update_layout(
            map=dict(
                style="open-street-map",
                center=dict(lat=data.center[0], lon=data.center[1]),
                zoom=data.zoom,
            ),
            height=600,
            margin=dict(l=0, r=0, t=30, b=0),
            title=f"{len(points)} נקודות",
        )
        return fig
