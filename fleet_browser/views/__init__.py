from .value_counts_view import ValueCountsView
from .timeline_view import RecruitmentTimelineView
from .map_view import FleetMapView
from .region_summary_view import RegionSummaryView

__all__ = ["ValueCountsView", "RecruitmentTimelineView", "FleetMapView", "RegionSummaryView"]
