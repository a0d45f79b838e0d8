from __future__ import annotations

__all__ = ["IDs", "filter_id", "edit_field_id"]


class IDs:
    class Store:
        QUERY = "query-state"
        SESSION = "auth-session"
        DATA_VERSION = "data-version"

    class Control:
        # Navbar
        COLLECTION_SELECT = "collection-select"
        AUTH_OPEN_BTN = "auth-open-btn"
        ADMIN_OPEN_BTN = "admin-open-btn"
        USER_BADGE = "user-badge"

        PAGE_TABS = "page-tabs"

        # Quick search
        QUICK_SEARCH_INPUT = "quick-search-input"
        QUICK_SEARCH_RESULTS = "quick-search-results"

        # Records tab: filters
        SEARCH_INPUT = "search-input"
        FILTERS_CONTAINER = "filters-container"
        DATE_RANGE = "date-range"
        DATE_RANGE_CONTAINER = "date-range-container"
        COLUMN_SELECT = "column-select"
        CLEAR_FILTERS_BTN = "clear-filters-btn"
        RELOAD_BTN = "reload-btn"

        # Records tab: table
        RECORDS_TABLE = "records-table"
        RESULT_COUNT = "result-count"
        TABLE_ALERT = "table-alert"
        DOWNLOAD_CSV = "download-csv"
        DOWNLOAD_CSV_BTN = "download-csv-btn"

        # Record editing
        EDIT_BTN = "edit-record-btn"
        EDIT_MODAL = "edit-modal"
        EDIT_FORM = "edit-form"
        EDIT_RECORD_KEY = "edit-record-key"
        EDIT_SAVE_BTN = "edit-save-btn"
        EDIT_CANCEL_BTN = "edit-cancel-btn"
        EDIT_STATUS = "edit-status"

        # Units tab
        REGION_CARDS = "region-cards"
        UNIT_SELECT = "unit-select"
        UNIT_HISTORY = "unit-history"

        # Views tab
        VIEW_SELECT = "view-select"
        VIEW_FIELD_SELECT = "view-field-select"
        VIEW_CHART_SELECT = "view-chart-select"
        VIEW_TIMEFRAME_SELECT = "view-timeframe-select"
        MAIN_GRAPH = "main-graph"

        # Auth
        AUTH_OFFCANVAS = "auth-offcanvas"
        AUTH_EMAIL = "auth-email"
        AUTH_PASSWORD = "auth-password"
        AUTH_SIGN_IN_BTN = "auth-sign-in-btn"
        AUTH_SIGN_OUT_BTN = "auth-sign-out-btn"
        AUTH_STATUS = "auth-status"

        # Maintenance
        ADMIN_MODAL = "admin-modal"
        ADMIN_CHECK_BTN = "admin-check-btn"
        ADMIN_RELEASE_BTN = "admin-release-btn"
        ADMIN_RELEASE_CONFIRM = "admin-release-confirm"
        ADMIN_STATUS = "admin-status"

    class Pattern:
        # pattern-matching "type" strings
        FILTER = "field-filter"
        EDIT_FIELD = "edit-field"


def filter_id(field: str) -> dict:
    return {"type": IDs.Pattern.FILTER, "field": field}


def edit_field_id(field: str) -> dict:
    return {"type": IDs.Pattern.EDIT_FIELD, "field": field}
