"""
Top-level package for the fleet browser.

This package exposes the core architecture (domain, services, views, UI adapters).
Most code should import from submodules such as:
    fleet_browser.core
    fleet_browser.services
    fleet_browser.views
    fleet_browser.ui
"""

__all__: list[str] = []
