"""Planner app settings.

Values come from the PLANNER dict in Django settings, falling back to
DEFAULTS. They are looked up on every access so settings overrides apply
immediately:

    from planner.conf import planner_settings
    planner_settings.CACHE_TTL
"""

from typing import Any

from django.conf import settings

DEFAULTS = {
    "API_URL": "http://localhost:3000/api",
    "CACHE_TTL": 30,
    "CACHE_ALIAS": "default",
    "HTTP_TIMEOUT": 10.0,
    "MAX_RECURRENCES": 366,
}


class PlannerSettings:
    def __getattr__(self, name: str) -> Any:
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid planner setting: '{name}'")
        user_settings = getattr(settings, "PLANNER", None) or {}
        return user_settings.get(name, DEFAULTS[name])


planner_settings = PlannerSettings()
