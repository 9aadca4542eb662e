"""Client-side event planning: cached API access, event state, financial KPIs."""

import os


def setup(settings_module: str = "planner.settings") -> None:
    """Configure Django for scripts that use the planner outside a Django project."""
    import django
    from django.conf import settings

    if not settings.configured:
        os.environ.setdefault("DJANGO_SETTINGS_MODULE", settings_module)
    django.setup()
