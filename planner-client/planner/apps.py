from django.apps import AppConfig


class PlannerConfig(AppConfig):
    name = "planner"
    verbose_name = "Event planner"

    def ready(self) -> None:
        from planner import signals  # noqa: F401
