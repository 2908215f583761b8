from config.settings import (
    ApiSettings,
    PathSettings,
    Settings,
    SimulationSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "ApiSettings",
    "PathSettings",
    "Settings",
    "SimulationSettings",
    "get_settings",
    "reset_settings",
]
