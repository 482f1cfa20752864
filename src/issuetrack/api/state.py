"""Application state access."""
import time

from fastapi import Request

from issuetrack.config import Settings
from issuetrack.models.base import Database


class AppState:
    """Per-application resources, stored on ``app.state.resources``."""

    def __init__(self, database: Database, settings: Settings) -> None:
        self.database = database
        self.settings = settings
        self.start_time = time.time()

    @property
    def uptime_seconds(self) -> float:
        return time.time() - self.start_time


def get_app_state(request: Request) -> AppState:
    return request.app.state.resources


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the application's store handle."""
    return get_app_state(request).database


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the application was built with."""
    return get_app_state(request).settings
