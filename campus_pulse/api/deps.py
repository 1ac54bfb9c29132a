"""
Dependencies resolving the application-scoped services held on app.state
"""

from zoneinfo import ZoneInfo

from fastapi import Depends, Request

from campus_pulse.core.config import settings
from campus_pulse.services.club_service import ClubService
from campus_pulse.services.data_store import DataStore
from campus_pulse.services.session import TabSessions

def get_store(request: Request) -> DataStore:
    return request.app.state.store

def get_tab_sessions(request: Request) -> TabSessions:
    return request.app.state.tab_sessions

def get_club_service(store: DataStore = Depends(get_store)) -> ClubService:
    return ClubService(store, tz=get_timezone())

def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)
