"""
Tab identity and club login dependencies
"""

from fastapi import Depends, Header

from campus_pulse.api.deps import get_tab_sessions
from campus_pulse.schemas import Club
from campus_pulse.services.session import SessionIdentity, TabSessions
from campus_pulse.utils.responses import unauthorized_error

TAB_HEADER = "X-Tab-Id"

def get_tab_id(x_tab_id: str = Header(..., alias=TAB_HEADER, min_length=1, max_length=128)) -> str:
    """Every browser tab sends its own id; session state is keyed by it"""
    return x_tab_id

def get_session(
    tab_id: str = Depends(get_tab_id),
    sessions: TabSessions = Depends(get_tab_sessions)
) -> SessionIdentity:
    return sessions.get(tab_id)

def require_club(session: SessionIdentity = Depends(get_session)) -> Club:
    """The club logged in on this tab; 401 otherwise"""
    club = session.current()
    if club is None:
        raise unauthorized_error("Club login required")
    return club
