"""
client/views.py -- Views that depend on the session.

Views take the SessionManager as a constructor argument. Building one without
a session is a programming error and fails immediately, rather than the first
time the view reads session state.
"""

from typing import Callable, Optional

from client.session import DASHBOARD_PATH, LOGIN_PATH, SessionManager, SessionScopeError


class HomeView:
    """Landing view: send the user to the dashboard or the login page."""

    def __init__(self, session: Optional[SessionManager], navigate: Callable[[str], None]) -> None:
        if not isinstance(session, SessionManager):
            raise SessionScopeError("HomeView requires a SessionManager")
        self.session = session
        self._navigate = navigate

    def resolve(self) -> Optional[str]:
        """Navigate once the session has loaded. Returns the target path, or None while loading."""
        if self.session.loading:
            return None
        target = DASHBOARD_PATH if self.session.is_authenticated else LOGIN_PATH
        self._navigate(target)
        return target
