from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from inventory_desk.core.logging import get_logger, log_action
from inventory_desk.routing.routes import HOME, SIGN_IN, Route, find_route, normalize_path
from inventory_desk.session.models import Session
from inventory_desk.session.store import SessionStore

logger = get_logger(__name__)


class GuardState(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class RouteAction(str, Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class RouteDecision:
    action: RouteAction
    path: str
    route: Route | None = None
    reason: str = ""


TransitionListener = Callable[[GuardState, str], None]


class RouteGuard:
    def __init__(self, sessions: SessionStore, on_transition: TransitionListener | None = None) -> None:
        self.sessions = sessions
        self._on_transition = on_transition
        self._state = GuardState.UNKNOWN
        self._reason = "not_resolved"
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def reason(self) -> str:
        return self._reason

    def mount(self) -> GuardState:
        if self._unsubscribe is None:
            self._unsubscribe = self.sessions.on_session_change(self._handle_session_change)
        return self.resolve()

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._state = GuardState.UNKNOWN
        self._reason = "unmounted"

    def resolve(self) -> GuardState:
        session = self.sessions.get_current_session()
        if session is not None:
            self._transition(GuardState.AUTHENTICATED, "session")
        elif self._state is not GuardState.UNAUTHENTICATED:
            self._transition(GuardState.UNAUTHENTICATED, "no_session")
        return self._state

    def navigate(self, path: str) -> RouteDecision:
        target = normalize_path(path)
        route = find_route(target)
        state = self.resolve()

        if route is None:
            return RouteDecision(RouteAction.NOT_FOUND, target, reason="unknown_route")

        if state is GuardState.AUTHENTICATED:
            if route.path == SIGN_IN:
                return RouteDecision(RouteAction.REDIRECT, HOME, find_route(HOME), reason="already_signed_in")
            return RouteDecision(RouteAction.RENDER, route.path, route)

        if not route.protected:
            return RouteDecision(RouteAction.RENDER, route.path, route)
        return RouteDecision(RouteAction.REDIRECT, SIGN_IN, find_route(SIGN_IN), reason=self._reason)

    def _handle_session_change(self, session: Session | None, reason: str) -> None:
        if session is None:
            self._transition(GuardState.UNAUTHENTICATED, reason)
        else:
            self._transition(GuardState.AUTHENTICATED, reason)

    def _transition(self, state: GuardState, reason: str) -> None:
        if state is self._state:
            return
        previous = self._state
        self._state = state
        self._reason = reason
        log_action(logger, "guard", "transition", None, state.value, previous=previous.value, reason=reason)
        if self._on_transition is not None:
            self._on_transition(state, reason)
