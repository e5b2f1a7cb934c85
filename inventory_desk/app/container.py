from __future__ import annotations

from dataclasses import dataclass

from inventory_desk.access.roles import RoleResolver
from inventory_desk.core.config import Settings
from inventory_desk.data import DataService, build_data_service
from inventory_desk.resources.collection import ResourceCollection, build_collections
from inventory_desk.resources.disputes import DisputeThread
from inventory_desk.routing.guard import RouteGuard
from inventory_desk.session.auth_store import AuthStore
from inventory_desk.session.store import SessionPersistence, SessionStore


@dataclass
class DeskApp:
    settings: Settings
    service: DataService
    sessions: SessionStore
    roles: RoleResolver
    guard: RouteGuard
    collections: dict[str, ResourceCollection]
    disputes: DisputeThread


def build_app(
    settings: Settings,
    *,
    service: DataService | None = None,
    persistence: SessionPersistence | None = None,
) -> DeskApp:
    service = service or build_data_service(settings)
    persistence = persistence or AuthStore(app_name=settings.APP_NAME, path_override=settings.SESSION_FILE)
    sessions = SessionStore(service, persistence, oauth_redirect_url=settings.OAUTH_REDIRECT_URL)
    sessions.restore()
    roles = RoleResolver(service, sessions)
    return DeskApp(
        settings=settings,
        service=service,
        sessions=sessions,
        roles=roles,
        guard=RouteGuard(sessions),
        collections=build_collections(service, sessions, roles),
        disputes=DisputeThread(service, sessions),
    )
