from __future__ import annotations

from typing import Protocol

from inventory_desk.app.container import DeskApp
from inventory_desk.app.ui.error_banner import ErrorBanner
from inventory_desk.app.ui.views.auth_view import SignInView
from inventory_desk.app.ui.views.home_view import HomeView
from inventory_desk.app.ui.views.rejected_view import RejectedView
from inventory_desk.app.ui.views.resource_view import (
    food_condition_view,
    invoice_view,
    product_view,
    returns_view,
)
from inventory_desk.core.errors import AuthError
from inventory_desk.routing.guard import RouteAction, RouteDecision
from inventory_desk.routing.routes import HOME, ROUTES, SIGN_IN, sidebar_routes

EXIT_COMMANDS = {"exit", "quit", "q"}

REDIRECT_MESSAGES = {
    "expired": "Your session expired. Sign in again.",
    "signed_out": "You are signed out.",
    "already_signed_in": "You are already signed in.",
}


class View(Protocol):
    def render(self) -> bool: ...


def build_views(app: DeskApp) -> dict[str, View]:
    collections = app.collections
    return {
        "home": HomeView(app.sessions),
        "products": product_view(collections["products"]),
        "invoices": invoice_view(collections["invoices"]),
        "returns": returns_view(collections["returns"]),
        "food_condition": food_condition_view(collections["food_condition"]),
        "rejected": RejectedView(collections["rejected"], app.disputes, app.roles, app.sessions),
        "auth": SignInView(app.sessions),
    }


def render_sidebar(app: DeskApp, current_path: str) -> None:
    session = app.sessions.get_current_session()
    print("\n=== Inventory Desk ===")
    who = (session.email or session.user_id) if session else "N/A"
    print(f"Header | user={who} | backend={app.settings.BACKEND}")
    print("Sidebar:")
    for route in sidebar_routes():
        marker = ">" if route.path == current_path else " "
        suffix = f" [{route.required_role.value}]" if route.required_role else ""
        print(f" {marker} {route.path:<16} {route.label}{suffix}")


def print_help() -> None:
    print("Commands:")
    for route in ROUTES:
        print(f"  {route.path:<16} {route.label}")
    print("  logout           Sign out")
    print("  help             Show this list")
    print("  exit             Leave the desk")


class Shell:
    """Interactive loop: every navigation goes through the route guard."""

    def __init__(self, app: DeskApp, views: dict[str, View] | None = None) -> None:
        self.app = app
        self.views = views or build_views(app)
        self.current_path = HOME

    def run(self, start_path: str = HOME) -> None:
        self.app.guard.mount()
        pending: str | None = start_path
        try:
            while pending is not None:
                self.visit(pending)
                pending = self.next_command()
        finally:
            self.app.guard.unmount()

    def visit(self, path: str) -> RouteDecision:
        decision = self.app.guard.navigate(path)
        if decision.action is RouteAction.NOT_FOUND:
            print(f"[404] No page at {decision.path}. Type 'help' for the list.")
            return decision
        if decision.action is RouteAction.REDIRECT:
            message = REDIRECT_MESSAGES.get(decision.reason)
            if message:
                print(f"[redirect] {message}")

        self.current_path = decision.path
        render_sidebar(self.app, decision.path)
        view = self.views[decision.route.key]
        completed = view.render()

        if decision.path == SIGN_IN and completed:
            return self.visit(HOME)
        return decision

    def next_command(self) -> str | None:
        try:
            raw = input("\nGo to (path, 'help', 'logout', 'exit'): ").strip()
        except EOFError:
            return None
        command = raw.lower()
        if command in EXIT_COMMANDS:
            return None
        if command == "help":
            print_help()
            return self.next_command()
        if command == "logout":
            self.logout()
            return SIGN_IN
        return raw or self.current_path

    def logout(self) -> None:
        try:
            self.app.sessions.sign_out()
        except AuthError as error:
            ErrorBanner.show(error)
        print("[success] Signed out.")

