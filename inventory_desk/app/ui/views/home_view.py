from __future__ import annotations

from inventory_desk.session.store import SessionStore


class HomeView:
    def __init__(self, sessions: SessionStore) -> None:
        self.sessions = sessions

    def render(self) -> bool:
        session = self.sessions.get_current_session()
        who = (session.email or session.user_id) if session else "guest"
        print(f"\nWelcome, {who}.")
        print("Manage products, invoices, returns, food inspections and rejected items from the sidebar.")
        return True
