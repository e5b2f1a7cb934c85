from __future__ import annotations

from collections.abc import Callable
from getpass import getpass

from inventory_desk.app.ui.error_banner import ErrorBanner
from inventory_desk.core.errors import AuthError
from inventory_desk.session.store import SessionStore

OAUTH_PROVIDER = "google"


class SignInView:
    def __init__(self, sessions: SessionStore, read_secret: Callable[[str], str] = getpass) -> None:
        self.sessions = sessions
        self.read_secret = read_secret

    def render(self) -> bool:
        print("\n=== Sign in ===")
        print("  1. Sign in with email")
        print("  2. Register")
        print("  3. Continue with Google")
        print("  0. Back")
        choice = input("Option: ").strip()
        try:
            if choice == "1":
                return self._sign_in()
            if choice == "2":
                self._register()
                return False
            if choice == "3":
                return self._oauth()
        except AuthError as error:
            ErrorBanner.show(error)
        return False

    def _sign_in(self) -> bool:
        email = input("Email: ").strip()
        password = self.read_secret("Password: ")
        self.sessions.sign_in(email, password)
        print("[success] Signed in. Welcome back.")
        return True

    def _register(self) -> None:
        email = input("Email: ").strip()
        password = self.read_secret("Password: ")
        self.sessions.sign_up(email, password)
        print("[success] Account created. Sign in to continue.")

    def _oauth(self) -> bool:
        url = self.sessions.oauth_url(OAUTH_PROVIDER)
        print(f"Open this URL in a browser and approve access:\n  {url}")
        callback = input("Paste the URL you were redirected to: ").strip()
        if not callback:
            return False
        self.sessions.complete_oauth(callback)
        print("[success] Signed in.")
        return True
