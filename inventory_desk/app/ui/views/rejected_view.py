from __future__ import annotations

from inventory_desk.access.roles import Role, RoleResolver
from inventory_desk.app.ui.error_banner import ErrorBanner
from inventory_desk.app.ui.table_printer import normalize_value, print_table
from inventory_desk.app.ui.views.resource_view import FieldPrompt, ResourceView, announce, records_to_rows
from inventory_desk.core.errors import DeskError
from inventory_desk.resources.collection import ResourceCollection
from inventory_desk.resources.disputes import DisputeThread
from inventory_desk.resources.loading import Failed
from inventory_desk.resources.models import ChatMessage, RejectedItem
from inventory_desk.session.store import SessionStore

COLUMNS = [
    ("index", "#"),
    ("product_name", "Product"),
    ("quantity", "Qty"),
    ("reason", "Reason"),
    ("status", "Status"),
    ("timestamp", "Created"),
]

PROMPTS = [
    FieldPrompt("product_name", "Product name"),
    FieldPrompt("seller_id", "Seller id"),
    FieldPrompt("quantity", "Quantity", "default 1"),
    FieldPrompt("reason", "Reason"),
]


def format_message(message: ChatMessage, current_user_id: str) -> str:
    sender = "you" if message.sender_id == current_user_id else message.sender_id[:8]
    stamp = normalize_value(message.timestamp)
    return f"[{stamp}] {sender}: {message.message}"


class RejectedView:
    """Admin-only list of rejected items with a chat per item."""

    def __init__(
        self,
        collection: ResourceCollection,
        thread: DisputeThread,
        roles: RoleResolver,
        sessions: SessionStore,
    ) -> None:
        self.collection = collection
        self.thread = thread
        self.roles = roles
        self.sessions = sessions
        self._creator = ResourceView(collection, "Rejected Items", "rejected item", COLUMNS, PROMPTS)

    def render(self) -> bool:
        session = self.sessions.get_current_session()
        if not self.roles.authorize(session, Role.ADMIN):
            print("[denied] Admin access required.")
            return False

        items = self._load_items()
        if items is None:
            return False

        while True:
            choice = input("Chat with seller [item #], add item [a], back [Enter]: ").strip().lower()
            if not choice:
                return True
            if choice == "a":
                if self._creator.create_from_prompts() is not None:
                    items = self._load_items() or items
                continue
            if choice.isdigit() and 1 <= int(choice) <= len(items):
                self.open_chat(items[int(choice) - 1])
                continue
            ErrorBanner.show(f"Unknown option: {choice}")

    def open_chat(self, item: RejectedItem) -> None:
        session = self.sessions.get_current_session()
        if session is None:
            return
        print(f"\nChat - {item.product_name}")
        state = self.thread.load(item.id, announce("messages"))
        if isinstance(state, Failed):
            return
        self._print_thread(state.data, session.user_id)

        while True:
            body = input("Message (Enter to close): ")
            if body == "":
                return
            try:
                messages = self.thread.send(item.id, body)
            except DeskError as error:
                ErrorBanner.show(error)
                continue
            self._print_thread(messages, session.user_id)

    def _load_items(self) -> list[RejectedItem] | None:
        state = self.collection.load(announce("rejected items"))
        if isinstance(state, Failed):
            return None
        rows = records_to_rows(state.data)
        for index, row in enumerate(rows, start=1):
            row["index"] = index
        print_table("Rejected Items", rows, COLUMNS)
        return list(state.data)

    @staticmethod
    def _print_thread(messages: list[ChatMessage], current_user_id: str) -> None:
        if not messages:
            print("No messages yet")
            return
        for message in messages:
            print(format_message(message, current_user_id))
