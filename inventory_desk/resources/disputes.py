from __future__ import annotations

from pydantic import ValidationError

from inventory_desk.core.errors import ReadError, WriteError, validation_error
from inventory_desk.core.logging import get_logger, log_action
from inventory_desk.data.errors import translate
from inventory_desk.data.service import DataService, Filter, Order, ServiceError
from inventory_desk.resources.forms import validate_chat_message
from inventory_desk.resources.loading import Failed, Loaded, StateListener, load
from inventory_desk.resources.models import ChatMessage
from inventory_desk.session.store import SessionStore

logger = get_logger(__name__)

CHAT_TABLE = "chat_messages"


class DisputeThread:
    """Chat attached to a rejected item; every send is followed by a full refetch."""

    def __init__(self, service: DataService, sessions: SessionStore) -> None:
        self.service = service
        self.sessions = sessions

    def list_messages(self, parent_id: str) -> list[ChatMessage]:
        session = self.sessions.require_session()
        try:
            rows = self.service.query(
                CHAT_TABLE,
                access_token=session.access_token,
                filters=[Filter("rejected_item_id", parent_id)],
                order=Order("created_at", ascending=True),
            )
        except ServiceError as exc:
            log_action(logger, "disputes", "list_messages", session.user_id, "error", code=exc.code)
            raise translate(exc, ReadError) from exc
        try:
            return [ChatMessage.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise ReadError(code="INVALID_ROW", message="Unexpected chat message shape", details=str(exc)) from exc

    def load(self, parent_id: str, on_state: StateListener | None = None) -> Loaded[list[ChatMessage]] | Failed:
        return load(lambda: self.list_messages(parent_id), on_state)

    def send(self, parent_id: str, body: str) -> list[ChatMessage]:
        session = self.sessions.require_session()
        form = validate_chat_message(body)
        if not form.is_valid:
            raise validation_error(form.field_errors)
        payload = {
            "rejected_item_id": parent_id,
            "sender_id": session.user_id,
            "message": form.values["message"],
        }
        try:
            self.service.insert(CHAT_TABLE, payload, access_token=session.access_token)
        except ServiceError as exc:
            log_action(logger, "disputes", "send", session.user_id, "error", code=exc.code)
            raise translate(exc, WriteError) from exc
        log_action(logger, "disputes", "send", session.user_id, "success", rejected_item_id=parent_id)
        return self.list_messages(parent_id)
