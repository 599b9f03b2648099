from app.game.sessions.answers import submit_answer
from app.game.sessions.invites import (
    accept_invite,
    cancel_invite,
    list_received_invites,
    list_sent_invites,
    list_session_invites,
    reject_invite,
    send_invite,
)
from app.game.sessions.join import join_session
from app.game.sessions.lifecycle import create_session, delete_session, update_session_status
from app.game.sessions.queries import (
    get_session,
    get_session_products,
    list_participants,
    list_sessions,
)

__all__ = [
    "accept_invite",
    "cancel_invite",
    "create_session",
    "delete_session",
    "get_session",
    "get_session_products",
    "join_session",
    "list_participants",
    "list_received_invites",
    "list_sent_invites",
    "list_session_invites",
    "list_sessions",
    "reject_invite",
    "send_invite",
    "submit_answer",
    "update_session_status",
]
