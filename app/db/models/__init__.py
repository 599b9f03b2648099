from app.db.models.answers import Answer
from app.db.models.base import Base
from app.db.models.friendships import Friendship
from app.db.models.game_sessions import GameSession
from app.db.models.participants import Participant
from app.db.models.products import Product
from app.db.models.session_invites import SessionInvite
from app.db.models.session_products import SessionProduct
from app.db.models.users import User

__all__ = [
    "Answer",
    "Base",
    "Friendship",
    "GameSession",
    "Participant",
    "Product",
    "SessionInvite",
    "SessionProduct",
    "User",
]
