from app.db.repo.answers_repo import AnswersRepo
from app.db.repo.friendships_repo import FriendshipsRepo
from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.db.repo.participants_repo import ParticipantsRepo
from app.db.repo.products_repo import ProductsRepo
from app.db.repo.session_invites_repo import SessionInvitesRepo
from app.db.repo.session_products_repo import SessionProductsRepo
from app.db.repo.users_repo import UsersRepo

__all__ = [
    "AnswersRepo",
    "FriendshipsRepo",
    "GameSessionsRepo",
    "ParticipantsRepo",
    "ProductsRepo",
    "SessionInvitesRepo",
    "SessionProductsRepo",
    "UsersRepo",
]
