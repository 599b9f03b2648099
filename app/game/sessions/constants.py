from decimal import Decimal

SESSION_STATUS_ACTIVE = "active"
SESSION_STATUS_COMPLETED = "completed"
SESSION_STATUS_ARCHIVED = "archived"
SESSION_STATUSES = frozenset(
    {SESSION_STATUS_ACTIVE, SESSION_STATUS_COMPLETED, SESSION_STATUS_ARCHIVED}
)
CLOSED_SESSION_STATUSES = frozenset({SESSION_STATUS_COMPLETED, SESSION_STATUS_ARCHIVED})
SESSION_STATUS_TRANSITIONS = frozenset(
    {
        (SESSION_STATUS_ACTIVE, SESSION_STATUS_COMPLETED),
        (SESSION_STATUS_ACTIVE, SESSION_STATUS_ARCHIVED),
        (SESSION_STATUS_COMPLETED, SESSION_STATUS_ARCHIVED),
    }
)

DIFFICULTY_EASY = "easy"
DIFFICULTY_MEDIUM = "medium"
DIFFICULTY_HARD = "hard"
SESSION_DIFFICULTIES = frozenset({DIFFICULTY_EASY, DIFFICULTY_MEDIUM, DIFFICULTY_HARD})
DEFAULT_DIFFICULTY = DIFFICULTY_MEDIUM

VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"
VISIBILITY_FRIENDS_ONLY = "friends_only"
SESSION_VISIBILITIES = frozenset({VISIBILITY_PUBLIC, VISIBILITY_PRIVATE, VISIBILITY_FRIENDS_ONLY})
DEFAULT_VISIBILITY = VISIBILITY_PUBLIC

DEFAULT_MAX_PARTICIPANTS = 10
PRODUCTS_PER_SESSION = 4
SESSION_NAME_MAX_LENGTH = 255
MAX_ANSWER_SCORE = 100
MAX_GUESSED_PRICE = Decimal("99999999.99")
DB_INT_MAX = 2**31 - 1

INVITE_STATUS_PENDING = "pending"
INVITE_STATUS_ACCEPTED = "accepted"
INVITE_STATUS_REJECTED = "rejected"
INVITE_STATUSES = frozenset({INVITE_STATUS_PENDING, INVITE_STATUS_ACCEPTED, INVITE_STATUS_REJECTED})

ROLE_ADMIN = "admin"

ACCESS_REASON_FRIENDS_ONLY = "FriendsOnly"
ACCESS_REASON_PRIVATE_SESSION = "PrivateSession"
ACCESS_REASON_NOT_CREATOR_OR_ADMIN = "NotCreatorOrAdmin"
ACCESS_REASON_NOT_PARTICIPANT = "NotParticipant"
ACCESS_REASON_NOT_INVITER_OR_ADMIN = "NotInviterOrAdmin"
