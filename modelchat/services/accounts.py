import logging
from typing import Tuple

from ..config import Settings
from ..errors import InvalidCredentials
from ..models.domain import User
from .firestore import FirestoreRepository
from .security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AccountService:
    """Registration and login on top of the user collection."""

    def __init__(self, repo: FirestoreRepository, settings: Settings):
        self.repo = repo
        self.settings = settings

    def register(self, username: str, password: str) -> User:
        password_hash = hash_password(password, rounds=self.settings.bcrypt_rounds)
        return self.repo.create_user(username, password_hash)

    def login(self, username: str, password: str) -> Tuple[str, str]:
        """Returns ``(token, username)`` or raises InvalidCredentials."""
        user = self.repo.find_user_by_username(username)
        if user is None or not verify_password(password, user.password):
            logger.warning("Rejected login for username %r", username)
            raise InvalidCredentials()

        token = create_access_token(user.id, self.settings)
        return token, user.username
