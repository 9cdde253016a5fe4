# archimedes_prep/services/user_service.py
import logging
from ..core.database import DatabaseManager, get_db_manager
from ..core.exceptions import UserNotFoundError
from ..models.schemas import User

logger = logging.getLogger(__name__)

class UserService:
    """The single student profile"""

    def __init__(self, db_manager: DatabaseManager = None):
        self.db_manager = db_manager or get_db_manager()

    def get_user(self) -> User:
        user = self.db_manager.get_user()
        if not user:
            raise UserNotFoundError()
        return User.model_validate(user)

    def update_user(self, name: str) -> User:
        """Rename the student; the name is the only mutable field"""
        name = name.strip()
        if not name:
            raise ValueError("Name must not be blank")

        user = self.get_user()
        self.db_manager.update_user_name(user.id, name)
        logger.info(f"✅ User {user.id} renamed to '{name}'")
        return self.get_user()

def get_user_service() -> UserService:
    return UserService()
