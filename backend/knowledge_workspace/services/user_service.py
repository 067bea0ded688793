"""
User accounts: signup, login, profiles and preferences.
"""
from typing import Dict, List, Optional, Tuple

from .analytics_service import AnalyticsService
from .database import DatabaseInterface
from ..api.exceptions import (
    AuthenticationError,
    ConflictError,
    MissingFieldsError,
    PermissionDeniedError,
    UserNotFoundError,
)
from ..core.logging_config import get_logger
from ..core.security import create_access_token, hash_password, verify_password
from ..models.interaction import ActionType
from ..models.user import UserPreferences, UserRecord
from ..utils.tag_extractor import normalize_tags
from ..utils.validators import is_blank, new_id, require_fields, validate_id

logger = get_logger(__name__)


def public_user(record: Dict) -> Dict:
    """Drop private fields from a stored user row."""
    return {key: value for key, value in record.items() if key != "password_hash"}


class UserService:
    def __init__(self, db: DatabaseInterface, analytics: Optional[AnalyticsService] = None):
        self.db = db
        self.analytics = analytics
    
    async def signup(self, name: str, email: str, password: str) -> Tuple[Dict, str]:
        """
        Register a new account.
        
        Returns:
            (public user, access token)
        
        Raises:
            MissingFieldsError: If a field is blank
            ConflictError: If the e-mail is already registered
        """
        require_fields(name=name, email=email, password=password)
        email = email.strip().lower()
        if await self.db.get_user_by_email(email):
            raise ConflictError("Email is already registered", code="EMAIL_TAKEN")
        
        record = UserRecord(
            id=new_id(),
            name=name.strip(),
            email=email,
            password_hash=hash_password(password)
        ).model_dump()
        try:
            created = await self.db.create_user(record)
        except ValueError:
            raise ConflictError("Email is already registered", code="EMAIL_TAKEN")
        
        logger.info(f"User signed up: {created['id']}")
        if self.analytics:
            self.analytics.record_in_background(created["id"], ActionType.SIGNUP)
        return public_user(created), create_access_token(created["id"])
    
    async def login(self, email: str, password: str) -> Tuple[Dict, str]:
        """
        Authenticate with e-mail and password.
        
        Raises:
            AuthenticationError: On unknown e-mail or wrong password
        """
        require_fields(email=email, password=password)
        record = await self.db.get_user_by_email(email.strip().lower())
        if not record or not verify_password(password, record["password_hash"]):
            logger.info("Failed login attempt")
            raise AuthenticationError("Invalid email or password", code="INVALID_CREDENTIALS")
        
        if self.analytics:
            self.analytics.record_in_background(record["id"], ActionType.LOGIN)
        return public_user(record), create_access_token(record["id"])
    
    async def get_user(self, user_id: str) -> Dict:
        validate_id(user_id, "user ID")
        record = await self.db.get_user(user_id)
        if not record:
            raise UserNotFoundError()
        return public_user(record)
    
    async def update_preferences(self, user_id: str, favorite_topics: List[str]) -> Dict:
        """Replace the user's favorite topics (seed for personalized recommendations)."""
        if favorite_topics is None:
            raise MissingFieldsError("favorite_topics is required")
        preferences = UserPreferences(favorite_topics=normalize_tags(favorite_topics))
        record = await self.db.update_user(user_id, {"preferences": preferences.model_dump()})
        if not record:
            raise UserNotFoundError()
        return public_user(record)
    
    async def update_profile(
        self,
        actor_id: str,
        user_id: str,
        name: Optional[str] = None,
        favorite_topics: Optional[List[str]] = None
    ) -> Dict:
        """
        Update a profile's name and preferences. Users may only edit themselves.
        
        Raises:
            InvalidIdError: If user_id is malformed
            PermissionDeniedError: FORBIDDEN when editing someone else
            UserNotFoundError: If the user does not exist
            MissingFieldsError: If the new name is blank
        """
        validate_id(user_id, "user ID")
        if actor_id != user_id:
            raise PermissionDeniedError("Not authorized to update this profile")
        record = await self.db.get_user(user_id)
        if not record:
            raise UserNotFoundError()
        
        changes: Dict = {}
        if name is not None:
            if is_blank(name):
                raise MissingFieldsError("name cannot be blank")
            changes["name"] = name.strip()
        if favorite_topics is not None:
            preferences = UserPreferences(**record.get("preferences", {}))
            preferences.favorite_topics = normalize_tags(favorite_topics)
            changes["preferences"] = preferences.model_dump()
        if not changes:
            return public_user(record)
        return public_user(await self.db.update_user(user_id, changes))
