from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.schemas import UserCreate
from storefront.domain.signup import SignupSession
from storefront.domain.enums import UserStatus
from storefront.errors import EmailInUseError, InvalidSignupError, UserNotFoundError
from storefront.repos.user_repo import UserRepo
from storefront.services.notification_service import NotificationService
from storefront.services.signup_store import SignupSessionStore
from storefront.utils.settings import SIGNUP_SESSION_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(
        self,
        db: Session,
        signup_store: SignupSessionStore | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.repo = UserRepo(db)
        self.signup_store = signup_store
        self.notification_service = notification_service or NotificationService()

    def create_user(self, payload: UserCreate) -> UserModel:
        if payload.email and self.repo.get_user_by_email(payload.email):
            raise EmailInUseError(payload.email)

        user = UserModel(name=payload.name, email=payload.email, wallet_balance=0)
        created = self.repo.create_user(user)
        logger.info(f"User {created.id} created")
        return created

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def list_users(self) -> list[UserModel]:
        return self.repo.list_users()

    def toggle_user_status(self, user_id: int) -> UserModel:
        """Active <-> Inactive. An inactive user cannot place orders."""
        user = self.get_user(user_id)
        user.status = (
            UserStatus.INACTIVE.value if user.status == UserStatus.ACTIVE.value else UserStatus.ACTIVE.value
        )
        self.repo.commit()

        logger.info(f"User {user_id} status -> {user.status}")
        return self.repo.refresh(user)

    def start_signup(self, name: str, email: str) -> SignupSession:
        """Open a pending signup; the OTP goes out through the notification queue."""
        if self.repo.get_user_by_email(email):
            raise EmailInUseError(email)

        session = SignupSession.start(name, email, SIGNUP_SESSION_TTL_SECONDS)
        self.signup_store.save(session, SIGNUP_SESSION_TTL_SECONDS)
        self.notification_service.send_signup_otp(email, session.otp)

        logger.info(f"Signup session opened for {email}")
        return session

    def verify_signup(self, token: str, otp: str) -> UserModel:
        session = self.signup_store.get(token)
        if not session or session.is_expired():
            raise InvalidSignupError("OTP has expired. Please sign up again.")

        if not session.matches(otp):
            logger.warning(f"Wrong OTP for signup of {session.email}")
            raise InvalidSignupError("Invalid OTP")

        user = self.create_user(UserCreate(name=session.name, email=session.email))
        self.signup_store.delete(token)
        return user
