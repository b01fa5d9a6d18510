# app/dependencies.py
import logging
from functools import lru_cache
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .core.config import settings
from .database import get_session
from .exceptions import APIException
from .application.ports.account_repo import AccountDto
from .application.ports.notifier import Notifier
from .application.services.auth_service import AuthService
from .application.services.credential_store import CredentialStore
from .application.services.otp_engine import OtpEngine
from .application.services.photo_service import PhotoService
from .application.services.profile_service import ProfileService
from .application.services.results import TokenStatus
from .application.services.token_issuer import TokenIssuer
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.http.image_fetcher import AiohttpImageFetcher
from .infrastructure.notifications.brevo_sender import BrevoEmailSender
from .infrastructure.notifications.dispatcher import NotificationDispatcher
from .infrastructure.persistence.sqlalchemy.repositories.account_repository_sql import SqlAccountRepository
from .infrastructure.persistence.sqlalchemy.repositories.otp_repository_sql import SqlOtpRepository
from .infrastructure.security.bcrypt_hasher import BcryptPasswordHasher
from .infrastructure.storage.local_storage import LocalStorageRepository

logger = logging.getLogger(__name__)

# Auth scheme
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache()
def get_password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=settings.PASSWORD_HASH_ROUNDS)


@lru_cache()
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


@lru_cache()
def get_notifier() -> NotificationDispatcher:
    sender = BrevoEmailSender(
        api_key=settings.BREVO_API_KEY,
        sender_email=settings.BREVO_SENDER_EMAIL,
        sender_name=settings.BREVO_SENDER_NAME,
        api_url=settings.BREVO_API_URL,
        timeout_seconds=settings.EMAIL_TIMEOUT_SECONDS,
    )
    return NotificationDispatcher(sender, max_queue_size=settings.NOTIFICATION_QUEUE_SIZE)


@lru_cache()
def get_audit_logger() -> StdAuditLogger:
    return StdAuditLogger()


def build_credential_store(session: Session) -> CredentialStore:
    return CredentialStore(account_repo=SqlAccountRepository(session), hasher=get_password_hasher())


def build_otp_engine(session: Session, credentials: CredentialStore) -> OtpEngine:
    return OtpEngine(
        otp_repo=SqlOtpRepository(session),
        credentials=credentials,
        hasher=get_password_hasher(),
        expire_minutes=settings.OTP_EXPIRE_MINUTES,
        delete_after_minutes=settings.OTP_DELETE_AFTER_MINUTES,
    )


def get_credential_store(session: Session = Depends(get_session)) -> CredentialStore:
    return build_credential_store(session)


def get_auth_service(
    credentials: CredentialStore = Depends(get_credential_store),
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(
        credentials=credentials,
        otp_engine=build_otp_engine(session, credentials),
        tokens=tokens,
        notifier=notifier,
        audit_logger=get_audit_logger(),
    )


def get_profile_service(credentials: CredentialStore = Depends(get_credential_store)) -> ProfileService:
    return ProfileService(credentials=credentials)


@lru_cache()
def get_photo_service() -> PhotoService:
    return PhotoService(
        storage_repo=LocalStorageRepository(settings.UPLOAD_DIR),
        fetcher=AiohttpImageFetcher(timeout_seconds=settings.EMAIL_TIMEOUT_SECONDS),
        base_url=settings.BASE_URL,
        max_file_size=settings.MAX_FILE_SIZE,
        allowed_types=settings.ALLOWED_IMAGE_TYPES,
        default_folder=settings.DEFAULT_UPLOAD_FOLDER,
    )


def get_current_account(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    store: CredentialStore = Depends(get_credential_store),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> AccountDto:
    """Resolve the caller from a bearer token, falling back to the session cookie."""
    if credentials and credentials.credentials:
        token = credentials.credentials
    else:
        token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise APIException(status_code=401, detail="You have no access to this route")

    check = tokens.verify(token)
    if check.status is TokenStatus.EXPIRED:
        raise APIException(status_code=401, detail="Token expired")
    if check.status is not TokenStatus.OK:
        raise APIException(status_code=401, detail="You have no access to this route")

    account = store.find_by_id(check.claims.account_id)
    if not account:
        logger.warning("Valid token presented for a missing account")
        raise APIException(status_code=401, detail="You have no access to this route")
    return account
