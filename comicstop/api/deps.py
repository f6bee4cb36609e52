import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from comicstop.adapters.clock import SystemClock
from comicstop.adapters.dev_notifier import DevNotifier
from comicstop.adapters.local_storage import LocalBlobStore
from comicstop.adapters.sqlite.repos import (
    SQLiteComicRepo,
    SQLiteContributorRepo,
    SQLiteCreatorProfileRepo,
    SQLiteUserRepo,
)
from comicstop.api.auth_utils import user_id_from_token
from comicstop.components.comics import ComicLifecycleComponent
from comicstop.components.creator_hub import CreatorHubComponent
from comicstop.components.uploads import UploadComponent
from comicstop.core.ports.time import TimePort
from comicstop.domain.entities import User
from comicstop.domain.errors import LifecycleError
from comicstop.rules.loader import load_rules
from comicstop.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("COMICSTOP_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "comicstop.db")
        self.blobs_dir = self.data_dir / "blobs"
        self.migrations_dir = str(self.base_dir / "migrations")
        self.rules_path = Path(
            os.environ.get("COMICSTOP_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.secret_key = os.environ.get("COMICSTOP_SECRET_KEY", "dev-secret-unsafe")
        self.public_base_url = os.environ.get("COMICSTOP_PUBLIC_BASE_URL", "/files")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repos ---
def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_profile_repo(settings: Settings = Depends(get_settings)) -> SQLiteCreatorProfileRepo:
    return SQLiteCreatorProfileRepo(settings.db_path)


def get_comic_repo(settings: Settings = Depends(get_settings)) -> SQLiteComicRepo:
    return SQLiteComicRepo(settings.db_path)


def get_contributor_repo(settings: Settings = Depends(get_settings)) -> SQLiteContributorRepo:
    return SQLiteContributorRepo(settings.db_path)


# --- Adapters ---
def get_blob_store(settings: Settings = Depends(get_settings)) -> LocalBlobStore:
    return LocalBlobStore(
        settings.blobs_dir,
        public_base_url=settings.public_base_url,
        signing_key=settings.secret_key,
    )


# Notifier singleton; the dev notifier keeps what it sent in memory
_notifier_instance: DevNotifier | None = None


def get_notifier() -> DevNotifier:
    """Get notifier singleton."""
    global _notifier_instance
    if _notifier_instance is None:
        _notifier_instance = DevNotifier()
    return _notifier_instance


_clock_instance: TimePort | None = None


def get_clock() -> TimePort:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Components ---
def get_upload_component(
    store: LocalBlobStore = Depends(get_blob_store),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> UploadComponent:
    return UploadComponent(store, clock, rules)


def get_comic_component(
    comics: SQLiteComicRepo = Depends(get_comic_repo),
    contributors: SQLiteContributorRepo = Depends(get_contributor_repo),
    store: LocalBlobStore = Depends(get_blob_store),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> ComicLifecycleComponent:
    return ComicLifecycleComponent(comics, contributors, store, clock, rules)


def get_creator_hub_component(
    users: SQLiteUserRepo = Depends(get_user_repo),
    profiles: SQLiteCreatorProfileRepo = Depends(get_profile_repo),
    notifier: DevNotifier = Depends(get_notifier),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> CreatorHubComponent:
    return CreatorHubComponent(users, profiles, notifier, clock, rules)


# --- Auth ---
bearer_scheme = HTTPBearer(auto_error=False)


def _token_from_request(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    # Cookie first (HttpOnly), then Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        return cookie_token.split(" ", 1)[1]
    if credentials is not None:
        return credentials.credentials
    return None


def _user_from_token(token: str, secret: str, user_repo: SQLiteUserRepo) -> User:
    user_id = user_id_from_token(token, secret)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = user_repo.get_by_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
) -> User:
    token = _token_from_request(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _user_from_token(token, settings.secret_key, user_repo)


async def get_optional_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
) -> User | None:
    """Like get_current_user, but anonymous requests get None."""
    token = _token_from_request(request, credentials)
    if not token:
        return None
    return _user_from_token(token, settings.secret_key, user_repo)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if "admin" not in user.roles:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user


# --- Error rendering ---


def raise_for_errors(errors: list[LifecycleError]) -> NoReturn:
    """Render the first component error as an HTTP error."""
    if not errors:
        raise HTTPException(status_code=500, detail="Operation failed without an error")
    err = errors[0]
    raise HTTPException(status_code=err.status_code, detail=err.to_dict())
