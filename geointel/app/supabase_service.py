from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable

from supabase import Client, ClientOptions, create_client

from .config import Settings
from .schemas import AnalysisRecord
from .scoring import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10
NOT_AUTHENTICATED_MESSAGE = "Must be authenticated to save analysis"

ClientFactory = Callable[[str, str, ClientOptions], Client]


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str | None = None


@dataclass(frozen=True)
class AuthSession:
    user: AuthUser | None
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None


class NotAuthenticatedError(RuntimeError):
    def __init__(self, message: str = NOT_AUTHENTICATED_MESSAGE):
        super().__init__(message)
        self.message = message


class SupabaseServiceError(RuntimeError):
    def __init__(self, stage: str, message: str):
        super().__init__(message)
        self.stage = stage
        self.message = message


def _error_message(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message.strip():
        return message
    return str(exc) or exc.__class__.__name__


def _to_user(raw: Any) -> AuthUser | None:
    if raw is None:
        return None
    user_id = getattr(raw, "id", None)
    if not user_id:
        return None
    return AuthUser(id=str(user_id), email=getattr(raw, "email", None))


def _to_session(response: Any) -> AuthSession:
    user = _to_user(getattr(response, "user", None))
    session = getattr(response, "session", None)
    if session is None:
        return AuthSession(user=user)
    return AuthSession(
        user=user or _to_user(getattr(session, "user", None)),
        access_token=getattr(session, "access_token", None),
        refresh_token=getattr(session, "refresh_token", None),
        expires_in=getattr(session, "expires_in", None),
    )


class SupabaseGateway:
    """Authentication and analysis storage on a Supabase project.

    One gateway is built per process. Sign-in and user-scoped table calls go
    through short-lived clients so sessions never leak between requests; the
    long-lived client only verifies and revokes access tokens.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        client_factory: ClientFactory = create_client,
    ):
        settings.require_backend()
        self._settings = settings
        self._client_factory = client_factory
        self._client = self._new_client()

    @property
    def table_name(self) -> str:
        return self._settings.analysis_table

    def _new_client(self, access_token: str | None = None) -> Client:
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
            headers=headers,
        )
        return self._client_factory(
            self._settings.supabase_url, self._settings.supabase_key, options
        )

    def sign_up(self, email: str, password: str) -> AuthSession:
        client = self._new_client()
        try:
            response = client.auth.sign_up({"email": email, "password": password})
        except Exception as exc:
            logger.warning("Sign up failed for %s: %s", email, _error_message(exc))
            raise SupabaseServiceError("sign_up", _error_message(exc)) from exc
        logger.info("Registered account for %s", email)
        return _to_session(response)

    def sign_in(self, email: str, password: str) -> AuthSession:
        client = self._new_client()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:
            logger.warning("Sign in failed for %s: %s", email, _error_message(exc))
            raise SupabaseServiceError("sign_in", _error_message(exc)) from exc
        return _to_session(response)

    def sign_out(self, access_token: str) -> None:
        try:
            self._client.auth.admin.sign_out(access_token)
        except Exception as exc:
            raise SupabaseServiceError("sign_out", _error_message(exc)) from exc

    def get_user(self, access_token: str | None) -> AuthUser:
        if not access_token:
            raise NotAuthenticatedError()
        try:
            response = self._client.auth.get_user(access_token)
        except Exception as exc:
            logger.info("Rejected access token: %s", _error_message(exc))
            raise NotAuthenticatedError() from exc

        user = _to_user(getattr(response, "user", None))
        if user is None:
            raise NotAuthenticatedError()
        return user

    def save_analysis(self, access_token: str | None, result: AnalysisResult) -> AnalysisRecord:
        user = self.get_user(access_token)
        row = {**asdict(result), "user_id": user.id}

        client = self._new_client(access_token)
        try:
            response = client.table(self.table_name).insert(row).execute()
        except Exception as exc:
            logger.error("Saving analysis failed: %s", _error_message(exc))
            raise SupabaseServiceError("save_analysis", _error_message(exc)) from exc

        stored = response.data[0] if getattr(response, "data", None) else row
        logger.info(
            "Saved analysis for user %s at (%s, %s)", user.id, result.latitude, result.longitude
        )
        return AnalysisRecord.model_validate(stored)

    def get_analysis_history(
        self,
        access_token: str | None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[AnalysisRecord]:
        user = self.get_user(access_token)

        client = self._new_client(access_token)
        try:
            response = (
                client.table(self.table_name)
                .select("*")
                .eq("user_id", user.id)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as exc:
            raise SupabaseServiceError("history", _error_message(exc)) from exc

        return [AnalysisRecord.model_validate(row) for row in response.data or []]
