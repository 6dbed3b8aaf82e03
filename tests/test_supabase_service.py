"""Tests for SupabaseGateway with an in-memory stand-in for the Supabase client."""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from geointel.app.config import MissingConfigurationError, Settings
from geointel.app.scoring import analyze_location
from geointel.app.supabase_service import (
    NotAuthenticatedError,
    SupabaseGateway,
    SupabaseServiceError,
)

SETTINGS = Settings(supabase_url="https://project.supabase.co", supabase_key="anon-key")
USER = SimpleNamespace(id="user-123", email="you@example.com")


class AuthApiError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FakeQuery:
    def __init__(self, backend: "FakeBackend", table: str):
        self.backend = backend
        self.table = table
        self.calls: list[tuple] = []
        backend.queries.append(self)

    def _record(self, *call):  # type: ignore[no-untyped-def]
        self.calls.append(call)
        return self

    def insert(self, row):  # type: ignore[no-untyped-def]
        return self._record("insert", row)

    def select(self, columns):  # type: ignore[no-untyped-def]
        return self._record("select", columns)

    def eq(self, column, value):  # type: ignore[no-untyped-def]
        return self._record("eq", column, value)

    def order(self, column, desc=False):  # type: ignore[no-untyped-def]
        return self._record("order", column, desc)

    def limit(self, count):  # type: ignore[no-untyped-def]
        return self._record("limit", count)

    def execute(self):  # type: ignore[no-untyped-def]
        if self.backend.table_error is not None:
            raise self.backend.table_error
        if self.calls and self.calls[0][0] == "insert":
            row = dict(self.calls[0][1])
            row.update(id=len(self.backend.rows) + 1, created_at="2026-10-19T12:00:00+00:00")
            self.backend.rows.append(row)
            return SimpleNamespace(data=[row])
        return SimpleNamespace(data=list(reversed(self.backend.rows)))


class FakeAuth:
    def __init__(self, backend: "FakeBackend"):
        self.backend = backend
        self.admin = SimpleNamespace(sign_out=self._admin_sign_out)

    def _admin_sign_out(self, jwt):  # type: ignore[no-untyped-def]
        self.backend.signed_out.append(jwt)

    def sign_up(self, credentials):  # type: ignore[no-untyped-def]
        if self.backend.auth_error is not None:
            raise self.backend.auth_error
        return SimpleNamespace(user=USER, session=None)

    def sign_in_with_password(self, credentials):  # type: ignore[no-untyped-def]
        if self.backend.auth_error is not None:
            raise self.backend.auth_error
        session = SimpleNamespace(
            access_token="access-abc",
            refresh_token="refresh-abc",
            expires_in=3600,
            user=USER,
        )
        return SimpleNamespace(user=USER, session=session)

    def get_user(self, jwt):  # type: ignore[no-untyped-def]
        if jwt == "expired":
            raise AuthApiError("invalid JWT: token is expired")
        if jwt == "ghost":
            return None
        return SimpleNamespace(user=USER)


class FakeBackend:
    def __init__(self) -> None:
        self.rows: list[dict] = []
        self.queries: list[FakeQuery] = []
        self.options: list = []
        self.signed_out: list[str] = []
        self.auth_error: Exception | None = None
        self.table_error: Exception | None = None

    def factory(self, url, key, options):  # type: ignore[no-untyped-def]
        assert url == SETTINGS.supabase_url
        assert key == SETTINGS.supabase_key
        self.options.append(options)
        return SimpleNamespace(
            auth=FakeAuth(self),
            table=lambda name: FakeQuery(self, name),
        )


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def gateway(backend: FakeBackend) -> SupabaseGateway:
    return SupabaseGateway(SETTINGS, client_factory=backend.factory)


def test_gateway_requires_configuration() -> None:
    with pytest.raises(MissingConfigurationError):
        SupabaseGateway(Settings(supabase_url="", supabase_key=""))


def test_long_lived_client_does_not_persist_sessions(
    backend: FakeBackend, gateway: SupabaseGateway
) -> None:
    options = backend.options[0]
    assert options.persist_session is False
    assert options.auto_refresh_token is False
    assert "Authorization" not in options.headers


def test_save_analysis_stores_flat_fields_for_user(
    backend: FakeBackend, gateway: SupabaseGateway
) -> None:
    report = analyze_location(40.7128, -74.0060)
    record = gateway.save_analysis("token-1", report.analysis)

    assert record.id == 1
    assert record.user_id == "user-123"
    assert record.aqi == 59
    assert record.land_cost == 270134
    assert record.created_at is not None

    insert_query = backend.queries[-1]
    assert insert_query.table == "analysis_history"
    op, row = insert_query.calls[0]
    assert op == "insert"
    assert set(row) == {
        "latitude",
        "longitude",
        "aqi",
        "ground_stability",
        "flood_risk",
        "earthquake_risk",
        "tsunami_risk",
        "landslide_risk",
        "land_cost",
        "user_id",
    }
    assert backend.options[-1].headers["Authorization"] == "Bearer token-1"


@pytest.mark.parametrize("token", [None, "", "ghost", "expired"])
def test_save_analysis_requires_identity(
    backend: FakeBackend, gateway: SupabaseGateway, token
) -> None:  # type: ignore[no-untyped-def]
    report = analyze_location(10.0, 20.0)
    with pytest.raises(NotAuthenticatedError, match="Must be authenticated to save analysis"):
        gateway.save_analysis(token, report.analysis)
    assert backend.rows == []


def test_save_analysis_surfaces_backend_message(
    backend: FakeBackend, gateway: SupabaseGateway
) -> None:
    backend.table_error = AuthApiError('new row violates row-level security policy for table "analysis_history"')
    with pytest.raises(SupabaseServiceError) as exc_info:
        gateway.save_analysis("token-1", analyze_location(1.0, 2.0).analysis)
    assert exc_info.value.stage == "save_analysis"
    assert exc_info.value.message == (
        'new row violates row-level security policy for table "analysis_history"'
    )


def test_history_is_scoped_and_ordered(backend: FakeBackend, gateway: SupabaseGateway) -> None:
    gateway.save_analysis("token-1", analyze_location(1.0, 2.0).analysis)
    gateway.save_analysis("token-1", analyze_location(3.0, 4.0).analysis)

    items = gateway.get_analysis_history("token-1", limit=5)
    assert [item.id for item in items] == [2, 1]

    query = backend.queries[-1]
    assert ("eq", "user_id", "user-123") in query.calls
    assert ("order", "created_at", True) in query.calls
    assert ("limit", 5) in query.calls


def test_sign_in_returns_session(gateway: SupabaseGateway) -> None:
    session = gateway.sign_in("you@example.com", "password1")
    assert session.access_token == "access-abc"
    assert session.refresh_token == "refresh-abc"
    assert session.expires_in == 3600
    assert session.user is not None
    assert session.user.email == "you@example.com"


def test_sign_up_without_session_when_confirmation_pending(gateway: SupabaseGateway) -> None:
    session = gateway.sign_up("you@example.com", "password1")
    assert session.access_token is None
    assert session.user is not None
    assert session.user.id == "user-123"


def test_sign_in_error_keeps_backend_message(
    backend: FakeBackend, gateway: SupabaseGateway
) -> None:
    backend.auth_error = AuthApiError("Invalid login credentials")
    with pytest.raises(SupabaseServiceError) as exc_info:
        gateway.sign_in("you@example.com", "wrong-password")
    assert exc_info.value.stage == "sign_in"
    assert str(exc_info.value) == "Invalid login credentials"


def test_sign_out_revokes_token(backend: FakeBackend, gateway: SupabaseGateway) -> None:
    gateway.sign_out("token-1")
    assert backend.signed_out == ["token-1"]


def test_get_user(gateway: SupabaseGateway) -> None:
    user = gateway.get_user("token-1")
    assert user.id == "user-123"
    assert user.email == "you@example.com"
