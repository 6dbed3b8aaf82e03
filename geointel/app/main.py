from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import MissingConfigurationError, configure_logging, load_settings
from .presentation import build_report_response
from .schemas import (
    AnalysisHistoryResponse,
    AnalysisReportResponse,
    AnalysisRequest,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    UserResponse,
)
from .scoring import analyze_location
from .supabase_service import (
    DEFAULT_HISTORY_LIMIT,
    AuthSession,
    NotAuthenticatedError,
    SupabaseGateway,
    SupabaseServiceError,
)
from .validation import (
    CoordinateValidationError,
    CredentialValidationError,
    parse_coordinates,
    validate_sign_in,
    validate_sign_up,
)

logger = logging.getLogger(__name__)

settings = load_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    try:
        app.state.gateway = SupabaseGateway(settings)
    except MissingConfigurationError as exc:
        logger.warning("Persistence disabled: %s", exc)
        app.state.gateway = None
    yield
    app.state.gateway = None


app = FastAPI(title="Geo-Analytical Intelligence API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

bearer_scheme = HTTPBearer(auto_error=False)


def get_gateway(request: Request) -> SupabaseGateway:
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise HTTPException(
            status_code=503,
            detail="SUPABASE_URL and SUPABASE_ANON_KEY must be configured on the backend.",
        )
    return gateway


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    if credentials is None:
        return None
    return credentials.credentials


def _session_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        user_id=session.user.id if session.user else None,
        email=session.user.email if session.user else None,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        confirmation_required=session.access_token is None,
    )


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/analysis/by-point", response_model=AnalysisReportResponse)
def analysis_by_point(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
) -> AnalysisReportResponse:
    """Score a coordinate without storing anything."""
    return build_report_response(analyze_location(lat, lon))


@app.post("/api/analysis", response_model=AnalysisReportResponse)
def create_analysis(
    payload: AnalysisRequest,
    gateway: SupabaseGateway = Depends(get_gateway),
    access_token: str | None = Depends(get_access_token),
) -> AnalysisReportResponse:
    try:
        coordinate = parse_coordinates(payload.latitude, payload.longitude)
    except CoordinateValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc

    report = analyze_location(coordinate.latitude, coordinate.longitude)
    try:
        record = gateway.save_analysis(access_token, report.analysis)
    except NotAuthenticatedError as exc:
        raise HTTPException(status_code=401, detail=exc.message) from exc
    except SupabaseServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc

    return build_report_response(report, record)


@app.get("/api/analysis/history", response_model=AnalysisHistoryResponse)
def analysis_history(
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=100),
    gateway: SupabaseGateway = Depends(get_gateway),
    access_token: str | None = Depends(get_access_token),
) -> AnalysisHistoryResponse:
    try:
        items = gateway.get_analysis_history(access_token, limit=limit)
    except NotAuthenticatedError as exc:
        raise HTTPException(status_code=401, detail="Must be authenticated to view history") from exc
    except SupabaseServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc

    return AnalysisHistoryResponse(count=len(items), items=items)


@app.post("/api/auth/signup", response_model=SessionResponse)
def sign_up(
    payload: SignUpRequest,
    gateway: SupabaseGateway = Depends(get_gateway),
) -> SessionResponse:
    try:
        validate_sign_up(payload.email, payload.password, payload.confirm_password)
    except CredentialValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        session = gateway.sign_up(payload.email, payload.password)
    except SupabaseServiceError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    return _session_response(session)


@app.post("/api/auth/login", response_model=SessionResponse)
def sign_in(
    payload: SignInRequest,
    gateway: SupabaseGateway = Depends(get_gateway),
) -> SessionResponse:
    try:
        validate_sign_in(payload.email, payload.password)
    except CredentialValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        session = gateway.sign_in(payload.email, payload.password)
    except SupabaseServiceError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    return _session_response(session)


@app.post("/api/auth/logout")
def sign_out(
    gateway: SupabaseGateway = Depends(get_gateway),
    access_token: str | None = Depends(get_access_token),
) -> dict[str, str]:
    if not access_token:
        raise HTTPException(status_code=401, detail="Not signed in")
    try:
        gateway.sign_out(access_token)
    except SupabaseServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return {"status": "signed_out"}


@app.get("/api/auth/me", response_model=UserResponse)
def current_user(
    gateway: SupabaseGateway = Depends(get_gateway),
    access_token: str | None = Depends(get_access_token),
) -> UserResponse:
    try:
        user = gateway.get_user(access_token)
    except NotAuthenticatedError as exc:
        raise HTTPException(status_code=401, detail="Not signed in") from exc
    return UserResponse(id=user.id, email=user.email)
