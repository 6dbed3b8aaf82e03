from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

RiskLabel = Literal["Low", "Medium", "High"]


class AnalysisRequest(BaseModel):
    """Raw coordinate form input; numeric and range checks happen in the route."""

    model_config = ConfigDict(extra="forbid")

    # Raw JSON values, so booleans reach parse_coordinates uncoerced.
    latitude: Any = None
    longitude: Any = None


class AnalysisRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    user_id: str | None = None
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    aqi: int = Field(..., ge=0)
    ground_stability: RiskLabel
    flood_risk: RiskLabel
    earthquake_risk: RiskLabel
    tsunami_risk: RiskLabel
    landslide_risk: RiskLabel
    land_cost: int = Field(..., ge=0)
    created_at: datetime | None = None


class UrbanPlanningResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    optimal: list[str] = Field(..., min_length=1)
    dangerous: list[str] = Field(default_factory=list)
    avoid: list[str] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)


class ClimateForecastResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    temperature_trend: Literal["Increasing", "Stable", "Decreasing"]
    humidity_trend: Literal["Increasing", "Stable", "Decreasing"]
    avg_temperature: int = Field(..., ge=15, lt=35)
    avg_humidity: int = Field(..., ge=40, lt=80)
    disaster_trend: Literal["Increasing risk", "Stable conditions", "Decreasing risk"]


class LandCostLabels(BaseModel):
    model_config = ConfigDict(extra="forbid")

    short: str
    full: str


class AnalysisReportResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    analysis: AnalysisRecord
    urban_planning: UrbanPlanningResponse
    economic_prospects: list[str] = Field(..., min_length=2, max_length=3)
    climate_forecast: ClimateForecastResponse
    aqi_status: Literal["Excellent", "Moderate", "Unhealthy"]
    stability_tone: str
    land_cost_labels: LandCostLabels
    map_url: str
    saved: bool = False


class AnalysisHistoryResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    count: int = Field(..., ge=0)
    items: list[AnalysisRecord] = Field(default_factory=list)


class SignInRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def strip_email(cls, email: str) -> str:
        return email.strip()


class SignUpRequest(SignInRequest):
    confirm_password: str = ""


class SessionResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str | None = None
    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    confirmation_required: bool = False


class UserResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    email: str | None = None
