from __future__ import annotations

from dataclasses import asdict
from urllib.parse import urlencode

from .schemas import (
    AnalysisRecord,
    AnalysisReportResponse,
    ClimateForecastResponse,
    LandCostLabels,
    UrbanPlanningResponse,
)
from .scoring import AnalysisReport

OSM_EMBED_URL = "https://www.openstreetmap.org/export/embed.html"
MAP_HALF_SPAN_DEGREES = 0.05

RISK_TONES = {
    "low": "good",
    "medium": "caution",
    "high": "danger",
}


def aqi_status(aqi: int) -> str:
    if aqi <= 50:
        return "Excellent"
    if aqi <= 100:
        return "Moderate"
    return "Unhealthy"


def risk_tone(level: str) -> str:
    return RISK_TONES.get(level.lower(), "neutral")


def map_embed_url(latitude: float, longitude: float) -> str:
    bbox = ",".join(
        str(value)
        for value in (
            longitude - MAP_HALF_SPAN_DEGREES,
            latitude - MAP_HALF_SPAN_DEGREES,
            longitude + MAP_HALF_SPAN_DEGREES,
            latitude + MAP_HALF_SPAN_DEGREES,
        )
    )
    query = urlencode(
        {"bbox": bbox, "layer": "mapnik", "marker": f"{latitude},{longitude}"},
        safe=",",
    )
    return f"{OSM_EMBED_URL}?{query}"


def format_land_cost(cost: int) -> LandCostLabels:
    return LandCostLabels(short=f"${cost / 1000:.0f}K", full=f"${cost:,}")


def build_report_response(
    report: AnalysisReport,
    record: AnalysisRecord | None = None,
) -> AnalysisReportResponse:
    """Shape a scoring report, and the stored row if any, for API clients."""
    analysis = report.analysis
    return AnalysisReportResponse(
        analysis=record or AnalysisRecord.model_validate(asdict(analysis)),
        urban_planning=UrbanPlanningResponse(
            optimal=list(report.urban_planning.optimal),
            dangerous=list(report.urban_planning.dangerous),
            avoid=list(report.urban_planning.avoid),
            reasons=list(report.urban_planning.reasons),
        ),
        economic_prospects=list(report.economic_prospects),
        climate_forecast=ClimateForecastResponse.model_validate(asdict(report.climate_forecast)),
        aqi_status=aqi_status(analysis.aqi),
        stability_tone=risk_tone(analysis.ground_stability),
        land_cost_labels=format_land_cost(analysis.land_cost),
        map_url=map_embed_url(analysis.latitude, analysis.longitude),
        saved=record is not None,
    )
