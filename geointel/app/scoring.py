from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

RiskLevel = Literal["Low", "Medium", "High"]

LOW_THRESHOLD = 0.33
HIGH_THRESHOLD = 0.66

TRENDS = ("Increasing", "Stable", "Decreasing")
DISASTER_TRENDS = ("Increasing risk", "Stable conditions", "Decreasing risk")

PRIME_LAND_COST = 300000
MODERATE_LAND_COST = 150000


@dataclass(frozen=True)
class AnalysisResult:
    latitude: float
    longitude: float
    aqi: int
    ground_stability: RiskLevel
    flood_risk: RiskLevel
    earthquake_risk: RiskLevel
    tsunami_risk: RiskLevel
    landslide_risk: RiskLevel
    land_cost: int


@dataclass(frozen=True)
class UrbanPlanning:
    optimal: tuple[str, ...] = ()
    dangerous: tuple[str, ...] = ()
    avoid: tuple[str, ...] = ()
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClimateForecast:
    temperature_trend: str
    humidity_trend: str
    avg_temperature: int
    avg_humidity: int
    disaster_trend: str


@dataclass(frozen=True)
class AnalysisReport:
    analysis: AnalysisResult
    urban_planning: UrbanPlanning
    economic_prospects: tuple[str, ...]
    climate_forecast: ClimateForecast


def seeded_random(seed: float) -> float:
    """Map a seed to [0, 1) with the legacy ``sin(seed) * 10000`` hash.

    Not a statistically sound generator. The formula is kept as-is so that
    reports stored by earlier versions of the app can be reproduced exactly.
    """
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def risk_level(value: float) -> RiskLevel:
    if value < LOW_THRESHOLD:
        return "Low"
    if value < HIGH_THRESHOLD:
        return "Medium"
    return "High"


# Ground stability shares the risk buckets; "High" here is the good outcome.
stability_level = risk_level


def aqi_seed(lat: float, lon: float) -> float:
    return abs(lat * 1000 + lon * 1000)


def land_cost_seed(lat: float, lon: float) -> float:
    return abs(lat * 100 + lon * 100)


def stability_seed(lat: float, lon: float) -> float:
    return abs(lat * 1000 + lon)


def flood_seed(lat: float, lon: float) -> float:
    return abs(lat + lon * 1000)


def earthquake_seed(lat: float, lon: float) -> float:
    return abs(lat * 500 + lon * 500)


def tsunami_seed(lat: float, lon: float) -> float:
    return abs(lat * 200 + lon * 300)


def landslide_seed(lat: float, lon: float) -> float:
    return abs(lat * 300 + lon * 200)


def climate_seed(lat: float, lon: float) -> float:
    return abs(lat * 10 + lon * 10)


def calculate_aqi(lat: float, lon: float) -> int:
    return math.floor(20 + seeded_random(aqi_seed(lat, lon)) * 130)


def aqi_multiplier(aqi: int) -> float:
    if aqi < 50:
        return 1.3
    if aqi < 100:
        return 1.0
    return 0.7


def calculate_land_cost(lat: float, lon: float, aqi: int) -> int:
    # The AQI discount comes from its own seed, not from this draw.
    base_price = 50000 + seeded_random(land_cost_seed(lat, lon)) * 450000
    return math.floor(base_price * aqi_multiplier(aqi))


def urban_planning_recommendations(
    ground_stability: str,
    flood_risk: str,
    earthquake_risk: str,
) -> UrbanPlanning:
    optimal: list[str] = []
    dangerous: list[str] = []
    avoid: list[str] = []
    reasons: list[str] = []

    if ground_stability == "High":
        optimal.extend(
            ["Residential high-rise buildings", "Commercial centers", "Industrial facilities"]
        )
        reasons.append("High ground stability allows for multi-story construction")
    elif ground_stability == "Low":
        avoid.extend(["High-rise buildings", "Heavy industrial structures"])
        reasons.append("Low ground stability increases foundation failure risk")

    if flood_risk == "Low":
        optimal.extend(["Underground parking", "Basement storage facilities"])
    elif flood_risk == "High":
        dangerous.extend(["Low-lying areas", "River proximity zones"])
        avoid.extend(["Underground construction", "Ground-floor residential"])
        reasons.append("High flood risk requires elevated construction")

    if earthquake_risk == "High":
        dangerous.extend(["Areas near fault lines", "Non-reinforced structures"])
        reasons.append("High seismic activity requires earthquake-resistant design")

    if not optimal:
        optimal.extend(["Low-rise residential", "Parks and recreation"])

    return UrbanPlanning(
        optimal=tuple(optimal),
        dangerous=tuple(dangerous),
        avoid=tuple(avoid),
        reasons=tuple(reasons),
    )


def economic_prospects(land_cost: int, aqi: int) -> tuple[str, ...]:
    if land_cost > PRIME_LAND_COST:
        prospects = [
            "Prime location with high investment potential",
            "Suitable for luxury residential or commercial development",
        ]
    elif land_cost > MODERATE_LAND_COST:
        prospects = [
            "Moderate development potential",
            "Balanced cost-benefit ratio for mid-range projects",
        ]
    else:
        prospects = [
            "Affordable development opportunity",
            "Suitable for budget-conscious projects",
        ]

    if aqi < 50:
        prospects.append("Excellent air quality attracts premium residents")
    elif aqi > 100:
        prospects.append("Air quality improvements needed to increase value")

    return tuple(prospects)


def climate_forecast(lat: float, lon: float) -> ClimateForecast:
    seed = climate_seed(lat, lon)
    value = seeded_random(seed)

    return ClimateForecast(
        temperature_trend=TRENDS[math.floor(value * 3)],
        humidity_trend=TRENDS[math.floor(seeded_random(seed + 1) * 3)],
        avg_temperature=math.floor(15 + value * 20),
        avg_humidity=math.floor(40 + value * 40),
        disaster_trend=DISASTER_TRENDS[math.floor(seeded_random(seed + 2) * 3)],
    )


def analyze_location(latitude: float, longitude: float) -> AnalysisReport:
    """Build the full report for an already validated coordinate pair."""
    aqi = calculate_aqi(latitude, longitude)
    ground_stability = stability_level(seeded_random(stability_seed(latitude, longitude)))
    flood_risk = risk_level(seeded_random(flood_seed(latitude, longitude)))
    earthquake_risk = risk_level(seeded_random(earthquake_seed(latitude, longitude)))
    tsunami_risk = risk_level(seeded_random(tsunami_seed(latitude, longitude)))
    landslide_risk = risk_level(seeded_random(landslide_seed(latitude, longitude)))
    land_cost = calculate_land_cost(latitude, longitude, aqi)

    analysis = AnalysisResult(
        latitude=latitude,
        longitude=longitude,
        aqi=aqi,
        ground_stability=ground_stability,
        flood_risk=flood_risk,
        earthquake_risk=earthquake_risk,
        tsunami_risk=tsunami_risk,
        landslide_risk=landslide_risk,
        land_cost=land_cost,
    )

    return AnalysisReport(
        analysis=analysis,
        urban_planning=urban_planning_recommendations(
            ground_stability, flood_risk, earthquake_risk
        ),
        economic_prospects=economic_prospects(land_cost, aqi),
        climate_forecast=climate_forecast(latitude, longitude),
    )
