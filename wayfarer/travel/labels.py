"""Human-readable travel labels (opaque strings for the presentation layer)."""

from wayfarer.travel.schemas import DangerTier, Route

DANGER_LABELS = {
    DangerTier.SAFE: "Safe road",
    DangerTier.RISKY: "Risky road",
    DangerTier.DANGEROUS: "Dangerous road",
}


def danger_label(danger: DangerTier) -> str:
    return DANGER_LABELS[danger]


def days_label(days: int) -> str:
    if days == 1:
        return "1 day of travel"
    return f"{days} days of travel"


def travel_label(route: Route) -> str:
    """One-line summary: duration, cost and danger."""
    return f"{days_label(route.distance_days)} • {route.cost} gold • {danger_label(route.danger)}"
