"""
Prometheus metrics for the MMA Picks API.

HTTP request metrics are exported by prometheus-fastapi-instrumentator
(see app.main); this module defines the domain counters:
- fighter resolutions (created / updated / reused / update_failed / failed)
- bout results ingested (recorded / failed)
- user bets placed (inserted / updated) and settled (won / lost)
"""
from prometheus_client import Counter

fighter_resolutions_total = Counter(
    "fighter_resolutions_total",
    "Fighter upsert-by-name resolutions",
    ["outcome"]
)

bout_results_ingested_total = Counter(
    "bout_results_ingested_total",
    "Bout results processed by results ingestion",
    ["status"]
)

user_bets_placed_total = Counter(
    "user_bets_placed_total",
    "User bets placed",
    ["mode"]
)

user_bets_settled_total = Counter(
    "user_bets_settled_total",
    "User bets settled against recorded results",
    ["result"]
)


def record_fighter_resolution(outcome: str) -> None:
    """Record a fighter resolution ('created', 'updated', 'reused', 'update_failed', 'failed')."""
    fighter_resolutions_total.labels(outcome=outcome).inc()


def record_bout_result_ingested(status: str) -> None:
    """Record one processed results-feed item ('recorded' or 'failed')."""
    bout_results_ingested_total.labels(status=status).inc()


def record_bet_placed(mode: str) -> None:
    """Record a bet placement ('inserted' or 'updated')."""
    user_bets_placed_total.labels(mode=mode).inc()


def record_bet_settled(result: str) -> None:
    """Record a settled bet ('won' or 'lost')."""
    user_bets_settled_total.labels(result=result).inc()
