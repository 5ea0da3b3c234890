"""
Domain Service - Telemetry Projections

Read-only figures derived from the latest display telemetry.
"""

import math
from typing import Optional, Tuple

from src.domain.entities.telemetry import DisplayTelemetry

# (stratum host fragment, stats page prefix)
POOL_STATS_PAGES: Tuple[Tuple[str, str], ...] = (
    ("public-pool.io", "https://web.public-pool.io/#/app/"),
    ("ocean.xyz", "https://ocean.xyz/stats/"),
    ("solo.d-central.tech", "https://solo.d-central.tech/#/app/"),
    ("solo.ckpool.org", "https://solostats.ckpool.org/stats/"),
)


def expected_hash_rate(telemetry: DisplayTelemetry) -> int:
    """Nominal GH/s: frequency (MHz) times total small cores, over 1000."""
    cores = telemetry.small_core_count * telemetry.asic_count
    return math.floor(telemetry.frequency * (cores / 1000))


def pool_quick_link(telemetry: DisplayTelemetry) -> Optional[str]:
    """Stats page URL for known pools, keyed on the payout address."""
    address = telemetry.stratum_user.split(".")[0]
    for host, prefix in POOL_STATS_PAGES:
        if host in telemetry.stratum_url:
            return f"{prefix}{address}"
    return None
