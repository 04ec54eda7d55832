"""
Core modules for the SafeNest family safety API

This package contains the core business logic:
- geofencing: Distance calculation and safe zone evaluation
- alerts: Emergency and safe-zone-exit alert recording
- analytics: Family activity insights, safety score and recommendations
- realtime: WebSocket session registry and location update fan-out
"""

from .geofencing import (
    calculate_distance,
    is_within_zone,
    evaluate_safe_zones,
    check_safe_zones,
    ZoneCheck
)

from .alerts import (
    alert_recorder,
    AlertRecorder,
    EMERGENCY_ACTIONS
)

from .analytics import (
    insight_aggregator,
    InsightAggregator,
    MemberActivity,
    calculate_member_score,
    calculate_safety_score,
    generate_recommendations,
    PREDICTIONS
)

from .realtime import ConnectionManager

__all__ = [
    # Geofencing
    "calculate_distance",
    "is_within_zone",
    "evaluate_safe_zones",
    "check_safe_zones",
    "ZoneCheck",

    # Alerts
    "alert_recorder",
    "AlertRecorder",
    "EMERGENCY_ACTIONS",

    # Analytics
    "insight_aggregator",
    "InsightAggregator",
    "MemberActivity",
    "calculate_member_score",
    "calculate_safety_score",
    "generate_recommendations",
    "PREDICTIONS",

    # Realtime
    "ConnectionManager"
]
