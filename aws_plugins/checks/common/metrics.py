"""CloudWatch statistics helpers and Graphite output formatting."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def split_csv(value) -> List[str]:
    """Split a comma separated option; lists (from YAML) pass through."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return [item.strip() for item in str(value).split(",") if item.strip()]


def dimensions_from_string(text) -> List[Dict[str, str]]:
    """Parse ``Name=Value,Name=Value`` into CloudWatch dimensions.

    Pairs without exactly one ``=`` are ignored.
    """
    dimensions = []
    for pair in split_csv(text):
        parts = pair.split("=")
        if len(parts) == 2:
            dimensions.append({"Name": parts[0], "Value": parts[1]})
    return dimensions


def latest_datapoint(datapoints) -> Optional[dict]:
    if not datapoints:
        return None
    return max(datapoints, key=lambda point: point["Timestamp"])


def get_latest_statistic(
    cloudwatch,
    namespace: str,
    metric_name: str,
    dimensions: List[Dict[str, str]],
    statistic: str,
    period: int,
    start_time: datetime,
    end_time: datetime,
    unit: Optional[str] = None,
) -> Optional[float]:
    """Return *statistic* of the most recent datapoint, or ``None`` without data.

    Errors from the client propagate.
    """
    params = {
        "Namespace": namespace,
        "MetricName": metric_name,
        "Dimensions": dimensions,
        "StartTime": start_time,
        "EndTime": end_time,
        "Period": int(period),
        "Statistics": [statistic],
    }
    if unit:
        params["Unit"] = unit

    response = cloudwatch.get_metric_statistics(**params)
    point = latest_datapoint(response.get("Datapoints", []))
    if point is None:
        logger.debug("No %s/%s datapoints for %s", namespace, metric_name, dimensions)
        return None
    return point.get(statistic)


def graphite_line(path: str, value, timestamp) -> str:
    if isinstance(timestamp, datetime):
        timestamp = timestamp.timestamp()
    return f"{path} {value} {int(timestamp)}"


def graphite_safe(name: str) -> str:
    """Make *name* usable as a single Graphite path segment."""
    return name.replace(".", "_").replace(" ", "_").replace("/", "_")
