"""EC2 service wrapper."""

import json


def get_reservations(ec2_client, filters=None):
    """Return the reservations of a single DescribeInstances call.

    Filters are passed through as given. Only the first result page is
    returned; errors from the client propagate.
    """
    kwargs = {}
    if filters is not None:
        kwargs["Filters"] = filters
    result = ec2_client.describe_instances(**kwargs)
    return result.get("Reservations", [])


def iter_instances(reservations):
    for reservation in reservations:
        for instance in reservation.get("Instances", []):
            yield instance


def filters_from_json(text):
    """Convert ``{"filters": [{"name": ..., "values": [...]}]}`` to boto3 Filters.

    Raises ValueError when *text* is not valid filter JSON.
    """
    try:
        raw = json.loads(text or "{}")
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid filter JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError("filter JSON must be an object")

    filters = []
    for item in raw.get("filters", []):
        if not isinstance(item, dict) or "name" not in item:
            raise ValueError("every filter needs a name")
        values = item.get("values", [])
        if isinstance(values, str):
            values = [values]
        filters.append({"Name": item["name"], "Values": [str(v) for v in values]})
    return filters


def tag_value(resource, key):
    for tag in resource.get("Tags", []):
        if tag.get("Key") == key:
            return tag.get("Value")
    return None
