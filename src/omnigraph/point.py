"""Logical identity of an on-chain entity."""

from dataclasses import dataclass
from typing import Any, Dict

from .errors import ValidationError


@dataclass(frozen=True)
class Point:
    """
    A (network, contract role) pair.

    Points are value objects: two points naming the same role on the same
    network are equal and hash the same, so they can key dictionaries and
    identify graph nodes independently of the address they resolve to.
    """

    network_id: int
    contract_role: str

    def __str__(self) -> str:
        return format_point(self)


def format_point(point: Point) -> str:
    """Render a point for log lines, e.g. ``[EndpointV2 @ 30101]``."""
    return f"[{point.contract_role} @ {point.network_id}]"


def point_from_dict(data: Dict[str, Any]) -> Point:
    """
    Parse a point from its structured form.

    Args:
        data: Mapping with ``network_id`` and ``contract_role`` keys

    Returns:
        Parsed Point

    Raises:
        ValidationError: If a key is missing or has the wrong type
    """
    try:
        network_id = data["network_id"]
        contract_role = data["contract_role"]
    except (KeyError, TypeError) as e:
        raise ValidationError(f"Malformed point {data!r}: missing {e}") from e

    if isinstance(network_id, bool) or not isinstance(network_id, int):
        raise ValidationError(f"Point network_id must be an integer, got {network_id!r}")
    if not isinstance(contract_role, str) or not contract_role:
        raise ValidationError(
            f"Point contract_role must be a non-empty string, got {contract_role!r}"
        )

    return Point(network_id=network_id, contract_role=contract_role)
