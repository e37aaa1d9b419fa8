"""
Saved wind profile (JSON) reading and writing.

A saved profile is a JSON list of layer objects already in canonical units
(meters MSL, degrees true "from", km/h), so it is loaded without any unit
normalization.

Usage:
    from windprofile.parsers.profile_json import dump_profile, load_profile

    text = dump_profile(layers)
    layers = load_profile(text)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError

from windprofile.data.models import WindLayer, WindSource
from windprofile.exceptions import ProfileFormatError

logger = logging.getLogger(__name__)


def load_profile(content: str, default_source: WindSource = WindSource.MANUAL) -> List[WindLayer]:
    """
    Read wind layers from saved profile JSON.

    Args:
        content: JSON text
        default_source: Source for entries that carry none

    Returns:
        Wind layers in file order

    Raises:
        ProfileFormatError: If the text is not a non-empty list of layers
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ProfileFormatError(f"Wind profile is not valid JSON: {e}") from e

    if not isinstance(data, list) or not data:
        raise ProfileFormatError("Wind profile contains no wind data")

    now = datetime.now(timezone.utc)
    layers = []
    for index, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise ProfileFormatError(f"Wind profile entry {index} is not an object")
        try:
            layers.append(WindLayer(**_layer_fields(item, default_source, now)))
        except ValidationError as e:
            raise ProfileFormatError(f"Wind profile entry {index} is invalid: {e}") from e

    logger.debug(f"Loaded {len(layers)} layers from saved profile")
    return layers


def _layer_fields(item: Dict[str, Any], default_source: WindSource, now: datetime) -> Dict[str, Any]:
    fields = {
        "altitude": _first(item, "altitude_m", "altitude", default=0),
        "direction": _first(item, "direction_deg", "direction", default=0),
        "speed": _first(item, "speed_kmh", "speed", default=0),
        "source": item.get("source") or default_source,
        "timestamp": item.get("timestamp") or now,
    }
    is_stable = _first(item, "is_stable", "isStable", default=None)
    if is_stable is not None:
        fields["is_stable"] = is_stable
    if item.get("vario") is not None:
        fields["vario"] = item["vario"]
    return fields


def _first(item: Dict[str, Any], *keys: str, default=None):
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return default


def dump_profile(layers: Iterable[WindLayer], indent: int = 2) -> str:
    """
    Serialize wind layers as saved profile JSON.

    Args:
        layers: Wind layers in canonical units
        indent: JSON indentation

    Returns:
        JSON text readable by load_profile
    """
    data = []
    for layer in layers:
        entry = {
            "altitude": layer.altitude,
            "direction": layer.direction,
            "speed": layer.speed,
            "source": layer.source.value,
            "timestamp": layer.timestamp.isoformat(),
        }
        if layer.is_stable is not None:
            entry["is_stable"] = layer.is_stable
        if layer.vario is not None:
            entry["vario"] = layer.vario
        data.append(entry)
    return json.dumps(data, indent=indent)
