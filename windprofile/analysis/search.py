"""
Wind search: find the layers that carry you closest to a target heading.

Layers from your own profile and from every shared peer profile are pooled,
scored by angular distance to the target plus a penalty for layers that were
not measured in stable flight, and the best few are returned.

Usage:
    from windprofile.analysis.search import search_winds

    results = search_winds(90, own_layers, peer_profiles, direction_mode="from")
    for r in results:
        print(r.display_name, r.layer.altitude, r.turn_direction, r.score)
"""

import logging
import math
from typing import Iterable, List, Optional, Sequence, Union

from config.settings import OWN_PROFILE_COLOR
from windprofile.data.models import DirectionMode, PeerProfile, SearchResult, WindLayer

logger = logging.getLogger(__name__)

# =============================================================================
# Search Constants
# =============================================================================

MAX_RESULTS = 3

OWN_PROFILE_ID = "me"
OWN_PROFILE_NAME = "My winds"

# Headings within this many degrees need no turn
TURN_THRESHOLD_DEGREES = 1.0

# Penalty per m/s of vertical speed at measurement time
VARIO_PENALTY_FACTOR = 10.0
# Penalty when stability is unknown (treated as moderately unstable)
UNKNOWN_STABILITY_PENALTY = 20.0


def parse_target_direction(target: Union[str, float, int, None]) -> Optional[float]:
    """
    Read a target heading typed by the user or passed as a number.

    Returns:
        Heading in [0, 360], or None if it is not a usable heading
    """
    if target is None or isinstance(target, bool):
        return None
    if isinstance(target, str):
        target = target.strip()
        if not target:
            return None
    try:
        value = float(target)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or not 0 <= value <= 360:
        return None
    return value


def comparison_direction(direction: float, direction_mode: DirectionMode) -> float:
    """Direction of a stored ("from") layer expressed in the display convention."""
    if direction_mode == DirectionMode.TO:
        return (direction + 180) % 360
    return direction


def angular_difference(direction: float, target: float) -> float:
    """Shortest angular distance between two headings, 0-180."""
    diff = abs(direction - target)
    if diff > 180:
        diff = 360 - diff
    return diff


def turn_direction(direction: float, target: float) -> str:
    """
    Which way to turn from the target heading to reach the layer's direction.

    Returns:
        'R', 'L', or '' when within TURN_THRESHOLD_DEGREES
    """
    delta = direction - target
    if delta > 180:
        delta -= 360
    if delta <= -180:
        delta += 360
    if abs(delta) < TURN_THRESHOLD_DEGREES:
        return ""
    return "R" if delta > 0 else "L"


def stability_penalty(layer: WindLayer) -> float:
    """Score penalty for a layer measured while climbing or sinking."""
    if layer.is_stable:
        return 0.0
    if layer.vario is not None:
        return VARIO_PENALTY_FACTOR * abs(layer.vario)
    return UNKNOWN_STABILITY_PENALTY


def _score_layers(
    layers: Iterable[WindLayer],
    target: float,
    direction_mode: DirectionMode,
    source_id: str,
    display_name: str,
    color: str,
) -> List[SearchResult]:
    results = []
    for layer in layers:
        compare = comparison_direction(layer.direction, direction_mode)
        diff = angular_difference(compare, target)
        results.append(SearchResult(
            source_id=source_id,
            display_name=display_name,
            color=color,
            layer=layer,
            direction_diff=diff,
            turn_direction=turn_direction(compare, target),
            score=diff + stability_penalty(layer),
        ))
    return results


def search_winds(
    target_direction: Union[str, float, int],
    own_layers: Sequence[WindLayer],
    peer_profiles: Sequence[PeerProfile] = (),
    direction_mode: Union[DirectionMode, str] = DirectionMode.FROM,
    limit: int = MAX_RESULTS,
) -> List[SearchResult]:
    """
    Rank wind layers from all profiles against a target heading.

    Args:
        target_direction: Heading in degrees 0-360, as number or text
        own_layers: The local wind profile
        peer_profiles: Profiles shared by other pilots
        direction_mode: Convention the target heading is given in
        limit: Maximum number of results

    Returns:
        Up to `limit` results sorted ascending by score; empty if the
        target heading is not a number in [0, 360]
    """
    target = parse_target_direction(target_direction)
    if target is None:
        logger.debug(f"No search for target direction {target_direction!r}")
        return []

    direction_mode = DirectionMode(direction_mode)

    results = _score_layers(
        own_layers, target, direction_mode,
        OWN_PROFILE_ID, OWN_PROFILE_NAME, OWN_PROFILE_COLOR,
    )
    for profile in peer_profiles:
        results.extend(_score_layers(
            profile.layers, target, direction_mode,
            profile.id, profile.display_name, profile.color,
        ))

    results.sort(key=lambda r: r.score)
    logger.debug(f"Scored {len(results)} layers for target {target:.0f}°")
    return results[:limit]
