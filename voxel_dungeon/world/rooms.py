# voxel_dungeon/world/rooms.py
from typing import List, Optional, Sequence

import structlog

from voxel_dungeon.config import DungeonConfig
from voxel_dungeon.errors import PlacementExhausted
from voxel_dungeon.rng import DungeonRNG
from voxel_dungeon.world.geometry import Point3, Room

log = structlog.get_logger(__name__)


def _draw_candidate(config: DungeonConfig, rng: DungeonRNG, first: bool) -> Room:
    """Draw one candidate room. Draw order: x, y (skipped for the first room), z, size x/y/z."""
    x = rng.get_int(0, config.width - 1)
    y = 0 if first else rng.get_int(0, max(config.levels - 1, 0))
    z = rng.get_int(0, config.height - 1)

    # Vertical extent is capped by the levels left above the room floor
    max_depth = max(config.min_room_depth, min(config.max_room_depth, config.levels - y))
    size = Point3(
        rng.get_int(config.min_room_width, config.max_room_width),
        rng.get_int(config.min_room_depth, max_depth),
        rng.get_int(config.min_room_height, config.max_room_height),
    )
    return Room(Point3(x, y, z), size)


def _rejection_reason(
    candidate: Room, rooms: Sequence[Room], config: DungeonConfig
) -> Optional[str]:
    buffer = candidate.inflate_xz(config.room_spacing)
    if not buffer.within(config.width, config.levels, config.height):
        return "out_of_bounds"
    for existing in rooms:
        # Stacking allowed: only a true volume overlap collides.
        # Otherwise rooms may not share any footprint on any level.
        if config.overlap_rooms:
            collides = buffer.intersects(existing)
        else:
            collides = buffer.intersects_2d(existing)
        if collides:
            return "intersects_room"
    return None


def place_rooms(config: DungeonConfig, rng: DungeonRNG) -> List[Room]:
    """Rejection-sample ``config.room_count`` rooms after the predefined ones.

    Predefined rooms come first, unchanged, and take part in collision
    checks. Each random room gets ``config.max_tries`` attempts; running out
    raises PlacementExhausted instead of retrying forever.
    """
    rooms: List[Room] = list(config.predefined)
    log.debug(
        "Placing rooms",
        predefined=len(rooms),
        room_count=config.room_count,
        max_tries=config.max_tries,
    )

    for index in range(config.room_count):
        tries = 0
        while True:
            candidate = _draw_candidate(config, rng, first=index == 0)
            reason = _rejection_reason(candidate, rooms, config)
            if reason is None:
                rooms.append(candidate)
                log.debug("Placed room", index=index, room=candidate, tries=tries + 1)
                break
            tries += 1
            log.debug("Rejected room candidate", index=index, reason=reason, tries=tries)
            if tries >= config.max_tries:
                log.error(
                    "Room placement exhausted",
                    index=index,
                    attempts=tries,
                    placed=len(rooms),
                )
                raise PlacementExhausted(index, tries)

    log.info("Room placement finished", total=len(rooms), random=config.room_count)
    return rooms


__all__ = ["place_rooms"]
