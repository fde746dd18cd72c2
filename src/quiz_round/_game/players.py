# Area: Game
"""
quiz_round._game.players — Player and connection bookkeeping
=============================================================

Players are keyed by a stable id chosen by the client, so several
connections (tabs, devices) can share one player. A player is removed only
when its last connection closes.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional

logger = logging.getLogger("quiz_round.players")

FALLBACK_NAME = "Player"


def upsert_player(
    players: MutableMapping[str, Any],
    player_id: str,
    name: Optional[str] = None,
    avatar: Optional[str] = None,
    *,
    now_ms: int,
    max_name_length: int = 20,
    default_avatar: str = "robot-1",
) -> Any:
    """
    Create or update a player.

    Name is truncated to ``max_name_length``; a missing name or avatar keeps
    the previous value (or the fallback for a new player). Points and the
    creation timestamp survive updates.

    Returns:
        The stored player (a store view when ``players`` is one)
    """
    existing = players.get(player_id)
    if name:
        player_name = name[:max_name_length]
    elif existing is not None:
        player_name = existing["name"]
    else:
        player_name = FALLBACK_NAME

    players[player_id] = {
        "id": player_id,
        "name": player_name,
        "avatar": avatar or (existing["avatar"] if existing is not None else default_avatar),
        "connectedAt": existing["connectedAt"] if existing is not None else now_ms,
        "points": existing["points"] if existing is not None else 0,
    }
    if existing is None:
        logger.info(f"Player joined: {player_id} ({player_name})")
    return players[player_id]


def drop_connection(state: MutableMapping[str, Any], connection_id: str) -> Optional[str]:
    """
    Forget a closed connection.

    Returns:
        The id of the player removed because no connection references it
        anymore, or None
    """
    connections = state["connections"]
    player_id = connections.get(connection_id)
    if player_id is None:
        return None

    del connections[connection_id]
    if player_id in connections.values():
        return None

    players = state["players"]
    if player_id in players:
        del players[player_id]
        logger.info(f"Player left: {player_id}")
    return player_id
