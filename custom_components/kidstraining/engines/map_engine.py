"""Map Engine - per-child quest map progression.

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.
Inputs are never mutated; every operation returns new node dicts.

State machine:
- Nodes are ordered by (stage_index, node_index).
- The current node is the first node that is not completed.
- Each completed session advances only the current node by 1, capped at
  ``required_sessions``. Reaching the requirement completes the node and
  releases its reward exactly once.
- Completed nodes are never reopened. A fully cleared map ignores sessions.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from ..type_defs import MapAdvance, MapNodeData


class MapEngine:
    """Pure map/quest calculations."""

    @staticmethod
    def node_id(child_id: str, stage_index: int, node_index: int) -> str:
        """Return the stable id of a map node."""
        return f"map-{child_id}-{stage_index}-{node_index}"

    @staticmethod
    def build_starter_map(child_id: str) -> list[MapNodeData]:
        """Return the stage 0 starter layout for a new child."""
        nodes: list[MapNodeData] = []
        for node_index, (node_type, required, reward_xp, reward_coins) in enumerate(
            const.MAP_STARTER_LAYOUT
        ):
            nodes.append(
                {
                    const.DATA_INTERNAL_ID: MapEngine.node_id(child_id, 0, node_index),
                    const.DATA_NODE_CHILD_ID: child_id,
                    const.DATA_NODE_STAGE_INDEX: 0,
                    const.DATA_NODE_NODE_INDEX: node_index,
                    const.DATA_NODE_TYPE: node_type,
                    const.DATA_NODE_REQUIRED_SESSIONS: required,
                    const.DATA_NODE_PROGRESS: 0,
                    const.DATA_NODE_IS_COMPLETED: False,
                    const.DATA_NODE_REWARD_XP: reward_xp,
                    const.DATA_NODE_REWARD_COINS: reward_coins,
                    const.DATA_NODE_COMPLETED_AT: None,
                }
            )
        return nodes

    @staticmethod
    def ensure_map(
        nodes: Sequence[MapNodeData] | None, child_id: str
    ) -> list[MapNodeData]:
        """Return ``nodes`` sorted, or the starter map if the child has none."""
        if not nodes:
            return MapEngine.build_starter_map(child_id)
        return MapEngine.sorted_nodes(nodes)

    @staticmethod
    def sorted_nodes(nodes: Sequence[MapNodeData]) -> list[MapNodeData]:
        """Return nodes in (stage_index, node_index) order."""
        return sorted(
            nodes,
            key=lambda node: (
                node[const.DATA_NODE_STAGE_INDEX],
                node[const.DATA_NODE_NODE_INDEX],
            ),
        )

    @staticmethod
    def current_node(nodes: Sequence[MapNodeData]) -> MapNodeData | None:
        """Return the first incomplete node, or None if the map is cleared."""
        for node in MapEngine.sorted_nodes(nodes):
            if not node[const.DATA_NODE_IS_COMPLETED]:
                return node
        return None

    @staticmethod
    def advance_map(nodes: Sequence[MapNodeData], now_iso: str) -> MapAdvance:
        """Advance the current node by one session.

        Returns:
            MapAdvance with the new node list, the node completed by this
            session (if any) and the bonus XP/coins it released.
        """
        ordered = MapEngine.sorted_nodes(nodes)
        current = MapEngine.current_node(ordered)
        if current is None:
            return {
                "nodes": [dict(node) for node in ordered],  # type: ignore[misc]
                "completed_node": None,
                "bonus_xp": 0,
                "bonus_coins": 0,
            }

        required = current[const.DATA_NODE_REQUIRED_SESSIONS]
        progress = min(required, current[const.DATA_NODE_PROGRESS] + 1)
        updated: MapNodeData = {
            **current,
            const.DATA_NODE_PROGRESS: progress,
        }  # type: ignore[misc]
        completed_node: MapNodeData | None = None
        bonus_xp = 0
        bonus_coins = 0
        if progress >= required:
            updated[const.DATA_NODE_IS_COMPLETED] = True
            updated[const.DATA_NODE_COMPLETED_AT] = now_iso
            completed_node = updated
            bonus_xp = updated[const.DATA_NODE_REWARD_XP]
            bonus_coins = updated[const.DATA_NODE_REWARD_COINS]

        current_id = current[const.DATA_INTERNAL_ID]
        new_nodes = [
            updated if node[const.DATA_INTERNAL_ID] == current_id else dict(node)
            for node in ordered
        ]
        return {
            "nodes": new_nodes,  # type: ignore[typeddict-item]
            "completed_node": completed_node,
            "bonus_xp": bonus_xp,
            "bonus_coins": bonus_coins,
        }

    @staticmethod
    def completed_count(nodes: Sequence[MapNodeData]) -> int:
        """Return the number of completed nodes."""
        return sum(1 for node in nodes if node[const.DATA_NODE_IS_COMPLETED])

    @staticmethod
    def is_stage_complete(nodes: Sequence[MapNodeData], stage_index: int) -> bool:
        """Return True if the stage has nodes and all of them are completed."""
        stage_nodes = [
            node for node in nodes if node[const.DATA_NODE_STAGE_INDEX] == stage_index
        ]
        return bool(stage_nodes) and all(
            node[const.DATA_NODE_IS_COMPLETED] for node in stage_nodes
        )

    @staticmethod
    def stage_name(stage_index: int) -> str:
        """Return the display name of a stage."""
        if 0 <= stage_index < len(const.MAP_STAGE_NAMES):
            return const.MAP_STAGE_NAMES[stage_index]
        return f"Stage {stage_index + 1}"
