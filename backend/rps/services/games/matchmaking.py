from collections import OrderedDict
from typing import Dict, Optional

from rps.models import Player


class MatchmakingQueue:
    """FIFO waiting list keyed by player id. A player is queued at most once."""

    def __init__(self):
        self._waiting: 'OrderedDict[str, Player]' = OrderedDict()

    def enqueue(self, player: Player) -> bool:
        if player.id in self._waiting:
            return False
        self._waiting[player.id] = player
        return True

    def dequeue_oldest(self) -> Optional[Player]:
        if not self._waiting:
            return None
        _, player = self._waiting.popitem(last=False)
        return player

    def cancel(self, player_id: str) -> bool:
        return self._waiting.pop(player_id, None) is not None

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._waiting

    def __len__(self) -> int:
        return len(self._waiting)

    def snapshot(self) -> Dict[str, str]:
        return {pid: p.name for pid, p in self._waiting.items()}
