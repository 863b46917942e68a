from dataclasses import dataclass
from typing import Optional

DEFAULT_NAME_PREFIX = 'Player'


def display_name(raw, sid: str) -> str:
    """Strip a user-supplied name, falling back to a sid-derived default."""
    name = raw.strip() if isinstance(raw, str) else ''
    return name or f"{DEFAULT_NAME_PREFIX} {sid[:4]}"


@dataclass
class Player:
    id: str
    name: str
    game_id: Optional[str] = None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
        }
