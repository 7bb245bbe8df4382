from .engine import BeloteGame
from .config import GameOptions
from .events import Event

__version__ = "0.1.0"

__all__ = [
    "BeloteGame",
    "GameOptions",
    "Event",
]
