from bolao import db  # noqa: F401 - imported for model imports

from .match import Match
from .pick import Pick
from .player import Player
from .round import Round

__all__ = [
    "Round",
    "Match",
    "Player",
    "Pick",
]
