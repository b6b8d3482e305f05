# tictactoe/config.py
from dataclasses import dataclass, field
import logging
import os
import tomllib  # python >=3.11
from typing import Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

GAME_MODES = ("PVM", "PVP")
DIFFICULTIES = ("Easy", "Hard")
GRID_SIZES = (3, 4, 5)

@dataclass
class SearchConfig:
    exhaustive_threshold: int = 3  # largest board size searched exhaustively
    use_pruning: bool = True  # alpha-beta; never changes the chosen move
    use_transposition: bool = True
    threads: int = 1  # >1 splits root moves across worker threads

@dataclass
class GameConfig:
    mode: str = "PVM"
    difficulty: str = "Hard"
    grid_size: int = 3
    seed: Optional[int] = None  # seeds the random fallback picker

@dataclass
class UIConfig:
    engine_name: str = "TicTacToe Engine"
    api_port: int = 8000

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    game: GameConfig = field(default_factory=GameConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "game", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = raw["log_level"]
        return cfg


def configure_logging(level: Optional[str] = None):
    logging.basicConfig(level=(level or CONFIG.log_level).upper(), format=LOG_FORMAT)


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("TICTACTOE_CONFIG_TOML", "config.toml"))
# allow env override of the exhaustive threshold for quick experiments
override_threshold = os.environ.get("TICTACTOE_EXHAUSTIVE_THRESHOLD")
if override_threshold:
    try:
        CONFIG.search.exhaustive_threshold = int(override_threshold)
    except ValueError:
        logger.warning("Ignoring TICTACTOE_EXHAUSTIVE_THRESHOLD=%r (not an integer)", override_threshold)
