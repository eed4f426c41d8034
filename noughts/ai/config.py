from dataclasses import dataclass


# Priority bands for candidate cells (higher = better)
PRIORITY_WIN = 40_000
PRIORITY_BLOCK = 20_000
PRIORITY_FORK = 5_000
PRIORITY_CENTRE = 300
PRIORITY_CORNER = 200
PRIORITY_EDGE = 100


@dataclass(frozen=True)
class OpponentLevelConfig:
    random_rate: float  # chance of ignoring priorities and playing any empty cell
    randomize_top_k: int = 1  # 1 = always the best cell

OPPONENT_LEVELS = {
    1: OpponentLevelConfig(random_rate=1.0),
    2: OpponentLevelConfig(random_rate=0.3, randomize_top_k=2),
    3: OpponentLevelConfig(random_rate=0.0, randomize_top_k=1),
}
