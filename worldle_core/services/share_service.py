"""
Share Service

Builds the emoji summary players paste after finishing a game.
"""

import math
from typing import List, Optional

from ..models.game import Direction, GameMode, GameState
from ..models.settings import Theme

SQUARES_PER_GUESS = 5


def generate_square_characters(proximity_percent: int, theme: Theme = Theme.LIGHT) -> List[str]:
    """
    One green square per 20% of proximity, a yellow one for a remaining 10%
    or more, then blank squares up to five.
    """
    green = math.floor(proximity_percent / 20)
    yellow = 1 if proximity_percent - green * 20 >= 10 else 0
    blank = "⬛" if theme == Theme.DARK else "⬜"

    squares = ["🟩"] * green + ["🟨"] * yellow
    return squares + [blank] * (SQUARES_PER_GUESS - len(squares))


def _guess_suffix(direction: Optional[str], is_hit: bool) -> str:
    if is_hit:
        return "🎉"
    if direction is None:
        return ""
    return Direction(direction).arrow


def build_share_text(state: GameState, theme: Theme = Theme.LIGHT) -> str:
    """
    Summary of a finished game, e.g.

        #Worldle #412 3/6
        🟩🟩🟨⬜⬜↗️
        🟩🟩🟩🟩🟨⬅️
        🟩🟩🟩🟩🟩🎉

    Free-play games have no day number.

    Raises:
        ValueError: If the game is not over yet
    """
    if not state.game_over:
        raise ValueError("Only finished games can be shared")

    score = str(state.current_round) if state.won else "X"
    if state.mode == GameMode.DAILY.value and state.day_index is not None:
        title = f"#Worldle #{state.day_index} {score}/{state.max_rounds}"
    else:
        title = f"#Worldle {score}/{state.max_rounds}"

    lines = [title]
    for guess in state.guesses:
        is_hit = guess["country_code"] == state.target_code
        squares = generate_square_characters(guess["proximity_percent"], theme)
        lines.append("".join(squares) + _guess_suffix(guess["direction"], is_hit))

    return "\n".join(lines)
