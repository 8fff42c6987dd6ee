"""
Baccarat drawing logic.

Baccarat has fixed drawing rules - nobody makes a decision once the cards are
out. These functions decide when Player and Banker take a third card and are
shared by the round state machine and its tests.
"""

from cardweight.common.card import LabelLike, point


def player_draws_third_card(player_value: int) -> bool:
    """
    Determine if Player draws a third card.

    Player drawing rules:
    - 0-5: Draw
    - 6-7: Stand
    - 8-9: Natural (the round is already over)

    Args:
        player_value: Player's two-card total

    Returns:
        True if Player should draw, False otherwise
    """
    return player_value <= 5


def banker_draws_third_card(banker_value: int, player_drew: bool, player_third_card: int) -> bool:
    """
    Determine if Banker draws a third card.

    Rules:
    - If Player didn't draw: Banker draws on 0-5, stands on 6-7
    - If Player drew:
      - Banker 0-2: Always draw
      - Banker 3: Draw unless Player's 3rd card is 8
      - Banker 4: Draw if Player's 3rd card is 2-7
      - Banker 5: Draw if Player's 3rd card is 4-7
      - Banker 6: Draw if Player's 3rd card is 6-7
      - Banker 7: Stand

    Args:
        banker_value: Banker's two-card total
        player_drew: Whether Player drew a third card
        player_third_card: Point value of Player's third card (0-9, or -1 if none)

    Returns:
        True if Banker should draw, False otherwise
    """
    if not player_drew:
        return banker_value <= 5

    if banker_value <= 2:
        return True
    elif banker_value == 3:
        return player_third_card != 8
    elif banker_value == 4:
        return 2 <= player_third_card <= 7
    elif banker_value == 5:
        return 4 <= player_third_card <= 7
    elif banker_value == 6:
        return player_third_card in (6, 7)
    else:
        return False


def banker_should_draw(banker_total: int, player_third_card: LabelLike) -> bool:
    """Third-card rule for a Banker facing a Player who drew `player_third_card`."""
    return banker_draws_third_card(banker_total, True, point(player_third_card))
