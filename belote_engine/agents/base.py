# belote_engine/agents/base.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from ..cards import Card, Suit


@runtime_checkable
class BeloteAgent(Protocol):
    """
    Interface that every automated seat implements.

    `observation` is a dict holding only what the seat may see:
      - "player_id", "round", "phase", "is_dealer"
      - "hand": list[Card], "talon": list[Card]
      - "trump": Suit | None
      - "current_trick": list of (player_id, Card) already played
      - "bids": list of (player_id, Suit | None) made this round
    """

    def choose_bid(self, observation: Dict[str, Any]) -> Optional[Suit]:
        """Return the trump suit to name, or None to pass (dealer may not pass)."""

        raise NotImplementedError

    def choose_declaration(self, observation: Dict[str, Any]) -> List[Card]:
        """Return the cards of the combination to declare, or [] for none."""

        raise NotImplementedError

    def choose_card(self, observation: Dict[str, Any]) -> Card:
        """Return a card from hand + talon that is legal to play now."""

        raise NotImplementedError
