# belote_engine/agents/random_agent.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import random

from ..cards import Card, Suit
from ..combinations import find_all_combinations
from ..errors import NoLegalCardError
from ..rules import legal_cards
from .base import BeloteAgent


@dataclass
class RandomBeloteAgent(BeloteAgent):
    """
    Baseline bot that picks uniformly among legal options.

    - choose_bid: pass half the time (never as dealer), otherwise a random suit.
    - choose_declaration: a random held combination, or nothing.
    - choose_card: a random legal card.
    """

    rng: random.Random

    def choose_bid(self, observation: Dict[str, Any]) -> Optional[Suit]:
        if not observation["is_dealer"] and self.rng.random() < 0.5:
            return None
        return self.rng.choice(list(Suit))

    def choose_declaration(self, observation: Dict[str, Any]) -> List[Card]:
        cards = observation["hand"] + observation["talon"]
        options = find_all_combinations(cards, observation["trump"])
        if not options or self.rng.random() < 0.25:
            return []
        return list(self.rng.choice(options)[1])

    def choose_card(self, observation: Dict[str, Any]) -> Card:
        cards = observation["hand"] + observation["talon"]
        legal = legal_cards(observation["current_trick"], observation["trump"], cards)
        if not legal:
            raise NoLegalCardError(player_id=observation["player_id"], cards=cards)
        return self.rng.choice(legal)
