# belote_engine/agents/heuristic_agent.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import random

from ..cards import Card, Suit
from .base import BeloteAgent
from .policy import decide_bid, decide_card, decide_declaration


@dataclass
class HeuristicAgent(BeloteAgent):
    """
    Default bot behind every automated seat.

    - choose_bid: longest / strongest suit, see `policy.decide_bid`.
    - choose_declaration: strongest combination over hand + talon.
    - choose_card: greedy "win cheaply or throw the cheapest card".
    """

    rng: random.Random

    def choose_bid(self, observation: Dict[str, Any]) -> Optional[Suit]:
        return decide_bid(observation["hand"], observation["is_dealer"], self.rng)

    def choose_declaration(self, observation: Dict[str, Any]) -> List[Card]:
        cards = observation["hand"] + observation["talon"]
        return decide_declaration(cards, observation["trump"])

    def choose_card(self, observation: Dict[str, Any]) -> Card:
        return decide_card(
            observation["hand"] + observation["talon"],
            observation["current_trick"],
            observation["trump"],
            player_id=observation["player_id"],
        )
