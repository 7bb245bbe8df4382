# belote_engine/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import enum

from .cards import Card, Suit

# (player_id, card) pairs in play order
PlayedCard = Tuple[str, Card]

NUM_SEATS = 4
TRICKS_PER_ROUND = 8


class GamePhase(enum.Enum):
    WAITING = "waiting"
    DEALING = "dealing"
    BIDDING = "bidding"
    CALLING = "calling"
    PLAYING = "playing"
    FINISHED = "finished"


class Combination(enum.Enum):
    """Scoring combinations a seat can declare after trump is named."""

    SEQUENCE_3 = "sequence_3"
    SEQUENCE_4 = "sequence_4"
    SEQUENCE_5 = "sequence_5"
    SEQUENCE_6 = "sequence_6"
    SEQUENCE_7 = "sequence_7"
    BELA = "bela"
    FOUR_ACES = "four_aces"
    FOUR_KINGS = "four_kings"
    FOUR_QUEENS = "four_queens"
    FOUR_TENS = "four_tens"
    FOUR_NINES = "four_nines"
    FOUR_JACKS = "four_jacks"
    BELOT = "belot"  # all 8 cards of one suit, instant win


@dataclass
class PlayerState:
    id: str
    name: str
    team_id: int
    is_ready: bool = False
    is_dealer: bool = False
    is_bot: bool = False
    hand: List[Card] = field(default_factory=list)
    # two extra cards dealt once trump is named
    talon: List[Card] = field(default_factory=list)

    @property
    def playable_cards(self) -> List[Card]:
        return self.hand + self.talon


@dataclass
class Trick:
    plays: List[PlayedCard] = field(default_factory=list)
    winner_id: Optional[str] = None
    winning_card: Optional[Card] = None

    @property
    def is_complete(self) -> bool:
        return len(self.plays) == NUM_SEATS


@dataclass
class TeamState:
    id: int
    name: str
    # one entry per completed round
    scores: List[int] = field(default_factory=list)
    # tricks won in the current round, cleared every round
    tricks: List[Trick] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.scores)


@dataclass(frozen=True)
class Bid:
    player_id: str
    suit: Optional[Suit]  # None means pass


@dataclass(frozen=True)
class Declaration:
    player_id: str
    combination: Optional[Combination]  # None: the seat declared nothing
    cards: Tuple[Card, ...] = ()


@dataclass
class RoundResult:
    round_number: int
    dealer_id: Optional[str]
    trump: Optional[Suit]
    trump_caller_id: Optional[str]
    winning_declaration: Optional[Declaration]
    combination_bonus: int
    card_points: Dict[int, int]
    scores: Dict[int, int]
    failed_team_id: Optional[int] = None


@dataclass
class GameState:
    players: List[PlayerState] = field(default_factory=list)
    team1: TeamState = field(default_factory=lambda: TeamState(id=1, name="Team 1"))
    team2: TeamState = field(default_factory=lambda: TeamState(id=2, name="Team 2"))

    # undealt remainder of this round's deck
    deck: List[Card] = field(default_factory=list)
    round: int = 0

    trump: Optional[Suit] = None
    bids: List[Bid] = field(default_factory=list)
    declarations: List[Declaration] = field(default_factory=list)
    winning_declaration: Optional[Declaration] = None

    phase: GamePhase = GamePhase.WAITING
    current_trick: Optional[Trick] = None
    # completed tricks of this round, in play order
    tricks: List[Trick] = field(default_factory=list)

    current_player_index: int = 0
    current_player_time_left: int = 0

    is_game_over: bool = False
    winner_team_id: Optional[int] = None
    round_results: List[RoundResult] = field(default_factory=list)

    def team(self, team_id: int) -> TeamState:
        if team_id == 1:
            return self.team1
        if team_id == 2:
            return self.team2
        raise ValueError(f"Team ID {team_id} does not exist.")

    @property
    def teams(self) -> List[TeamState]:
        return [self.team1, self.team2]

    @property
    def winner_team(self) -> Optional[TeamState]:
        if self.winner_team_id is None:
            return None
        return self.team(self.winner_team_id)

    def trump_caller_id(self) -> Optional[str]:
        """Seat whose bid named the trump suit, if any."""
        if self.trump is None:
            return None
        for bid in self.bids:
            if bid.suit == self.trump:
                return bid.player_id
        return None
