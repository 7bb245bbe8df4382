# belote_engine/engine.py
from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from .agents.base import BeloteAgent
from .agents.heuristic_agent import HeuristicAgent
from .cards import Card, Deck, Suit
from .combinations import classify, combination_points, resolve_declarations
from .config import GameOptions
from .errors import NoLegalCardError, RuleViolation, SetupError, TurnOrderError
from .events import Event, EventEmitter, Listener
from .rules import find_legal_card, is_legal_play, winner_of_trick
from .scoring import game_winner, score_round
from .state import (
    NUM_SEATS,
    Bid,
    Combination,
    Declaration,
    GamePhase,
    GameState,
    PlayerState,
    RoundResult,
    Trick,
)
from .timers import AsyncioScheduler, Scheduler, TimerHandle, TurnTimer

logger = logging.getLogger(__name__)

INITIAL_DEAL_PASSES = 2
CARDS_PER_PASS = 3
TALON_SIZE = 2

_IDLE_PHASES = (GamePhase.WAITING, GamePhase.FINISHED)


class BeloteGame:
    """
    Authoritative state machine for one four-seat Belote game.

    Waiting -> Dealing -> Bidding -> Calling -> Playing -> (next round | Finished).

    This class is the only writer of `game_state`. Every public action is
    validated against the current phase and turn and rejected synchronously
    with a `BeloteError`; bot decisions and turn timeouts run later through
    the scheduler and report failures as `Event.ERROR` notifications.
    """

    def __init__(
        self,
        options: Optional[GameOptions] = None,
        rng_seed: Optional[int] = None,
        scheduler: Optional[Scheduler] = None,
        deck_factory: Optional[Callable[[], Sequence[Card]]] = None,
        game_label: Optional[str] = None,
    ) -> None:
        self.options = options if options is not None else GameOptions()
        self.rng = random.Random(rng_seed)
        self.scheduler: Scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        # Returns the 32 cards in dealing order; bypasses shuffling when set.
        self.deck_factory = deck_factory
        self.game_label = game_label

        self.game_state = GameState(current_player_time_left=self.options.move_time)

        self._events = EventEmitter()
        self._agents: Dict[str, BeloteAgent] = {}
        self._timer: Optional[TurnTimer] = None
        self._bot_handles: List[TimerHandle] = []
        self._deck: Optional[Deck] = None
        self._destroyed = False

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def on(self, event: Event, listener: Listener) -> None:
        self._events.on(event, listener)

    def once(self, event: Event, listener: Listener) -> None:
        self._events.once(event, listener)

    def off(self, event: Event, listener: Listener) -> None:
        self._events.off(event, listener)

    def remove_all_listeners(self, event: Optional[Event] = None) -> None:
        self._events.remove_all_listeners(event)

    def _emit(self, event: Event, **payload: Any) -> None:
        self._events.emit(event, **payload)

    def _label_suffix(self) -> str:
        return f" for {self.game_label}" if self.game_label else ""

    @contextmanager
    def _error_boundary(self, action: str) -> Iterator[None]:
        """Report a failed public action as an ERROR notification, then re-raise."""
        try:
            if self._destroyed:
                raise SetupError("Game has been destroyed.")
            yield
        except Exception as exc:
            self._emit(Event.ERROR, error=exc, action=action)
            raise

    def _deferred(self, action: str, fn: Callable[..., Any]) -> Callable[..., None]:
        """Wrap a scheduler callback so failures become ERROR notifications."""

        def run(*args: Any) -> None:
            if self._destroyed:
                return
            try:
                fn(*args)
            except Exception as exc:
                logger.exception("Deferred %s failed%s", action, self._label_suffix())
                self._emit(Event.ERROR, error=exc, action=action)

        return run

    # -------------------------------------------------------------------------
    # Seating
    # -------------------------------------------------------------------------

    def player_join(
        self,
        name: Optional[str] = None,
        *,
        player_id: Optional[str] = None,
        team_id: Optional[int] = None,
        is_ready: bool = False,
    ) -> PlayerState:
        with self._error_boundary("player_join"):
            return self._create_player(
                name, player_id=player_id, team_id=team_id, is_ready=is_ready, is_bot=False
            )

    def add_bot(
        self,
        name: Optional[str] = None,
        *,
        player_id: Optional[str] = None,
        team_id: Optional[int] = None,
        agent: Optional[BeloteAgent] = None,
    ) -> PlayerState:
        with self._error_boundary("add_bot"):
            if agent is None:
                agent = HeuristicAgent(rng=random.Random(self.rng.getrandbits(32)))
            player = self._create_player(
                name, player_id=player_id, team_id=team_id, is_ready=True, is_bot=True
            )
            self._agents[player.id] = agent
            return player

    def _create_player(
        self,
        name: Optional[str],
        *,
        player_id: Optional[str],
        team_id: Optional[int],
        is_ready: bool,
        is_bot: bool,
    ) -> PlayerState:
        players = self.game_state.players
        if self.game_state.phase not in _IDLE_PHASES:
            raise SetupError("Cannot join a game in progress.")
        if len(players) >= NUM_SEATS:
            raise SetupError(f"Cannot add more than {NUM_SEATS} players.")
        if player_id is not None and self.get_player_by_id(player_id) is not None:
            raise SetupError(f"Player with ID {player_id} already exists.")
        if team_id is not None and team_id not in (1, 2):
            raise SetupError(f"Invalid team ID: {team_id}. Must be 1 or 2.")
        if team_id is not None and len(self.get_players_by_team(team_id)) >= 2:
            raise SetupError(f"Team {team_id} is already full.")

        seat_number = len(players) + 1
        if player_id is None:
            prefix = "bot" if is_bot else "player"
            number = seat_number
            while self.get_player_by_id(f"{prefix}-{number}") is not None:
                number += 1
            player_id = f"{prefix}-{number}"

        if team_id is None:
            team_id = 1 if len(players) % 2 == 0 else 2
            if len(self.get_players_by_team(team_id)) >= 2:
                team_id = 2 if team_id == 1 else 1

        player = PlayerState(
            id=player_id,
            name=name or f"{'Bot' if is_bot else 'Player'} {seat_number}",
            team_id=team_id,
            is_ready=True if is_bot else is_ready,
            is_dealer=not players,
            is_bot=is_bot,
        )
        players.append(player)
        logger.debug("%s joined team %d%s", player.id, team_id, self._label_suffix())
        self._emit(Event.PLAYER_JOINED, player=player)
        self._check_all_ready()
        return player

    def player_leave(self, player_id: str) -> None:
        with self._error_boundary("player_leave"):
            player = self._require_player(player_id)
            self.game_state.players.remove(player)
            self._agents.pop(player.id, None)
            self._emit(Event.PLAYER_LEFT, player_id=player.id)

            if len(self.game_state.players) < NUM_SEATS:
                self._cancel_pending()
                if self.game_state.phase not in _IDLE_PHASES:
                    logger.warning(
                        "%s left mid-round%s; game returns to waiting",
                        player.id,
                        self._label_suffix(),
                    )
                    self._return_to_waiting()
                self.game_state.current_player_index = 0
                self._emit(Event.NOT_ENOUGH_PLAYERS)

    def remove_bot(self, bot_id: str) -> None:
        with self._error_boundary("remove_bot"):
            player = self._require_player(bot_id)
            if not player.is_bot:
                raise SetupError(f"Player with ID {bot_id} is not a bot.")
        self.player_leave(bot_id)

    def switch_player_team(self, player_id: str, team_id: int) -> None:
        with self._error_boundary("switch_player_team"):
            player = self._require_player(player_id)
            if self.game_state.phase not in _IDLE_PHASES:
                raise SetupError("Cannot switch teams while a game is in progress.")
            if team_id not in (1, 2):
                raise SetupError(f"Team ID {team_id} does not exist.")
            if player.team_id == team_id:
                raise SetupError(f"Player with ID {player_id} is already in team {team_id}.")
            if len(self.get_players_by_team(team_id)) >= 2:
                raise SetupError(f"Team {team_id} is already full.")

            player.team_id = team_id
            self._emit(Event.PLAYER_SWITCHED_TEAM, player_id=player_id, team_id=team_id)

    def set_player_ready(self, player_id: str, is_ready: bool) -> None:
        with self._error_boundary("set_player_ready"):
            player = self._require_player(player_id)
            if player.is_bot:
                return

            player.is_ready = is_ready
            self._emit(Event.PLAYER_READY_CHANGED, player_id=player_id, is_ready=is_ready)
            self._check_all_ready()

    def _check_all_ready(self) -> None:
        players = self.game_state.players
        if len(players) == NUM_SEATS and all(p.is_ready for p in players):
            self._emit(Event.ALL_PLAYERS_READY)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def get_current_player(self) -> PlayerState:
        return self.game_state.players[self.game_state.current_player_index]

    def get_player_by_id(self, player_id: str) -> Optional[PlayerState]:
        for p in self.game_state.players:
            if p.id == player_id:
                return p
        return None

    def get_players_by_team(self, team_id: int) -> List[PlayerState]:
        return [p for p in self.game_state.players if p.team_id == team_id]

    def team_total(self, team_id: int) -> int:
        return self.game_state.team(team_id).total

    def _require_player(self, player_id: str) -> PlayerState:
        player = self.get_player_by_id(player_id)
        if player is None:
            raise SetupError(f"Player with ID {player_id} does not exist.")
        return player

    def _dealer_index(self) -> int:
        for i, p in enumerate(self.game_state.players):
            if p.is_dealer:
                return i
        return -1

    def _team_of(self) -> Dict[str, int]:
        return {p.id: p.team_id for p in self.game_state.players}

    # -------------------------------------------------------------------------
    # Game and round lifecycle
    # -------------------------------------------------------------------------

    def start_game(self) -> None:
        with self._error_boundary("start_game"):
            state = self.game_state
            if state.phase not in _IDLE_PHASES:
                raise SetupError("Game already in progress.")
            if len(state.players) < NUM_SEATS:
                raise SetupError(f"Need {NUM_SEATS} players to start")
            if any(not p.is_ready for p in state.players):
                raise SetupError("All players must be ready")

            state.round = 0
            state.is_game_over = False
            state.winner_team_id = None
            state.round_results = []
            for team in state.teams:
                team.scores = []
                team.tricks = []

            logger.info(
                "Starting game%s (target %d)", self._label_suffix(), self.options.target_score
            )
            self._emit(Event.GAME_STARTED, state=state)
            dealer_index = self._dealer_index()
            try:
                self._start_next_round()
            except Exception:
                # e.g. AsyncioScheduler used outside a running loop
                self._cancel_pending()
                self._return_to_waiting()
                state.round = 0
                for i, p in enumerate(state.players):
                    p.is_dealer = i == dealer_index
                raise

    def _return_to_waiting(self) -> None:
        state = self.game_state
        state.phase = GamePhase.WAITING
        state.trump = None
        state.bids = []
        state.declarations = []
        state.winning_declaration = None
        state.current_trick = None
        state.tricks = []
        state.deck = []
        state.current_player_index = 0
        for p in state.players:
            p.hand = []
            p.talon = []

    def _start_next_round(self) -> None:
        state = self.game_state
        if state.is_game_over:
            return

        state.round += 1
        state.trump = None
        state.bids = []
        state.declarations = []
        state.winning_declaration = None
        state.current_trick = None
        state.tricks = []
        for team in state.teams:
            team.tricks = []
        for p in state.players:
            p.hand = []
            p.talon = []

        next_dealer_index = (self._dealer_index() + 1) % NUM_SEATS
        for i, p in enumerate(state.players):
            p.is_dealer = i == next_dealer_index
        dealer = state.players[next_dealer_index]

        self._emit(Event.ROUND_STARTED, round_number=state.round, dealer=dealer)
        self._deal_initial_cards()

    def _deal_initial_cards(self) -> None:
        state = self.game_state
        state.phase = GamePhase.DEALING

        if self.deck_factory is not None:
            self._deck = Deck(list(self.deck_factory()))
        else:
            self._deck = Deck()
            self._deck.shuffle(self.rng)
        state.deck = self._deck.cards

        for _ in range(INITIAL_DEAL_PASSES):
            for p in state.players:
                p.hand.extend(self._deck.draw(CARDS_PER_PASS))

        self._emit(
            Event.INITIAL_CARDS_DEALT,
            card_counts={p.id: len(p.hand) for p in state.players},
        )
        self._start_bidding()

    # -------------------------------------------------------------------------
    # Bidding
    # -------------------------------------------------------------------------

    def _start_bidding(self) -> None:
        state = self.game_state
        state.phase = GamePhase.BIDDING
        state.current_player_index = (self._dealer_index() + 1) % NUM_SEATS

        self._emit(Event.BIDDING_STARTED, player=self.get_current_player())
        self._prompt_bid()

    def _prompt_bid(self) -> None:
        player = self.get_current_player()
        if player.is_bot:
            self._schedule_bot("bot_bid", lambda: self._bot_bid(player))
        else:
            self._start_timer("bid_timeout", self._bid_timeout)

    def _bot_bid(self, player: PlayerState) -> None:
        if self.game_state.phase is not GamePhase.BIDDING:
            return
        if self.get_current_player() is not player:
            return
        suit = self._agents[player.id].choose_bid(self._build_observation(player))
        if suit is None and player.is_dealer:
            suit = self.rng.choice(list(Suit))
            logger.warning("Bot dealer %s tried to pass; naming %s", player.id, suit.name)
        self._bid(player.id, suit)

    def _bid_timeout(self) -> None:
        player = self.get_current_player()
        suit = self.rng.choice(list(Suit)) if player.is_dealer else None
        logger.debug("Bid timeout for %s%s", player.id, self._label_suffix())
        self._bid(player.id, suit)

    def bid(self, player_id: str, suit: Optional[Suit]) -> None:
        """Name `suit` as trump, or pass with None."""
        with self._error_boundary("bid"):
            self._bid(player_id, suit)

    def _bid(self, player_id: str, suit: Optional[Suit]) -> None:
        state = self.game_state
        player = self._require_player(player_id)
        if state.phase is not GamePhase.BIDDING:
            raise TurnOrderError("Not in bidding phase.")
        if player is not self.get_current_player():
            raise TurnOrderError(f"It's not player {player_id}'s turn.")
        if suit is None and player.is_dealer:
            raise RuleViolation("Dealer cannot pass during bidding.")
        if suit is not None:
            suit = Suit(suit)

        self._cancel_timer()
        state.bids.append(Bid(player_id=player.id, suit=suit))
        logger.debug("%s bids %s", player.id, suit.name if suit else "pass")
        self._emit(Event.BID_MADE, player_id=player.id, suit=suit)

        if suit is not None:
            state.trump = suit
            logger.info(
                "Round %d trump %s named by %s%s",
                state.round,
                suit.name,
                player.id,
                self._label_suffix(),
            )
            self._emit(Event.TRUMP_CHOSEN, suit=suit, player_id=player.id)
            self._deal_talon()
            return

        self._advance_bidding()

    def _advance_bidding(self) -> None:
        state = self.game_state
        state.current_player_index = (state.current_player_index + 1) % NUM_SEATS
        if len(state.bids) < NUM_SEATS:
            self._emit(Event.NEXT_PLAYER_BID, player=self.get_current_player())
            self._prompt_bid()

    def _deal_talon(self) -> None:
        state = self.game_state
        assert self._deck is not None
        for p in state.players:
            p.talon.extend(self._deck.draw(TALON_SIZE))

        self._emit(
            Event.TALON_DEALT,
            talons={p.id: list(p.talon) for p in state.players},
        )
        self._start_calling_phase()

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def _start_calling_phase(self) -> None:
        state = self.game_state
        state.phase = GamePhase.CALLING
        self._emit(Event.CALLING_PHASE_STARTED)

        for player in state.players:
            if player.is_bot:
                self._schedule_bot_declaration(player)

        if any(not p.is_bot for p in state.players):
            self._start_timer("call_timeout", self._calling_timeout)

    def _schedule_bot_declaration(self, player: PlayerState) -> None:
        self._schedule_bot("bot_call", lambda: self._bot_declare(player))

    def _bot_declare(self, player: PlayerState) -> None:
        state = self.game_state
        if state.phase is not GamePhase.CALLING or self._has_declared(player.id):
            return
        cards = self._agents[player.id].choose_declaration(self._build_observation(player))
        if cards and self._declaration_error(player, cards) is not None:
            logger.warning("Bot %s declared an invalid set %s; declaring nothing", player.id, cards)
            cards = []
        self._declare(player.id, cards)

    def _calling_timeout(self) -> None:
        for player in list(self.game_state.players):
            if self.game_state.phase is not GamePhase.CALLING:
                break
            if not self._has_declared(player.id):
                logger.debug("Call timeout for %s%s", player.id, self._label_suffix())
                self._declare(player.id, [])

    def _has_declared(self, player_id: str) -> bool:
        return any(d.player_id == player_id for d in self.game_state.declarations)

    def _declaration_error(self, player: PlayerState, cards: Sequence[Card]) -> Optional[str]:
        playable = player.playable_cards
        if len(set(cards)) != len(cards) or any(c not in playable for c in cards):
            return "Declared cards are not held by the player."
        if self.game_state.trump is None or classify(cards, self.game_state.trump) is None:
            return "Declared cards do not form a combination."
        return None

    def declare(self, player_id: str, cards: Sequence[Card]) -> None:
        """Declare the combination formed by `cards`, or nothing with an empty list."""
        with self._error_boundary("declare"):
            self._declare(player_id, cards)

    def _declare(self, player_id: str, cards: Sequence[Card]) -> None:
        state = self.game_state
        player = self._require_player(player_id)
        if state.phase is not GamePhase.CALLING:
            raise TurnOrderError("Not in calling phase.")
        if state.trump is None:
            raise RuleViolation("Trump must be chosen before making calls.")
        if self._has_declared(player.id):
            raise RuleViolation("Player has already made a call.")

        cards = list(cards)
        combination: Optional[Combination] = None
        if cards:
            error = self._declaration_error(player, cards)
            if error is not None:
                raise RuleViolation(error)
            combination = classify(cards, state.trump)

        state.declarations.append(
            Declaration(player_id=player.id, combination=combination, cards=tuple(cards))
        )
        logger.debug(
            "%s declares %s", player.id, combination.value if combination else "nothing"
        )

        if combination is Combination.BELOT:
            self._finish_with_belot(player, cards[0].suit)
            return

        self._emit(Event.CALL_MADE, player_id=player.id, cards=cards, combination=combination)

        if len(state.declarations) == len(state.players):
            self._resolve_declarations()

    def _finish_with_belot(self, player: PlayerState, suit: Suit) -> None:
        state = self.game_state
        self._cancel_pending()
        state.is_game_over = True
        state.phase = GamePhase.FINISHED
        state.winner_team_id = player.team_id

        logger.info(
            "%s holds all of %s: team %d wins instantly%s",
            player.id,
            suit.name,
            player.team_id,
            self._label_suffix(),
        )
        self._emit(Event.BELOT_WIN, player_id=player.id, suit=suit)
        self._emit(Event.GAME_ENDED, winner_team=state.team(player.team_id))

    def _resolve_declarations(self) -> None:
        state = self.game_state
        self._cancel_timer()

        team_of = self._team_of()
        caller_team = team_of.get(state.trump_caller_id() or "")
        winning = resolve_declarations(state.declarations, team_of, caller_team)
        state.winning_declaration = winning

        if winning is not None and winning.combination is not None:
            logger.info(
                "Declaration won by %s with %s (%d)%s",
                winning.player_id,
                winning.combination.value,
                combination_points(winning.combination),
                self._label_suffix(),
            )
        self._emit(Event.CALLING_PHASE_ENDED, winning_declaration=winning)
        self._start_playing_phase()

    # -------------------------------------------------------------------------
    # Trick play
    # -------------------------------------------------------------------------

    def _start_playing_phase(self) -> None:
        state = self.game_state
        state.phase = GamePhase.PLAYING
        state.current_player_index = 0
        state.current_trick = Trick()

        self._emit(Event.PLAYING_PHASE_STARTED)
        self._emit(Event.NEXT_PLAYER_MOVE, player=self.get_current_player())
        self._prompt_play()

    def _prompt_play(self) -> None:
        player = self.get_current_player()
        if player.is_bot:
            self._schedule_bot("bot_play", lambda: self._bot_play(player))
        else:
            self._start_timer("play_timeout", self._play_timeout)

    def _current_plays(self) -> List[Any]:
        trick = self.game_state.current_trick
        return list(trick.plays) if trick is not None else []

    def _bot_play(self, player: PlayerState) -> None:
        state = self.game_state
        if state.phase is not GamePhase.PLAYING or self.get_current_player() is not player:
            return
        card = self._agents[player.id].choose_card(self._build_observation(player))
        cards = player.playable_cards
        if card not in cards or not is_legal_play(card, self._current_plays(), state.trump, cards):
            # Auto-correct to the first legal card rather than stall the game.
            fallback = find_legal_card(self._current_plays(), state.trump, cards)
            logger.warning("Bot %s chose illegal card %s; playing %s", player.id, card, fallback)
            if fallback is None:
                raise NoLegalCardError(player_id=player.id, cards=cards)
            card = fallback
        self._play_card(player.id, card)

    def _play_timeout(self) -> None:
        player = self.get_current_player()
        cards = player.playable_cards
        card = find_legal_card(self._current_plays(), self.game_state.trump, cards)
        if card is None:
            raise NoLegalCardError(player_id=player.id, cards=cards)
        logger.debug("Play timeout for %s%s, playing %s", player.id, self._label_suffix(), card)
        self._play_card(player.id, card)

    def play_card(self, player_id: str, card: Card) -> None:
        with self._error_boundary("play_card"):
            self._play_card(player_id, card)

    def _play_card(self, player_id: str, card: Card) -> None:
        state = self.game_state
        player = self._require_player(player_id)
        if state.phase is not GamePhase.PLAYING:
            raise TurnOrderError("Not in playing phase.")
        if player is not self.get_current_player():
            raise TurnOrderError(f"It's not player {player_id}'s turn.")
        if state.trump is None:
            raise RuleViolation("Trump must be chosen before playing cards.")

        cards = player.playable_cards
        if card not in cards:
            raise RuleViolation("Card not found in player hand.")
        if not is_legal_play(card, self._current_plays(), state.trump, cards):
            raise RuleViolation("This card cannot be played according to Belote rules.")

        self._cancel_timer()
        if card in player.hand:
            player.hand.remove(card)
        else:
            player.talon.remove(card)

        assert state.current_trick is not None
        state.current_trick.plays.append((player.id, card))
        logger.debug("%s plays %s", player.id, card)
        self._emit(Event.CARD_PLAYED, player_id=player.id, card=card)

        if state.current_trick.is_complete:
            self._complete_trick()
        else:
            state.current_player_index = (state.current_player_index + 1) % NUM_SEATS
            self._emit(Event.NEXT_PLAYER_MOVE, player=self.get_current_player())
            self._prompt_play()

    def _complete_trick(self) -> None:
        state = self.game_state
        trick = state.current_trick
        assert trick is not None

        winner_id, winning_card = winner_of_trick(trick, state.trump)
        trick.winner_id = winner_id
        trick.winning_card = winning_card

        winner = self._require_player(winner_id)
        state.team(winner.team_id).tricks.append(trick)
        state.tricks.append(trick)
        self._emit(Event.TRICK_COMPLETED, trick=trick, winner_id=winner_id)

        if all(not p.hand and not p.talon for p in state.players):
            self._complete_round()
            return

        state.current_player_index = state.players.index(winner)
        state.current_trick = Trick()
        self._emit(Event.NEXT_TRICK_STARTED, player=winner)
        self._prompt_play()

    def _complete_round(self) -> None:
        state = self.game_state
        assert state.trump is not None

        team_of = self._team_of()
        caller_id = state.trump_caller_id()
        caller_team = team_of.get(caller_id) if caller_id is not None else None
        winning = state.winning_declaration
        bonus = combination_points(winning.combination) if winning is not None else 0

        scores = score_round(state.tricks, team_of, state.trump, bonus, caller_team)
        state.team1.scores.append(scores.team1)
        state.team2.scores.append(scores.team2)

        dealer_index = self._dealer_index()
        state.round_results.append(
            RoundResult(
                round_number=state.round,
                dealer_id=state.players[dealer_index].id if dealer_index >= 0 else None,
                trump=state.trump,
                trump_caller_id=caller_id,
                winning_declaration=winning,
                combination_bonus=bonus,
                card_points=dict(scores.card_points),
                scores={1: scores.team1, 2: scores.team2},
                failed_team_id=scores.failed_team,
            )
        )

        logger.info(
            "Finished round %d%s: %d - %d (totals %d - %d)",
            state.round,
            self._label_suffix(),
            scores.team1,
            scores.team2,
            state.team1.total,
            state.team2.total,
        )
        self._emit(
            Event.ROUND_COMPLETED,
            round_number=state.round,
            scores=scores,
            winning_team=state.team(scores.winning_team),
            failed_team=(
                state.team(scores.failed_team) if scores.failed_team is not None else None
            ),
        )

        winner_team_id = game_winner(
            {1: state.team1.total, 2: state.team2.total}, self.options.target_score
        )
        if winner_team_id is None:
            self._start_next_round()
            return

        self._cancel_pending()
        state.is_game_over = True
        state.phase = GamePhase.FINISHED
        state.winner_team_id = winner_team_id
        logger.info("Finished game%s: team %d wins", self._label_suffix(), winner_team_id)
        self._emit(Event.GAME_ENDED, winner_team=state.team(winner_team_id))

    # -------------------------------------------------------------------------
    # Observations
    # -------------------------------------------------------------------------

    def _build_observation(self, player: PlayerState) -> Dict[str, Any]:
        state = self.game_state
        return {
            "player_id": player.id,
            "round": state.round,
            "phase": state.phase.value,
            "is_dealer": player.is_dealer,
            "hand": list(player.hand),
            "talon": list(player.talon),
            "trump": state.trump,
            "current_trick": self._current_plays(),
            "bids": [(b.player_id, b.suit) for b in state.bids],
        }

    # -------------------------------------------------------------------------
    # Timers and bot scheduling
    # -------------------------------------------------------------------------

    def _start_timer(self, action: str, on_timeout: Callable[[], None]) -> None:
        self._cancel_timer()
        self.game_state.current_player_time_left = self.options.move_time
        self._timer = TurnTimer(
            self.scheduler,
            self.options.move_time,
            on_tick=self._deferred("timer_tick", self._on_timer_tick),
            on_timeout=self._deferred(action, on_timeout),
        ).start()

    def _on_timer_tick(self, time_left: int) -> None:
        self.game_state.current_player_time_left = time_left
        self._emit(Event.TIMER_UPDATE, time_left=time_left)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule_bot(self, action: str, fn: Callable[[], None]) -> None:
        guarded = self._deferred(action, fn)
        holder: List[TimerHandle] = []

        def run() -> None:
            if holder and holder[0] in self._bot_handles:
                self._bot_handles.remove(holder[0])
            guarded()

        handle = self.scheduler.call_later(self.options.bot_delay_seconds, run)
        holder.append(handle)
        self._bot_handles.append(handle)

    def _cancel_pending(self) -> None:
        self._cancel_timer()
        for handle in self._bot_handles:
            handle.cancel()
        self._bot_handles = []

    def destroy(self) -> None:
        """Cancel every pending timer and bot action and drop all listeners."""
        self._destroyed = True
        self._cancel_pending()
        self._events.remove_all_listeners()
