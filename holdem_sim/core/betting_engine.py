"""Betting state machine for a No-Limit Texas Hold'em hand.

The engine is the only writer of GameState. A hand moves through

    WAITING -> BETTING(preflop) -> BETTING(flop) -> BETTING(turn)
            -> BETTING(river) -> SHOWDOWN -> WAITING

and drops straight to SHOWDOWN as soon as a single player is left.
Drivers call ``start_hand()``, then ``apply_action()`` once per turn,
and ``resolve_hand()`` when the phase reaches SHOWDOWN. Every entry
point returns a detached snapshot of the state, so callers (UI, AI)
can never mutate the live hand.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from holdem_sim.core.betting_rules import (
    blind_positions,
    calculate_min_raise,
    call_amount,
    can_check,
    first_postflop_player,
    first_preflop_player,
    is_betting_round_complete,
    next_player_index,
)
from holdem_sim.core.errors import IllegalActionError
from holdem_sim.core.game_state import (
    ActionRecord,
    BetAction,
    GameState,
    PlayerState,
)
from holdem_sim.core.hand_evaluator import HandEvaluation, HandEvaluator
from holdem_sim.core.table_config import TableConfig
from holdem_sim.utils.card import Card, Deck
from holdem_sim.utils.constants import (
    ActionPolicy,
    ActionType,
    Phase,
    Seat,
    Street,
)

logger = logging.getLogger("holdem_sim.engine")

# Community cards dealt when entering each street
_NEXT_STREET: dict[Street, tuple[Street, int]] = {
    Street.PREFLOP: (Street.FLOP, 3),
    Street.FLOP: (Street.TURN, 1),
    Street.TURN: (Street.RIVER, 1),
}


@dataclass(frozen=True)
class HandOutcome:
    """How a finished hand was settled."""

    winners: tuple[Seat, ...]
    pot: float
    winning_hand: HandEvaluation | None  # None when everyone else folded
    shown_hands: dict[Seat, HandEvaluation] = field(default_factory=dict)
    payouts: dict[Seat, float] = field(default_factory=dict)
    community_cards: tuple[Card, ...] = ()

    @property
    def winner(self) -> Seat:
        return self.winners[0]

    @property
    def is_split(self) -> bool:
        return len(self.winners) > 1


class BettingEngine:
    """Owns one table's hand state and the only legal way to change it.

    Usage:
        engine = BettingEngine(players, small_blind=0.5, big_blind=1)
        state = engine.start_hand()
        while state.phase == Phase.BETTING:
            state = engine.apply_action(choose(state))
        outcome = engine.resolve_hand()
    """

    def __init__(
        self,
        players: list[PlayerState],
        small_blind: float,
        big_blind: float,
        dealer_index: int = 0,
        *,
        policy: ActionPolicy = ActionPolicy.STRICT,
        require_full_orbit: bool = False,
        deck_factory: Callable[[], Deck] | None = None,
    ) -> None:
        """Create an engine for a fixed set of seats.

        Args:
            players: Seats in table order. Stacks carry over between hands.
            small_blind: Small blind amount (fractions are kept exactly).
            big_blind: Big blind amount.
            dealer_index: Button seat for the first hand; later hands
                move the button one seat to the left.
            policy: Whether illegal actions are rejected or applied as-is.
            require_full_orbit: If True a street only closes once every
                player who can act has acted since the last bet or raise.
            deck_factory: Builds the fresh deck used for each hand.
        """
        if len(players) < 2:
            raise ValueError(f"Need at least 2 players, got {len(players)}")
        seats = [p.seat for p in players]
        if len(set(seats)) != len(seats):
            raise ValueError("Each player needs a distinct seat")
        if small_blind <= 0 or big_blind <= 0:
            raise ValueError("Blinds must be positive")

        self._state = GameState(
            players=list(players),
            small_blind=small_blind,
            big_blind=big_blind,
            dealer_index=dealer_index % len(players),
        )
        self._next_dealer = dealer_index % len(players)
        self._policy = policy
        self._require_full_orbit = require_full_orbit
        self._deck_factory = deck_factory or Deck
        self._deck: Deck | None = None
        self._acted: set[int] = set()
        self._contributions: dict[int, float] = {}

    @classmethod
    def from_config(
        cls,
        players: list[PlayerState],
        config: TableConfig,
        dealer_index: int = 0,
        deck_factory: Callable[[], Deck] | None = None,
    ) -> BettingEngine:
        """Create an engine using blinds and rules from a TableConfig."""
        return cls(
            players,
            small_blind=config.small_blind,
            big_blind=config.big_blind,
            dealer_index=dealer_index,
            policy=config.action_policy,
            require_full_orbit=config.require_full_orbit,
            deck_factory=deck_factory,
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        """Detached copy of the current state."""
        return self._snapshot()

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def policy(self) -> ActionPolicy:
        return self._policy

    @property
    def is_hand_over(self) -> bool:
        """True once at most one player still holds cards."""
        return self._state.is_hand_over

    @property
    def min_raise_amount(self) -> float:
        """Smallest legal raise-to for the acting player."""
        return self._state.min_raise

    def legal_actions(self) -> list[ActionType]:
        """Action types the acting player may submit under STRICT policy."""
        s = self._state
        if s.phase != Phase.BETTING:
            return []
        player = s.acting_player
        if not player.can_act:
            return []

        actions = [ActionType.FOLD]
        if can_check(player, s.current_bet):
            actions.append(ActionType.CHECK)
        else:
            actions.append(ActionType.CALL)
        max_total = player.stack + player.current_bet
        if max_total > s.current_bet and max_total >= s.min_raise:
            actions.append(ActionType.RAISE)
        if player.stack > 0:
            actions.append(ActionType.ALL_IN)
        return actions

    def _snapshot(self) -> GameState:
        return copy.deepcopy(self._state)

    # ------------------------------------------------------------------
    # Hand lifecycle
    # ------------------------------------------------------------------

    def start_hand(self) -> GameState:
        """Move the button, reset the seats, deal hole cards and post blinds.

        Returns:
            Snapshot with the first pre-flop player to act.

        Raises:
            ValueError: If fewer than two players have chips.
        """
        s = self._state
        if s.phase != Phase.WAITING:
            self._abandon_hand()

        funded = [p for p in s.players if p.stack > 0]
        if len(funded) < 2:
            raise ValueError("Need at least 2 players with chips to start a hand")

        n = len(s.players)
        dealer = self._next_dealer
        self._next_dealer = (dealer + 1) % n
        blinds = blind_positions(n, dealer)

        self._deck = self._deck_factory()
        self._acted = set()
        self._contributions = {}

        for player in s.players:
            player.reset_for_hand()
            if player.stack <= 0:
                # Busted seats sit the hand out
                player.is_folded = True
                logger.debug("%s has no chips and is dealt out", player.name)
        for player in s.players:
            if not player.is_folded:
                player.hole_cards = self._deck.deal(2)

        s.hand_number += 1
        s.street = Street.PREFLOP
        s.phase = Phase.BETTING
        s.pot = 0.0
        s.community_cards = []
        s.action_history = []
        s.posted_blinds = {}
        s.dealer_index = blinds.dealer
        s.small_blind_index = blinds.small_blind
        s.big_blind_index = blinds.big_blind

        self._post_blind(blinds.small_blind, s.small_blind)
        self._post_blind(blinds.big_blind, s.big_blind)
        s.current_bet = s.big_blind
        s.min_raise = s.big_blind * 2

        first = first_preflop_player(n, blinds.big_blind)
        s.acting_index = (
            first if s.players[first].can_act
            else next_player_index(s.players, first)
        )

        logger.info(
            "Hand #%d: dealer=%s SB=%s BB=%s blinds %g/%g",
            s.hand_number,
            s.players[blinds.dealer].name,
            s.players[blinds.small_blind].name,
            s.players[blinds.big_blind].name,
            s.small_blind,
            s.big_blind,
        )

        if self._betting_closed():
            self._run_out()
        return self._snapshot()

    def apply_action(self, action: BetAction) -> GameState:
        """Apply the acting player's action and move the hand forward.

        This is the single mutation path for betting. After the chips
        move, the hand either ends (one player left), closes the street
        (everyone who can act has matched the bet) or passes the turn.

        Raises:
            IllegalActionError: Outside the betting phase, or under the
                STRICT policy when the action breaks the betting rules.
                The state is left unchanged.
        """
        s = self._state
        if s.phase != Phase.BETTING:
            raise IllegalActionError(f"Cannot act during {s.phase.value.lower()}")

        idx = s.acting_index
        player = s.players[idx]
        if self._policy == ActionPolicy.STRICT:
            self._validate(player, action)

        previous_bet = s.current_bet
        recorded = self._apply(player, action)

        if s.current_bet > previous_bet:
            s.min_raise = calculate_min_raise(
                s.current_bet, s.current_bet - previous_bet, s.big_blind,
            )
            self._acted = {idx}
        else:
            self._acted.add(idx)

        s.action_history.append(ActionRecord(
            seat=player.seat,
            action=action.action,
            amount=recorded,
            street=s.street,
            timestamp=time.time(),
        ))
        logger.debug(
            "%s %s %s (stack=%g, bet=%g, to_call=%g)",
            s.street.value,
            player.name,
            action,
            player.stack,
            player.current_bet,
            s.current_bet,
        )

        if s.is_hand_over:
            # Uncalled bets stay in front of their owners until resolve_hand
            s.phase = Phase.SHOWDOWN
            logger.info(
                "Hand #%d over: everyone folded to %s",
                s.hand_number,
                s.active_players[0].name if s.active_players else "nobody",
            )
        elif self._street_complete():
            self.advance_street()
            if self._betting_closed():
                self._run_out()
        else:
            s.acting_index = next_player_index(s.players, idx)

        return self._snapshot()

    def advance_street(self) -> GameState:
        """Collect the street's bets into the pot and deal the next street.

        From the river this moves the hand to SHOWDOWN.

        Raises:
            IllegalActionError: Outside the betting phase.
        """
        s = self._state
        if s.phase != Phase.BETTING:
            raise IllegalActionError(f"Cannot advance during {s.phase.value.lower()}")

        collected = s.street_bets
        s.pot += collected
        for player in s.players:
            player.current_bet = 0.0
        s.current_bet = 0.0
        self._acted = set()

        if s.street == Street.RIVER:
            s.phase = Phase.SHOWDOWN
            logger.info("Hand #%d showdown: pot=%g", s.hand_number, s.pot)
            return self._snapshot()

        next_street, count = _NEXT_STREET[s.street]
        s.street = next_street
        s.community_cards.extend(self._require_deck().deal(count))
        s.min_raise = s.big_blind

        n = len(s.players)
        first = first_postflop_player(n, s.dealer_index)
        s.acting_index = (
            first if s.players[first].can_act
            else next_player_index(s.players, first)
        )

        logger.info(
            "Hand #%d %s: board=[%s] pot=%g (+%g)",
            s.hand_number,
            s.street.value,
            " ".join(str(c) for c in s.community_cards),
            s.pot,
            collected,
        )
        return self._snapshot()

    def resolve_hand(self) -> HandOutcome:
        """Award the pot and return the table to WAITING.

        Every outstanding bet, including an uncalled one, joins the pot.
        The last player standing takes it without a showdown; otherwise
        the best hand wins and equal best hands split it evenly.

        Raises:
            IllegalActionError: If the hand has not reached showdown.
        """
        s = self._state
        if s.phase != Phase.SHOWDOWN:
            raise IllegalActionError(
                f"Cannot resolve a hand during {s.phase.value.lower()}"
            )

        pot = s.total_pot
        for player in s.players:
            player.current_bet = 0.0
        s.pot = pot

        contenders = s.active_players
        shown: dict[Seat, HandEvaluation] = {}
        winning_hand: HandEvaluation | None = None

        if len(contenders) == 1:
            winners = [contenders[0]]
        else:
            for player in contenders:
                shown[player.seat] = HandEvaluator.evaluate(
                    player.hole_cards + s.community_cards,
                )
            winning_hand = max(shown.values())
            winners = [p for p in contenders if shown[p.seat] == winning_hand]

        share = pot / len(winners)
        payouts: dict[Seat, float] = {}
        for player in winners:
            player.stack += share
            payouts[player.seat] = share

        outcome = HandOutcome(
            winners=tuple(p.seat for p in winners),
            pot=pot,
            winning_hand=winning_hand,
            shown_hands=shown,
            payouts=payouts,
            community_cards=tuple(s.community_cards),
        )

        s.pot = 0.0
        s.phase = Phase.WAITING
        self._contributions = {}
        logger.info(
            "Hand #%d: %s win%s %g%s",
            s.hand_number,
            ", ".join(p.name for p in winners),
            "" if len(winners) > 1 else "s",
            pot,
            f" with {winning_hand.description}" if winning_hand else "",
        )
        return outcome

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_deck(self) -> Deck:
        if self._deck is None:
            raise IllegalActionError("No hand in progress")
        return self._deck

    def _move_chips(self, index: int, player: PlayerState, amount: float) -> None:
        player.stack -= amount
        player.current_bet += amount
        self._contributions[index] = self._contributions.get(index, 0.0) + amount

    def _post_blind(self, index: int, amount: float) -> None:
        player = self._state.players[index]
        posted = min(amount, player.stack)
        if posted <= 0:
            return
        self._move_chips(index, player, posted)
        self._state.posted_blinds[player.seat] = posted
        if player.stack == 0:
            player.is_all_in = True

    def _validate(self, player: PlayerState, action: BetAction) -> None:
        s = self._state
        if not player.can_act:
            raise IllegalActionError(f"{player.name} cannot act")

        match action.action:
            case ActionType.FOLD:
                return
            case ActionType.CHECK:
                if not can_check(player, s.current_bet):
                    raise IllegalActionError(
                        f"{player.name} cannot check facing a bet of {s.current_bet:g}"
                    )
            case ActionType.CALL:
                if can_check(player, s.current_bet):
                    raise IllegalActionError(
                        f"{player.name} has nothing to call; check instead"
                    )
            case ActionType.RAISE:
                max_total = player.stack + player.current_bet
                target = min(action.amount, max_total)
                if target <= s.current_bet:
                    raise IllegalActionError(
                        f"Raise to {action.amount:g} does not exceed the "
                        f"current bet of {s.current_bet:g}"
                    )
                if target < s.min_raise and target < max_total:
                    raise IllegalActionError(
                        f"Minimum raise is {s.min_raise:g}, got {action.amount:g}"
                    )
            case ActionType.ALL_IN:
                if player.stack <= 0:
                    raise IllegalActionError(f"{player.name} has no chips left")

    def _apply(self, player: PlayerState, action: BetAction) -> float:
        """Move chips for ``action``; return the amount to record."""
        s = self._state
        idx = s.acting_index

        match action.action:
            case ActionType.FOLD:
                player.is_folded = True
                return 0.0

            case ActionType.CHECK:
                return 0.0

            case ActionType.CALL:
                amount = call_amount(player, s.current_bet)
                self._move_chips(idx, player, amount)
                if player.stack == 0:
                    player.is_all_in = True
                return amount

            case ActionType.RAISE:
                max_total = player.stack + player.current_bet
                if action.amount >= max_total:
                    delta = player.stack
                else:
                    delta = max(0.0, action.amount - player.current_bet)
                self._move_chips(idx, player, delta)
                s.current_bet = max(s.current_bet, player.current_bet)
                if player.stack == 0:
                    player.is_all_in = True
                return player.current_bet

            case ActionType.ALL_IN:
                self._move_chips(idx, player, player.stack)
                player.is_all_in = True
                if player.current_bet > s.current_bet:
                    s.current_bet = player.current_bet
                return player.current_bet

        raise IllegalActionError(f"Unknown action: {action.action}")

    def _street_complete(self) -> bool:
        s = self._state
        if not is_betting_round_complete(s.players, s.current_bet):
            return False
        if self._require_full_orbit:
            return all(
                i in self._acted
                for i, p in enumerate(s.players)
                if p.can_act
            )
        return True

    def _betting_closed(self) -> bool:
        """No more betting is possible: at most one player can act and
        nobody owes chips."""
        s = self._state
        if s.phase != Phase.BETTING:
            return False
        can_act = [p for p in s.players if p.can_act]
        return len(can_act) <= 1 and is_betting_round_complete(s.players, s.current_bet)

    def _run_out(self) -> None:
        """Deal the remaining streets when nobody can bet any more."""
        s = self._state
        logger.debug("Hand #%d: no further betting, running out the board", s.hand_number)
        while s.phase == Phase.BETTING:
            self.advance_street()

    def _abandon_hand(self) -> None:
        """Refund every chip committed to an unfinished hand."""
        s = self._state
        logger.warning(
            "Hand #%d abandoned during %s; refunding committed chips",
            s.hand_number,
            s.phase.value.lower(),
        )
        for index, amount in self._contributions.items():
            s.players[index].stack += amount
        for player in s.players:
            player.current_bet = 0.0
        s.pot = 0.0
        s.phase = Phase.WAITING
        self._contributions = {}
