"""
Property-Based Dialogue Engine — Weak Acceptance

Implements the weak acceptance dialogues of "Property-based Preferences
in Abstract Argumentation" (Booth, Kaci, Rienstra, ADT 2013).

Arguments carry properties, properties carry integer weights, and a
motivational state is a legal set of properties the parties care about.
An attack (X, Y) is enabled under state M when

    weight(props(Y) ∩ M) <= weight(props(X) ∩ M)

The motivational state starts empty and is negotiated during the
dialogue: it only ever grows, and only to another legal state. Besides
answering a challenge with a counter-attack, the proponent may defeat
it by choosing properties under which the challenging attack is
disabled. Every attack the proponent relied on must stay enabled and
every attack it disabled must stay disabled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Hashable, Iterator

from .game import AdversarialSearch, Branch
from .graph import GraphModel, InvalidModel
from .models import Game, Move, MoveSet, WeakAcceptanceDialogue

logger = logging.getLogger("dialectic.argumentation.preferences")


@dataclass(frozen=True)
class PreferenceContext:
    """
    proponent_used   PA: attacks put forward by the proponent on this path
    disabled         DA: attacks that must be disabled in the final state
    enabled          EA: attacks that must be enabled in the final state
    state            M:  current motivational state
    """
    proponent_used: MoveSet = MoveSet()
    disabled: MoveSet = MoveSet()
    enabled: MoveSet = MoveSet()
    state: tuple = ()


class PropertyBasedDialogEngine(AdversarialSearch):
    """Weak acceptance game with a negotiated motivational state."""

    game = Game.WEAK

    def __init__(self, model: GraphModel, initial_state: tuple = ()):
        super().__init__(model)
        initial_state = tuple(dict.fromkeys(initial_state))
        if initial_state and not model.is_legal_state(initial_state):
            raise InvalidModel(
                f"Initial motivational state {list(initial_state)!r} is not a legal state"
            )
        self.initial_state = initial_state

    def weak_acceptance_dialogues(self, claim: Hashable) -> Iterator[WeakAcceptanceDialogue]:
        logger.debug(
            f"Weak acceptance game for claim={claim!r} "
            f"from state={list(self.initial_state)!r}"
        )
        return self.dialogues(claim)

    # ── Search Hooks ────────────────────────────────────────────

    def initial_context(self, claim):
        return PreferenceContext(state=self.initial_state)

    def proponent_turn(self, y, x, ctx: PreferenceContext) -> Branch:
        # Defend with an attacker of Y, enabling it first if needed.
        for z in self.model.attackers_of(y):
            if (z, y) in ctx.proponent_used:
                continue
            enabled = ctx.enabled.add((z, y))
            defend = Move.defend(z, y)
            for prefix, state in self._enable(enabled, ctx.disabled, ctx.state):
                inner = PreferenceContext(
                    proponent_used=ctx.proponent_used.add((z, y)),
                    disabled=ctx.disabled,
                    enabled=enabled,
                    state=state,
                )
                for rest, final in self.opponent_turn(z, MoveSet(), inner):
                    yield prefix + (defend,) + rest, final

        # Defend with properties that disable the challenging attack.
        disabled = ctx.disabled.add((y, x))
        for state, added in self._extensions(ctx.state):
            if self._consistent(state, disabled, ctx.enabled):
                yield (
                    (Move.defend_with_property(added),),
                    replace(ctx, disabled=disabled, state=state),
                )

    def resume(self, before: PreferenceContext, after: PreferenceContext) -> PreferenceContext:
        # DA, EA and M carry over to the next challenge; PA does not.
        return replace(after, proponent_used=before.proponent_used)

    def finish(self, claim, moves, ctx: PreferenceContext) -> WeakAcceptanceDialogue:
        return WeakAcceptanceDialogue(
            claim=claim,
            moves=moves + (Move.win(),),
            game=self.game,
            motivational_state=ctx.state,
            disabled=ctx.disabled.as_tuple(),
            enabled=ctx.enabled.as_tuple(),
        )

    # ── Motivational State ──────────────────────────────────────

    def _enable(self, enabled: MoveSet, disabled: MoveSet, state: tuple):
        """
        Yield ``(moves, state)`` under which every attack in ``enabled``
        holds: the current state unchanged if it already suffices,
        otherwise each legal extension, announced by an enabling move.
        """
        if all(self.model.is_enabled(a, state) for a in enabled):
            yield (), state
            return

        for extended, added in self._extensions(state):
            if not added:
                continue
            if self._consistent(extended, disabled, enabled):
                yield (Move.enable_property(added),), extended

    def _extensions(self, state: tuple):
        """Legal motivational states containing ``state``, in declaration order."""
        current = frozenset(state)
        for legal in self.model.legal_motivational_states():
            if current.issubset(legal):
                added = tuple(p for p in legal if p not in current)
                yield state + added, added

    def _consistent(self, state: tuple, disabled: MoveSet, enabled: MoveSet) -> bool:
        return (
            all(self.model.is_disabled(a, state) for a in disabled)
            and all(self.model.is_enabled(a, state) for a in enabled)
        )
