"""
Abductive Dialogue Engine — Skeptical Explanation Dialogues

Implements the explanation dialogues of "Abduction in Argumentation:
Dialogical Proof Procedures and Instantiation" (Booth, Gabbay, Kaci,
Rienstra, van der Torre, NMR 2014).

The search runs over every abducible framework state at once. The
arguments and attacks the opponent may use are those of any state;
the proponent's replies are hypotheses about which attacks exist:

- hypothetical assertion "Z attacks Y" keeps only the states that
  contain that attack, and the opponent must then answer Z
- hypothetical denial "Y attacks X does not hold" keeps only the
  states that lack the attack, and ends the sub-dispute

A branch dies as soon as no state is left. The states still active
when the proponent wins explain skeptical acceptance of the claim.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Hashable, Iterator

from .game import AdversarialSearch, Branch
from .models import Dialogue, Explanation, Game, Move, MoveSet

logger = logging.getLogger("dialectic.argumentation.abductive")


@dataclass(frozen=True)
class AbductiveContext:
    active: MoveSet
    proponent_used: MoveSet = MoveSet()


class AbductiveDialogEngine(AdversarialSearch):
    """Skeptical explanation game over a family of framework states."""

    game = Game.ABDUCTIVE

    def abductive_explanations(self, claim: Hashable) -> Iterator[Explanation]:
        logger.debug(
            f"Abductive game for claim={claim!r} over "
            f"{len(self.model.states())} framework state(s)"
        )
        if not self.model.states():
            return iter(())
        return self.dialogues(claim)

    # ── Search Hooks ────────────────────────────────────────────

    def initial_context(self, claim):
        return AbductiveContext(active=MoveSet(self.model.states()))

    def challenge_move(self, y, x, ctx: AbductiveContext) -> Move:
        return Move.challenge(y, x, states=ctx.active.as_tuple())

    def concede_move(self, ctx: AbductiveContext) -> Move:
        return Move.concede(states=ctx.active.as_tuple())

    def proponent_turn(self, y, x, ctx: AbductiveContext) -> Branch:
        # Hypothetical assertion: some attacker Z of Y is assumed to attack it.
        for z in self.model.attackers_of(y):
            if (z, y) in ctx.proponent_used:
                continue
            active = self._with_attack(ctx.active, (z, y))
            if not active:
                continue
            inner = AbductiveContext(
                active=active,
                proponent_used=ctx.proponent_used.add((z, y)),
            )
            move = Move.hypothetical_assert(z, y, active.as_tuple())
            for rest, final in self.opponent_turn(z, MoveSet(), inner):
                yield (move,) + rest, final

        # Hypothetical denial: the challenge itself is assumed not to hold.
        if self.model.is_attack(y, x):
            active = self._without_attack(ctx.active, (y, x))
            if active:
                yield (
                    (Move.hypothetical_deny(y, x, active.as_tuple()),),
                    replace(ctx, active=active),
                )

    def resume(self, before: AbductiveContext, after: AbductiveContext) -> AbductiveContext:
        # Active states carry over to the next challenge; proponent attacks do not.
        return replace(after, proponent_used=before.proponent_used)

    def finish(self, claim, moves, ctx: AbductiveContext) -> Explanation:
        states = ctx.active.as_tuple()
        dialogue = Dialogue(
            claim=claim,
            moves=moves + (Move.win(states=states),),
            game=self.game,
        )
        return Explanation(states=states, dialogue=dialogue)

    # ── Internal ────────────────────────────────────────────────

    def _with_attack(self, active: MoveSet, attack: tuple) -> MoveSet:
        return active.filter(lambda s: attack in self.model.effective_attacks(s))

    def _without_attack(self, active: MoveSet, attack: tuple) -> MoveSet:
        return active.filter(lambda s: attack not in self.model.effective_attacks(s))
