"""
Adversarial Search — the skeleton shared by every dialogue game.

The opponent must exhaust all attackers of the argument under
discussion, one challenge at a time, in every possible order. After
each challenge the proponent replies; how it replies, and which parts
of the branch-local context survive into the next challenge, is what
distinguishes the games.

Branch-local context is an immutable object passed by value. Each
generator yields ``(moves, context)`` pairs, one per way of completing
its part of the dialogue, so pulling the next dialogue resumes at the
most recent unexplored choice point.
"""

from __future__ import annotations

import logging
from typing import Any, Hashable, Iterator

from .graph import GraphModel
from .models import Dialogue, Game, Move, MoveSet

logger = logging.getLogger("dialectic.argumentation")

Branch = Iterator[tuple[tuple[Move, ...], Any]]


class AdversarialSearch:
    """
    Depth-first proof search for a winning dialogue.

    Subclasses provide:
        initial_context(claim)        context at the root
        proponent_turn(y, x, ctx)     replies to the challenge "y attacks x"
        resume(before, after)         context for the opponent's next
                                      challenge once a reply completed
        finish(claim, moves, ctx)     the object yielded per dialogue
    """

    game: Game = Game.SKEPTICAL

    # True when resume() always returns the context from before the reply.
    # Whether a challenge can be answered then does not depend on the order
    # of the challenges, so one unanswerable attacker fails every order.
    order_independent: bool = False

    def __init__(self, model: GraphModel):
        self.model = model
        self._answerable: dict = {}

    # ── Public API ──────────────────────────────────────────────

    def dialogues(self, claim: Hashable) -> Iterator:
        """Lazily yield every dialogue won by the proponent for ``claim``."""
        if not self.model.is_argument(claim):
            logger.debug(f"{self.game.value}: {claim!r} is not an argument, no dialogue")
            return

        found = 0
        root = self.initial_context(claim)
        for moves, ctx in self.opponent_turn(claim, MoveSet(), root):
            found += 1
            yield self.finish(claim, moves, ctx)

        logger.debug(f"{self.game.value}: search for {claim!r} exhausted after {found} dialogue(s)")

    # ── Opponent ────────────────────────────────────────────────

    def opponent_turn(self, x: Hashable, used: MoveSet, ctx: Any) -> Branch:
        """
        Challenge ``x`` with every attacker not yet in ``used``, then
        concede once none is left. Each choice of the next attacker is a
        separate branch, so all challenge orders are explored.
        """
        remaining = [y for y in self.model.attackers_of(x) if (y, x) not in used]
        if not remaining:
            yield (self.concede_move(ctx),), ctx
            return

        if self.order_independent:
            for y in remaining:
                if not self.can_answer(y, x, ctx):
                    return

        for y in remaining:
            challenge = self.challenge_move(y, x, ctx)
            used_next = used.add((y, x))
            for reply, replied in self.proponent_turn(y, x, ctx):
                for rest, final in self.opponent_turn(x, used_next, self.resume(ctx, replied)):
                    yield (challenge,) + reply + rest, final

    def can_answer(self, y: Hashable, x: Hashable, ctx: Any) -> bool:
        """Whether the proponent has at least one complete reply to "y attacks x"."""
        key = (y, x, ctx)
        if key not in self._answerable:
            self._answerable[key] = next(self.proponent_turn(y, x, ctx), None) is not None
        return self._answerable[key]

    def challenge_move(self, y: Hashable, x: Hashable, ctx: Any) -> Move:
        return Move.challenge(y, x)

    def concede_move(self, ctx: Any) -> Move:
        return Move.concede()

    # ── Hooks ───────────────────────────────────────────────────

    def initial_context(self, claim: Hashable) -> Any:
        raise NotImplementedError

    def proponent_turn(self, y: Hashable, x: Hashable, ctx: Any) -> Branch:
        raise NotImplementedError

    def resume(self, before: Any, after: Any) -> Any:
        return before

    def finish(self, claim: Hashable, moves: tuple, ctx: Any):
        return Dialogue(claim=claim, moves=moves + (Move.win(),), game=self.game)
