"""
Dialogue Engine — Skeptical and Credulous Games

Implements the dialogue games (proof procedures) for:
- Skeptical acceptance: membership of the grounded extension, i.e. of
  every complete extension (Caminada & Podlaszewski, COMMA 2012)
- Credulous acceptance: membership of at least one complete, or
  equivalently preferred, extension (Caminada, Dvorak & Vesic, 2014)

A claim is accepted iff the proponent has a winning dialogue. Both
entry points return lazy iterators; an empty iterator means the claim
is not accepted under that semantics.

Skeptical game:
    The proponent answers a challenge Y with an attacker Z of Y and must
    then withstand every attacker of Z. The same attack may not be
    used twice by the proponent on one dispute path, which rules out
    circular defences.

Credulous game:
    The proponent keeps track of what it has claimed accepted (ACC) and
    rejected (REJ) over the whole dialogue; these may never overlap. A
    challenge by an argument already attacked by an accepted one is
    answered by pointing that out, with no further discussion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Hashable, Iterator

from .game import AdversarialSearch, Branch
from .graph import GraphModel
from .models import Dialogue, Game, Move, MoveSet

logger = logging.getLogger("dialectic.argumentation")


@dataclass(frozen=True)
class SkepticalContext:
    proponent_used: MoveSet = MoveSet()


@dataclass(frozen=True)
class CredulousContext:
    accepted: MoveSet = MoveSet()
    rejected: MoveSet = MoveSet()


class SkepticalGame(AdversarialSearch):
    """Grounded game."""

    game = Game.SKEPTICAL
    order_independent = True

    def initial_context(self, claim):
        return SkepticalContext()

    def proponent_turn(self, y, x, ctx: SkepticalContext) -> Branch:
        for z in self.model.attackers_of(y):
            if (z, y) in ctx.proponent_used:
                continue
            inner = replace(ctx, proponent_used=ctx.proponent_used.add((z, y)))
            defend = Move.defend(z, y)
            for rest, final in self.opponent_turn(z, MoveSet(), inner):
                yield (defend,) + rest, final


class CredulousGame(AdversarialSearch):
    """Preferred game."""

    game = Game.CREDULOUS

    def initial_context(self, claim):
        return CredulousContext(accepted=MoveSet([claim]))

    def proponent_turn(self, y, x, ctx: CredulousContext) -> Branch:
        attackers = self.model.attackers_of(y)
        # Whichever way Y is answered, Y is now rejected.
        rejected = ctx.rejected.add(y)

        if ctx.accepted.isdisjoint(rejected):
            answered = replace(ctx, rejected=rejected)
            for z in attackers:
                if z in ctx.accepted:
                    yield (Move.already_accepted(z, y),), answered

        for z in attackers:
            # An accepted attacker is already answered by the move above.
            if z in ctx.accepted:
                continue
            accepted = ctx.accepted.add(z)
            if not accepted.isdisjoint(rejected):
                continue
            inner = CredulousContext(accepted=accepted, rejected=rejected)
            defend = Move.defend(z, y)
            for rest, final in self.opponent_turn(z, MoveSet(), inner):
                yield (defend,) + rest, final

    def resume(self, before: CredulousContext, after: CredulousContext) -> CredulousContext:
        # Commitments hold for the rest of the dialogue, not just this dispute.
        return after


class DialogEngine:
    """
    Entry points for skeptical and credulous acceptance.

    In both games the opponent exhausts every attacker of each argument
    the proponent puts forward, and the proponent wins when the opponent
    has conceded every sub-dispute.
    """

    def __init__(self, model: GraphModel):
        self.model = model
        self._skeptical = SkepticalGame(model)
        self._credulous = CredulousGame(model)

    # ── Skeptical (grounded) ────────────────────────────────────

    def skeptical_dialogues(self, claim: Hashable) -> Iterator[Dialogue]:
        logger.debug(f"Skeptical game for claim={claim!r}")
        return self._skeptical.dialogues(claim)

    def is_skeptically_accepted(self, claim: Hashable) -> bool:
        return next(self.skeptical_dialogues(claim), None) is not None

    # ── Credulous (preferred) ───────────────────────────────────

    def credulous_dialogues(self, claim: Hashable) -> Iterator[Dialogue]:
        logger.debug(f"Credulous game for claim={claim!r}")
        return self._credulous.dialogues(claim)

    def is_credulously_accepted(self, claim: Hashable) -> bool:
        return next(self.credulous_dialogues(claim), None) is not None
