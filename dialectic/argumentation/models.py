"""
Dialogue Models — Moves, Dialogues and Branch-Local Sets

Structures shared by the dialogue games from:
- Caminada & Podlaszewski (2012): Grounded semantics as persuasion dialogue
- Caminada, Dvorak & Vesic (2014): Preferred semantics as socratic discussion
- Booth, Gabbay, Kaci, Rienstra & van der Torre (2014): Abduction in argumentation
- Booth, Kaci & Rienstra (2013): Property-based preferences

A dialogue won by the proponent is a proof that the claim is accepted.
Everything here is immutable so that a search branch can be forked by
simply holding on to a reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Hashable, Iterable, Iterator


class Speaker(str, Enum):
    """Party making a move."""
    PROPONENT = "pro"
    OPPONENT = "opp"


class Game(str, Enum):
    """Dialogue game that produced a dialogue."""
    SKEPTICAL = "skeptical"
    CREDULOUS = "credulous"
    ABDUCTIVE = "abductive"
    WEAK = "weak"


class MoveKind(str, Enum):
    """Kinds of moves across all games."""
    CHALLENGE = "challenge"                        # opp: Y attacks X
    CONCEDE = "concede"                            # opp: no attacker left
    DEFEND = "defend"                              # pro: Z attacks Y
    ALREADY_ACCEPTED = "already_accepted"          # pro: Z already accepted
    HYPOTHETICAL_ASSERT = "hypothetical_assert"    # pro: assume Z attacks Y
    HYPOTHETICAL_DENY = "hypothetical_deny"        # pro: deny Y attacks X
    ENABLE_PROPERTY = "enable_property"            # pro: extend state to enable
    DEFEND_WITH_PROPERTY = "defend_with_property"  # pro: extend state to disable
    WIN = "win"


_TRACE_TAGS = {
    MoveKind.HYPOTHETICAL_ASSERT: "pro_pos",
    MoveKind.HYPOTHETICAL_DENY: "pro_neg",
    MoveKind.ENABLE_PROPERTY: "prop_en",
    MoveKind.DEFEND_WITH_PROPERTY: "prop_def",
}


class MoveSet:
    """
    Immutable insertion-ordered set.

    Backs every branch-local collection of the games (opponent and
    proponent used attacks, accepted/rejected arguments, active framework
    states, disabled/enabled attacks). ``add`` returns a new set, so a
    branch that forks keeps its own copy without any explicit cloning.
    """

    __slots__ = ("_items", "_index")

    def __init__(self, items: Iterable[Hashable] = ()):
        ordered = tuple(dict.fromkeys(items))
        self._items = ordered
        self._index = frozenset(ordered)

    def add(self, item: Hashable) -> MoveSet:
        if item in self._index:
            return self
        return MoveSet(self._items + (item,))

    def filter(self, predicate) -> MoveSet:
        return MoveSet(i for i in self._items if predicate(i))

    def isdisjoint(self, other: Iterable[Hashable]) -> bool:
        return self._index.isdisjoint(other)

    def as_tuple(self) -> tuple:
        return self._items

    def __contains__(self, item: object) -> bool:
        return item in self._index

    def __iter__(self) -> Iterator:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other):
        if isinstance(other, MoveSet):
            return self._index == other._index
        return NotImplemented

    def __hash__(self):
        return hash(self._index)

    def __repr__(self):
        return f"MoveSet({list(self._items)!r})"


@dataclass(frozen=True)
class Move:
    """
    One step of a dialogue.

    ``attacker``/``target`` carry the attack a move is about,
    ``properties`` the properties added to the motivational state, and
    ``states`` the active framework states right after the move (abductive
    game only).
    """
    speaker: Speaker
    kind: MoveKind
    attacker: Hashable | None = None
    target: Hashable | None = None
    properties: tuple = ()
    states: tuple = ()

    # ── Constructors ────────────────────────────────────────────

    @classmethod
    def challenge(cls, attacker, target, states: tuple = ()) -> Move:
        return cls(Speaker.OPPONENT, MoveKind.CHALLENGE, attacker, target, states=states)

    @classmethod
    def concede(cls, states: tuple = ()) -> Move:
        return cls(Speaker.OPPONENT, MoveKind.CONCEDE, states=states)

    @classmethod
    def defend(cls, attacker, target) -> Move:
        return cls(Speaker.PROPONENT, MoveKind.DEFEND, attacker, target)

    @classmethod
    def already_accepted(cls, attacker, target) -> Move:
        return cls(Speaker.PROPONENT, MoveKind.ALREADY_ACCEPTED, attacker, target)

    @classmethod
    def hypothetical_assert(cls, attacker, target, states: tuple) -> Move:
        return cls(Speaker.PROPONENT, MoveKind.HYPOTHETICAL_ASSERT,
                   attacker, target, states=states)

    @classmethod
    def hypothetical_deny(cls, attacker, target, states: tuple) -> Move:
        return cls(Speaker.PROPONENT, MoveKind.HYPOTHETICAL_DENY,
                   attacker, target, states=states)

    @classmethod
    def enable_property(cls, properties: tuple) -> Move:
        return cls(Speaker.PROPONENT, MoveKind.ENABLE_PROPERTY, properties=tuple(properties))

    @classmethod
    def defend_with_property(cls, properties: tuple) -> Move:
        return cls(Speaker.PROPONENT, MoveKind.DEFEND_WITH_PROPERTY,
                   properties=tuple(properties))

    @classmethod
    def win(cls, states: tuple = ()) -> Move:
        return cls(Speaker.PROPONENT, MoveKind.WIN, states=states)

    # ── Serialization ───────────────────────────────────────────

    @property
    def attack(self) -> tuple | None:
        if self.attacker is None:
            return None
        return (self.attacker, self.target)

    def to_trace(self) -> list:
        """Compact list form, e.g. ``["opp", "c", "d"]`` or ``["opp", "ok"]``."""
        if self.kind == MoveKind.CONCEDE:
            return [self.speaker.value, "ok"]
        if self.kind == MoveKind.WIN:
            return [self.speaker.value, "win"]
        if self.kind in (MoveKind.ENABLE_PROPERTY, MoveKind.DEFEND_WITH_PROPERTY):
            return [_TRACE_TAGS[self.kind], list(self.properties)]
        tag = _TRACE_TAGS.get(self.kind, self.speaker.value)
        trace = [tag, self.attacker, self.target]
        if self.kind == MoveKind.ALREADY_ACCEPTED:
            trace.append(MoveKind.ALREADY_ACCEPTED.value)
        return trace

    def to_dict(self) -> dict:
        data = {
            "speaker": self.speaker.value,
            "kind": self.kind.value,
        }
        if self.attacker is not None:
            data["attacker"] = self.attacker
            data["target"] = self.target
        if self.kind in (MoveKind.ENABLE_PROPERTY, MoveKind.DEFEND_WITH_PROPERTY):
            data["properties"] = list(self.properties)
        if self.states:
            data["states"] = list(self.states)
        return data

    def __str__(self):
        return " ".join(str(part) for part in self.to_trace())


@dataclass(frozen=True)
class Dialogue:
    """A sequence of moves; terminal (won by the proponent) iff it ends in ``win``."""
    claim: Hashable
    moves: tuple[Move, ...]
    game: Game = Game.SKEPTICAL

    @property
    def is_terminal(self) -> bool:
        return bool(self.moves) and self.moves[-1].kind == MoveKind.WIN

    def trace(self) -> list[list]:
        return [m.to_trace() for m in self.moves]

    def count(self, kind: MoveKind) -> int:
        return sum(1 for m in self.moves if m.kind == kind)

    def to_dict(self) -> dict:
        return {
            "claim": self.claim,
            "game": self.game.value,
            "moves": [m.to_dict() for m in self.moves],
            "trace": self.trace(),
        }

    def __iter__(self) -> Iterator[Move]:
        return iter(self.moves)

    def __len__(self) -> int:
        return len(self.moves)


@dataclass(frozen=True)
class WeakAcceptanceDialogue(Dialogue):
    """
    Dialogue of the property-based game together with the negotiated
    outcome: the final motivational state, the attacks that must stay
    disabled and the attacks that must stay enabled under it.
    """
    motivational_state: tuple = ()
    disabled: tuple = ()
    enabled: tuple = ()

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["motivational_state"] = list(self.motivational_state)
        data["disabled"] = [list(a) for a in self.disabled]
        data["enabled"] = [list(a) for a in self.enabled]
        return data


@dataclass(frozen=True)
class Explanation:
    """Abductive explanation: the framework states under which the dialogue wins."""
    states: tuple
    dialogue: Dialogue

    @property
    def state_set(self) -> frozenset:
        return frozenset(self.states)

    def to_dict(self) -> dict:
        data = self.dialogue.to_dict()
        data["active_states"] = list(self.states)
        return data
