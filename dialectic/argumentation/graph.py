"""
Graph Model — Read-Only Query Surface for the Dialogue Games

One immutable object holds everything the games consult:
- the attack graph (arguments and attacks)
- abducible framework states and their expansion inheritance
- properties, argument property sets, weights and legal
  motivational states for property-based preferences

The model is validated once, at construction, so the searches can
assume a consistent, cycle-free graph.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Hashable, Iterable

logger = logging.getLogger("dialectic.argumentation.graph")


class InvalidModel(ValueError):
    """Raised when declared facts do not form a consistent model."""


@dataclass(frozen=True)
class FrameworkState:
    """
    A named variant of the attack graph.

    ``expansion_of`` names the state this one expands: every argument
    and attack of the parent is also part of this state.
    """
    name: Hashable
    expansion_of: Hashable | None = None
    arguments: tuple = ()
    attacks: tuple = ()


@dataclass
class _Closure:
    ordered_arguments: tuple = ()
    ordered_attacks: tuple = ()
    arguments: frozenset = field(default_factory=frozenset)
    attacks: frozenset = field(default_factory=frozenset)


class GraphModel:
    """
    Immutable argumentation model shared by all engines.

    When framework states are declared, ``arguments()`` and ``attacks()``
    cover the declared base facts plus every argument/attack that occurs
    in some state.
    """

    def __init__(
        self,
        arguments: Iterable[Hashable] = (),
        attacks: Iterable[tuple] = (),
        states: Iterable[FrameworkState] = (),
        properties: Iterable[Hashable] = (),
        argument_properties: dict | None = None,
        weights: dict | None = None,
        motivational_states: Iterable[Iterable[Hashable]] = (),
    ):
        self._states: dict[Hashable, FrameworkState] = {}
        for state in states:
            if state.name in self._states:
                raise InvalidModel(f"Framework state declared twice: {state.name!r}")
            self._states[state.name] = state
        self._closures: dict[Hashable, _Closure] = {}

        self._validate_expansions()

        # Base graph: declared facts first, then the union over states.
        args: dict[Hashable, None] = dict.fromkeys(arguments)
        for name, state in self._states.items():
            for a in state.arguments:
                args.setdefault(a)
            for a in self._closure(name).ordered_arguments:
                args.setdefault(a)

        atts: dict[tuple, None] = {}
        for attack in attacks:
            attack = tuple(attack)
            self._check_attack(attack, args, "base graph")
            atts[attack] = None

        for name, state in self._states.items():
            closure = self._closure(name)
            for attack in state.attacks:
                self._check_attack(tuple(attack), closure.arguments, f"state {name!r}")
                atts.setdefault(tuple(attack))
            for attack in closure.ordered_attacks:
                atts.setdefault(attack)

        self._arguments: tuple = tuple(args)
        self._order = {a: i for i, a in enumerate(self._arguments)}
        self._attacks: tuple = tuple(atts)
        self._attack_set = frozenset(self._attacks)

        attackers: dict[Hashable, list] = {a: [] for a in self._arguments}
        for attacker, target in self._attacks:
            attackers[target].append(attacker)
        self._attackers = {
            target: tuple(sorted(set(found), key=self._order.__getitem__))
            for target, found in attackers.items()
        }

        # Property-based preferences
        self._properties: tuple = tuple(dict.fromkeys(properties))
        prop_index = set(self._properties)

        self._weights: dict[Hashable, int] = {}
        for prop, value in (weights or {}).items():
            if prop not in prop_index:
                raise InvalidModel(f"Weight declared for undeclared property {prop!r}")
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidModel(f"Weight of {prop!r} must be an integer, got {value!r}")
            self._weights[prop] = value

        self._argument_properties: dict[Hashable, frozenset] = {}
        for arg, props in (argument_properties or {}).items():
            if arg not in self._order:
                raise InvalidModel(f"Properties declared for undeclared argument {arg!r}")
            unknown = [p for p in props if p not in prop_index]
            if unknown:
                raise InvalidModel(f"Argument {arg!r} has undeclared properties {unknown!r}")
            self._argument_properties[arg] = frozenset(props)

        legal: dict[frozenset, tuple] = {}
        for ms in motivational_states:
            ms = tuple(dict.fromkeys(ms))
            unknown = [p for p in ms if p not in prop_index]
            if unknown:
                raise InvalidModel(f"Motivational state {list(ms)!r} has undeclared properties {unknown!r}")
            legal.setdefault(frozenset(ms), ms)
        self._legal_states: tuple = tuple(legal.values())
        self._legal_index = frozenset(legal)

        logger.debug(
            f"Graph model loaded: {len(self._arguments)} arguments, "
            f"{len(self._attacks)} attacks, {len(self._states)} states, "
            f"{len(self._properties)} properties, "
            f"{len(self._legal_states)} motivational states"
        )

    # ── Attack Graph ────────────────────────────────────────────

    def arguments(self) -> tuple:
        return self._arguments

    def attacks(self) -> tuple:
        return self._attacks

    def is_argument(self, x: Hashable) -> bool:
        try:
            return x in self._order
        except TypeError:
            return False

    def is_attack(self, x: Hashable, y: Hashable) -> bool:
        return (x, y) in self._attack_set

    def attackers_of(self, x: Hashable) -> tuple:
        """Attackers of x in argument declaration order."""
        return self._attackers.get(x, ())

    # ── Framework States ────────────────────────────────────────

    def states(self) -> tuple:
        return tuple(self._states)

    def state(self, name: Hashable) -> FrameworkState:
        try:
            return self._states[name]
        except KeyError:
            raise InvalidModel(f"Unknown framework state {name!r}") from None

    def effective_arguments(self, state: Hashable) -> frozenset:
        self.state(state)
        return self._closure(state).arguments

    def effective_attacks(self, state: Hashable) -> frozenset:
        self.state(state)
        return self._closure(state).attacks

    # ── Properties and Motivational States ──────────────────────

    def properties(self) -> tuple:
        return self._properties

    def properties_of(self, x: Hashable) -> frozenset:
        return self._argument_properties.get(x, frozenset())

    def weight_of(self, prop: Hashable) -> int:
        return self._weights.get(prop, 0)

    def legal_motivational_states(self) -> tuple:
        return self._legal_states

    def is_legal_state(self, state: Iterable[Hashable]) -> bool:
        return frozenset(state) in self._legal_index

    def weight(self, props: Iterable[Hashable], state: Iterable[Hashable]) -> int:
        """Summed weight of the properties shared by ``props`` and ``state``."""
        common = frozenset(props) & frozenset(state)
        return sum(self.weight_of(p) for p in common)

    def is_enabled(self, attack: tuple, state: Iterable[Hashable]) -> bool:
        """
        An attack (X, Y) is enabled under a legal motivational state M iff
        weight(props(Y) ∩ M) <= weight(props(X) ∩ M).
        """
        state = frozenset(state)
        if state not in self._legal_index:
            return False
        attacker, target = attack
        if not self.is_attack(attacker, target):
            return False
        return (
            self.weight(self.properties_of(target), state)
            <= self.weight(self.properties_of(attacker), state)
        )

    def is_disabled(self, attack: tuple, state: Iterable[Hashable]) -> bool:
        state = frozenset(state)
        if state not in self._legal_index:
            return False
        return self.is_attack(*attack) and not self.is_enabled(attack, state)

    # ── Summary ─────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "arguments": list(self._arguments),
            "attacks": [list(a) for a in self._attacks],
            "states": [
                {
                    "name": s.name,
                    "expansion_of": s.expansion_of,
                    "arguments": sorted(self._closure(s.name).arguments, key=self._order.get),
                    "attacks": [list(a) for a in self._attacks
                                if a in self._closure(s.name).attacks],
                }
                for s in self._states.values()
            ],
            "properties": list(self._properties),
            "motivational_states": [list(ms) for ms in self._legal_states],
            "stats": {
                "num_arguments": len(self._arguments),
                "num_attacks": len(self._attacks),
                "num_states": len(self._states),
                "num_properties": len(self._properties),
            },
        }

    # ── Internal ────────────────────────────────────────────────

    def _validate_expansions(self) -> None:
        """Reject expansions of undeclared states and expansion cycles."""
        for name, state in self._states.items():
            if state.expansion_of is not None and state.expansion_of not in self._states:
                raise InvalidModel(
                    f"State {name!r} expands undeclared state {state.expansion_of!r}"
                )

        for name in self._states:
            seen = [name]
            current = self._states[name].expansion_of
            while current is not None:
                if current in seen:
                    chain = " -> ".join(str(s) for s in seen + [current])
                    raise InvalidModel(f"Expansion cycle: {chain}")
                seen.append(current)
                current = self._states[current].expansion_of

    def _closure(self, name: Hashable) -> _Closure:
        """Own facts plus everything inherited along the expansion chain."""
        cached = self._closures.get(name)
        if cached is not None:
            return cached

        state = self._states[name]
        arguments = dict.fromkeys(state.arguments)
        attacks = dict.fromkeys(tuple(a) for a in state.attacks)
        if state.expansion_of is not None:
            parent = self._closure(state.expansion_of)
            arguments.update(dict.fromkeys(parent.ordered_arguments))
            attacks.update(dict.fromkeys(parent.ordered_attacks))

        closure = _Closure(
            ordered_arguments=tuple(arguments),
            ordered_attacks=tuple(attacks),
            arguments=frozenset(arguments),
            attacks=frozenset(attacks),
        )
        self._closures[name] = closure
        return closure

    @staticmethod
    def _check_attack(attack: tuple, arguments, where: str) -> None:
        if len(attack) != 2:
            raise InvalidModel(f"Attack must be a pair, got {attack!r} in {where}")
        for endpoint in attack:
            if endpoint not in arguments:
                raise InvalidModel(
                    f"Attack {attack!r} in {where} references undeclared argument {endpoint!r}"
                )
