"""
Fact Bridge — Declared Facts to Graph Model

Converts declarations into the immutable GraphModel the games run on.
Two input shapes are accepted:

1. Fact tuples, one declaration each:
       ("arg", X)                  ("att", X, Y)
       ("afstate", S)              ("expansionOf", S1, S2)
       ("argInState", X, S)        ("attInState", X, Y, S)
       ("prp", P)                  ("prp", X, PS)
       ("ms", PS)                  ("weight", P, N)

2. A framework document (the JSON form used by the HTTP API and the
   registry) with keys ``arguments``, ``attacks``, ``states``,
   ``properties``, ``argument_properties``, ``weights`` and
   ``motivational_states``.

Both fail with InvalidModel before any search can start.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .graph import FrameworkState, GraphModel, InvalidModel

logger = logging.getLogger("dialectic.argumentation.bridge")

# fact name -> accepted arities (including the name itself)
FACT_ARITY = {
    "arg": (2,),
    "att": (3,),
    "afstate": (2,),
    "expansionOf": (3,),
    "argInState": (3,),
    "attInState": (4,),
    "prp": (2, 3),
    "ms": (2,),
    "weight": (3,),
}


class FactBridge:
    """Builds GraphModels from fact tuples or framework documents."""

    def build_model(self, facts: Iterable[Sequence]) -> GraphModel:
        """Build a model from declared fact tuples."""
        return self.build_model_from_document(self.facts_to_document(facts))

    def facts_to_document(self, facts: Iterable[Sequence]) -> dict:
        doc: dict = {
            "arguments": [],
            "attacks": [],
            "states": [],
            "properties": [],
            "argument_properties": {},
            "weights": {},
            "motivational_states": [],
        }
        states: dict = {}
        expansions: dict = {}
        state_args: list[tuple] = []
        state_atts: list[tuple] = []

        for fact in facts:
            if not fact or fact[0] not in FACT_ARITY:
                raise InvalidModel(f"Unknown fact {fact!r}")
            name = fact[0]
            if len(fact) not in FACT_ARITY[name]:
                raise InvalidModel(f"Wrong arity for {name!r} fact: {fact!r}")

            if name == "arg":
                doc["arguments"].append(fact[1])
            elif name == "att":
                doc["attacks"].append((fact[1], fact[2]))
            elif name == "afstate":
                states.setdefault(fact[1], {"name": fact[1], "arguments": [], "attacks": []})
            elif name == "expansionOf":
                if fact[1] in expansions and expansions[fact[1]] != fact[2]:
                    raise InvalidModel(
                        f"State {fact[1]!r} declared as expansion of both "
                        f"{expansions[fact[1]]!r} and {fact[2]!r}"
                    )
                expansions[fact[1]] = fact[2]
            elif name == "argInState":
                state_args.append((fact[1], fact[2]))
            elif name == "attInState":
                state_atts.append(((fact[1], fact[2]), fact[3]))
            elif name == "prp" and len(fact) == 2:
                doc["properties"].append(fact[1])
            elif name == "prp":
                doc["argument_properties"].setdefault(fact[1], [])
                doc["argument_properties"][fact[1]].extend(fact[2])
            elif name == "ms":
                doc["motivational_states"].append(list(fact[1]))
            elif name == "weight":
                if fact[1] in doc["weights"]:
                    raise InvalidModel(f"Weight of {fact[1]!r} declared twice")
                doc["weights"][fact[1]] = fact[2]

        for arg, state in state_args:
            self._state_entry(states, state)["arguments"].append(arg)
        for attack, state in state_atts:
            self._state_entry(states, state)["attacks"].append(attack)
        for state, parent in expansions.items():
            self._state_entry(states, state)["expansion_of"] = parent

        doc["states"] = list(states.values())
        return doc

    def build_model_from_document(self, doc: dict) -> GraphModel:
        """Build a model from a framework document."""
        states = [
            FrameworkState(
                name=s["name"],
                expansion_of=s.get("expansion_of"),
                arguments=tuple(s.get("arguments", ())),
                attacks=tuple(tuple(a) for a in s.get("attacks", ())),
            )
            for s in doc.get("states", [])
        ]
        model = GraphModel(
            arguments=doc.get("arguments", []),
            attacks=[tuple(a) for a in doc.get("attacks", [])],
            states=states,
            properties=doc.get("properties", []),
            argument_properties=doc.get("argument_properties") or {},
            weights=doc.get("weights") or {},
            motivational_states=doc.get("motivational_states", []),
        )
        logger.info(
            f"Built graph model: {len(model.arguments())} arguments, "
            f"{len(model.attacks())} attacks, {len(model.states())} states"
        )
        return model

    @staticmethod
    def _state_entry(states: dict, name) -> dict:
        try:
            return states[name]
        except KeyError:
            raise InvalidModel(f"Fact references undeclared framework state {name!r}") from None
