"""Dialogue games — proof procedures for acceptance in abstract argumentation."""
from .abductive import AbductiveDialogEngine
from .engine import DialogEngine
from .facts import FactBridge
from .graph import FrameworkState, GraphModel, InvalidModel
from .models import (
    Dialogue,
    Explanation,
    Game,
    Move,
    MoveKind,
    MoveSet,
    Speaker,
    WeakAcceptanceDialogue,
)
from .preferences import PropertyBasedDialogEngine

__all__ = [
    "AbductiveDialogEngine",
    "DialogEngine",
    "FactBridge",
    "FrameworkState",
    "GraphModel",
    "InvalidModel",
    "PropertyBasedDialogEngine",
    "Dialogue",
    "Explanation",
    "Game",
    "Move",
    "MoveKind",
    "MoveSet",
    "Speaker",
    "WeakAcceptanceDialogue",
]
