"""Top-level package for the Crazy Eights game engine."""

from . import cards, controller, engine, opponent, rules, scheduling, state

__all__ = [
    "cards",
    "controller",
    "engine",
    "opponent",
    "rules",
    "scheduling",
    "state",
]
