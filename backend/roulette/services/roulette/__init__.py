"""Roulette session facade module."""

from .service import PickOutcome, RouletteService, create_roulette_service

__all__ = [
    "PickOutcome",
    "RouletteService",
    "create_roulette_service",
]
