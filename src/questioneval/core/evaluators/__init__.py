"""Evaluator implementations for the question evaluation engine."""

from .mandatory import GateResult, MandatoryGate, MandatoryGateConfig
from .scoring import ScoreResult, ScoringCalculator, ScoringCalculatorConfig
from .tagging import AutoTagger, TagResult
from .triggers import TriggerDispatcher

__all__ = [
    "AutoTagger",
    "GateResult",
    "MandatoryGate",
    "MandatoryGateConfig",
    "ScoreResult",
    "ScoringCalculator",
    "ScoringCalculatorConfig",
    "TagResult",
    "TriggerDispatcher",
]
