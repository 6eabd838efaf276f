"""Dependency injection container for the evaluation engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import (
    ApplicationEvaluator,
    AutoTagger,
    ConditionEvaluator,
    MandatoryGate,
    QuestionEvaluationEngine,
    QuestionVisibility,
    ScoringCalculator,
    TriggerDispatcher,
)
from .core.conditions import ConditionConfig
from .core.evaluators.mandatory import MandatoryGateConfig
from .core.evaluators.scoring import ScoringCalculatorConfig
from .pipeline import EvaluationPipeline, FormLoader, SubmissionLoader


class EvaluationContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    condition_config = providers.Singleton(ConditionConfig)
    condition_evaluator = providers.Singleton(ConditionEvaluator, config=condition_config)

    mandatory_gate = providers.Singleton(MandatoryGate, conditions=condition_evaluator)
    scoring_calculator = providers.Singleton(ScoringCalculator, gate=mandatory_gate)
    auto_tagger = providers.Singleton(AutoTagger, conditions=condition_evaluator)
    trigger_dispatcher = providers.Singleton(TriggerDispatcher)

    engine = providers.Singleton(
        QuestionEvaluationEngine,
        gate=mandatory_gate,
        scoring=scoring_calculator,
        tagger=auto_tagger,
        dispatcher=trigger_dispatcher,
    )

    visibility = providers.Singleton(QuestionVisibility, conditions=condition_evaluator)

    application_evaluator = providers.Singleton(
        ApplicationEvaluator,
        engine=engine,
        visibility=visibility,
        min_total_points=config.min_total_points,
    )

    pipeline = providers.Factory(
        EvaluationPipeline,
        evaluator=application_evaluator,
        conditions=condition_config,
        form_loader=providers.Factory(FormLoader),
        submission_loader=providers.Factory(SubmissionLoader),
    )


def create_container(*, settings: dict | None = None) -> EvaluationContainer:
    """Instantiate container with optional overrides."""

    container = EvaluationContainer()

    if not settings:
        return container

    core_settings = settings.get("core", {}) if isinstance(settings, dict) else {}
    if core_settings:
        container.config.override(core_settings)

    evaluator_settings = settings.get("evaluators", {}) if isinstance(settings, dict) else {}

    if "conditions" in evaluator_settings:
        condition_config = ConditionConfig(**evaluator_settings["conditions"])
        container.condition_config.override(providers.Object(condition_config))

    if "mandatory" in evaluator_settings:
        gate_config = MandatoryGateConfig(**evaluator_settings["mandatory"])
        container.mandatory_gate.override(
            providers.Singleton(
                MandatoryGate,
                config=gate_config,
                conditions=container.condition_evaluator,
            )
        )

    if "scoring" in evaluator_settings:
        scoring_config = ScoringCalculatorConfig(**evaluator_settings["scoring"])
        container.scoring_calculator.override(
            providers.Singleton(
                ScoringCalculator,
                config=scoring_config,
                gate=container.mandatory_gate,
            )
        )

    return container
