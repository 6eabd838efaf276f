"""Selection of the pass/fail action bundle."""

from __future__ import annotations

from ...schemas.evaluation import TriggerAction, TriggerConfig
from ..normalize import active_section
from .mandatory import GateResult


class TriggerDispatcher:
    """Pick ``onPass`` or ``onFail`` from the gate verdict.

    The returned action is an intent for the application pipeline; nothing
    is executed here.
    """

    def dispatch(
        self,
        triggers: TriggerConfig | None,
        gate_result: GateResult,
    ) -> TriggerAction | None:
        triggers = active_section(triggers)
        if triggers is None:
            return None
        if gate_result.disqualified:
            return triggers.on_fail
        return triggers.on_pass
