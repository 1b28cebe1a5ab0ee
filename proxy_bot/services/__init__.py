from proxy_bot.services.state_machine import (
    InvalidTransitionError,
    WizardStep,
    advance,
    can_transition,
    parse_step,
    transition,
)

__all__ = ["InvalidTransitionError", "WizardStep", "advance", "can_transition", "parse_step", "transition"]
