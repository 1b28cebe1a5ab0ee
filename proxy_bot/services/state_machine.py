from enum import Enum
from typing import Optional


class WizardStep(str, Enum):
    AWAITING_VIDEO = "awaiting_video"
    AWAITING_TITLE = "awaiting_title"
    AWAITING_DESCRIPTION = "awaiting_description"
    AWAITING_TAGS = "awaiting_tags"
    AWAITING_CONFIRM = "awaiting_confirm"


VALID_TRANSITIONS = {
    WizardStep.AWAITING_VIDEO: [WizardStep.AWAITING_TITLE],
    WizardStep.AWAITING_TITLE: [WizardStep.AWAITING_DESCRIPTION],
    WizardStep.AWAITING_DESCRIPTION: [WizardStep.AWAITING_TAGS],
    WizardStep.AWAITING_TAGS: [WizardStep.AWAITING_CONFIRM],
    WizardStep.AWAITING_CONFIRM: [],
}


class InvalidTransitionError(Exception):
    def __init__(self, from_step, to_step):
        self.from_step = from_step
        self.to_step = to_step
        super().__init__(f"Invalid transition: {_value(from_step)} -> {_value(to_step)}")


def _value(step) -> str:
    return step.value if isinstance(step, WizardStep) else str(step)


def parse_step(raw: str) -> Optional[WizardStep]:
    """Map a stored step string to WizardStep. Unknown values return None."""
    try:
        return WizardStep(raw)
    except ValueError:
        return None


def can_transition(from_step: WizardStep, to_step: WizardStep) -> bool:
    """Check if transition is valid."""
    allowed = VALID_TRANSITIONS.get(from_step, [])
    return to_step in allowed


def transition(from_step: WizardStep, to_step: WizardStep) -> WizardStep:
    """Perform step transition. Raises InvalidTransitionError if not allowed."""
    if not can_transition(from_step, to_step):
        raise InvalidTransitionError(from_step, to_step)
    return to_step


def advance(current_step: WizardStep) -> WizardStep:
    """Move to the next step of the wizard."""
    allowed = VALID_TRANSITIONS.get(current_step, [])
    if not allowed:
        raise InvalidTransitionError(current_step, "end")
    return transition(current_step, allowed[0])
