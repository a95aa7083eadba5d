"""Wizard state for the configurator.

The whole UI state is one frozen ``WizardState``; every user interaction is an
action object passed through ``reduce``, which returns the next state. The
Streamlit script only stores the current state and renders it.
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from ldtk.data import RoofType
from ldtk.engine import ConfigurationInput, Recommendation, recommend
from ldtk.validation import EMAIL_ERROR, clamp_old_thickness, is_valid_email, validate_step

STEPS = ("Rodzaj dachu", "Nowa izolacja", "Stare warstwy", "Wynik")
RESULT_STEP = len(STEPS) - 1


@dataclass(frozen=True)
class WizardState:
    disclaimer_accepted: bool = False
    email: str = ""
    email_submitted: bool = False
    step: int = 0
    roof_type: Optional[RoofType] = RoofType.CONCRETE
    new_thickness: int = 0
    has_old_insulation: bool = False
    old_thickness: int = 0
    recommendations: Tuple[Recommendation, ...] = ()
    errors: dict = field(default_factory=dict)
    theme_mode: str = "light"

    def to_input(self) -> ConfigurationInput:
        return ConfigurationInput(
            roof_type=self.roof_type or RoofType.CONCRETE,
            new_thickness=self.new_thickness,
            has_old_insulation=self.has_old_insulation,
            old_thickness=self.old_thickness,
        )


# --- Actions -------------------------------------------------------------------

@dataclass(frozen=True)
class AcceptDisclaimer:
    pass


@dataclass(frozen=True)
class SubmitEmail:
    address: str


@dataclass(frozen=True)
class SelectRoofType:
    roof_type: Optional[RoofType]


@dataclass(frozen=True)
class SetNewThickness:
    value: int


@dataclass(frozen=True)
class ToggleOldInsulation:
    enabled: bool


@dataclass(frozen=True)
class SetOldThickness:
    value: int


@dataclass(frozen=True)
class AdvanceStep:
    pass


@dataclass(frozen=True)
class GoBack:
    pass


@dataclass(frozen=True)
class Calculate:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class ToggleTheme:
    pass


def _set_field(state: WizardState, name: str, value) -> WizardState:
    errors = {k: v for k, v in state.errors.items() if k != name}
    return replace(state, errors=errors, **{name: value})


def reduce(state: WizardState, action, min_new_thickness: int) -> WizardState:
    if isinstance(action, AcceptDisclaimer):
        return replace(state, disclaimer_accepted=True)

    if isinstance(action, SubmitEmail):
        address = (action.address or "").strip()
        if not is_valid_email(address):
            return replace(state, errors={**state.errors, "email": EMAIL_ERROR})
        return _set_field(replace(state, email_submitted=True), "email", address)

    if isinstance(action, SelectRoofType):
        return _set_field(state, "roof_type", action.roof_type)
    if isinstance(action, SetNewThickness):
        return _set_field(state, "new_thickness", max(0, int(action.value)))
    if isinstance(action, ToggleOldInsulation):
        return _set_field(state, "has_old_insulation", bool(action.enabled))
    if isinstance(action, SetOldThickness):
        return _set_field(state, "old_thickness", clamp_old_thickness(action.value))

    if isinstance(action, AdvanceStep):
        errors = validate_step(state.step, state.roof_type, state.new_thickness, min_new_thickness)
        if errors:
            return replace(state, errors=errors)
        return replace(state, errors={}, step=min(state.step + 1, RESULT_STEP))

    if isinstance(action, GoBack):
        return replace(state, step=max(state.step - 1, 0))

    if isinstance(action, Calculate):
        # roof type and thickness were validated on the way here
        recs = recommend(state.to_input())
        return replace(state, recommendations=tuple(recs), step=RESULT_STEP, errors={})

    if isinstance(action, Reset):
        return WizardState(
            disclaimer_accepted=state.disclaimer_accepted,
            email=state.email,
            email_submitted=state.email_submitted,
            theme_mode=state.theme_mode,
        )

    if isinstance(action, ToggleTheme):
        return replace(state, theme_mode="dark" if state.theme_mode == "light" else "light")

    raise TypeError(f"unknown wizard action: {action!r}")
