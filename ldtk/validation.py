import re

from ldtk.data import RoofType
from ldtk.settings import MAX_OLD_THICKNESS

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

EMAIL_ERROR = "Podaj poprawny adres email"
ROOF_TYPE_ERROR = "Wybierz rodzaj dachu"


def is_valid_email(address: str | None) -> bool:
    return bool(address) and EMAIL_RE.match(address) is not None


def thickness_error(min_new_thickness: int) -> str:
    return f"Grubość izolacji musi być większa niż {min_new_thickness} mm"


def validate_step(step: int, roof_type: RoofType | None, new_thickness: int, min_new_thickness: int) -> dict[str, str]:
    """Return field errors blocking ``step``; empty when it may advance."""
    errors = {}
    if step == 0 and roof_type is None:
        errors["roof_type"] = ROOF_TYPE_ERROR
    if step == 1 and new_thickness <= min_new_thickness:
        errors["new_thickness"] = thickness_error(min_new_thickness)
    return errors


def clamp_old_thickness(value: int) -> int:
    return max(0, min(int(value), MAX_OLD_THICKNESS))
