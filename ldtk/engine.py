from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ldtk.data import InsulationRow, RoofType, Screw, screws_for, table_for
from ldtk.settings import NO_SCREW, TUBE_PREFIX


@dataclass(frozen=True)
class ConfigurationInput:
    roof_type: RoofType = RoofType.CONCRETE
    new_thickness: int = 0
    has_old_insulation: bool = False
    old_thickness: int = 0


@dataclass(frozen=True)
class Recommendation:
    tube_name: str
    screw_name: str
    anchor_depth: int

    @property
    def has_screw(self) -> bool:
        return self.screw_name != NO_SCREW


def effective_old_thickness(inp: ConfigurationInput) -> int:
    """Old layers only count on non-metal roofs that actually have them."""
    if inp.roof_type is RoofType.METAL or not inp.has_old_insulation:
        return 0
    return int(inp.old_thickness)


def find_row(table: Sequence[InsulationRow], new_thickness: int) -> Optional[InsulationRow]:
    return next((row for row in table if row.insulation >= new_thickness), None)


def find_screw(catalog: Sequence[Screw], required_length: int) -> Optional[Screw]:
    return next((s for s in catalog if s.length >= required_length), None)


def compute_recommendation(
    inp: ConfigurationInput,
    tables: Optional[Tuple[Sequence[InsulationRow], Sequence[Screw]]] = None,
) -> Optional[Recommendation]:
    """Pick the LDTK tube and screw for ``inp``.

    Returns None when the insulation is thicker than any tube covers. When
    the tube fits but no screw in the catalog is long enough, the screw name
    is ``NO_SCREW``.
    """
    if tables is None:
        table, catalog = table_for(inp.roof_type), screws_for(inp.roof_type)
    else:
        table, catalog = tables

    row = find_row(table, inp.new_thickness)
    if row is None:
        return None

    required = row.screw + effective_old_thickness(inp)
    screw = find_screw(catalog, required)
    return Recommendation(
        tube_name=f"{TUBE_PREFIX} {row.length}",
        screw_name=screw.code if screw else NO_SCREW,
        anchor_depth=inp.roof_type.anchor_depth,
    )


def recommend(inp: ConfigurationInput) -> list[Recommendation]:
    rec = compute_recommendation(inp)
    return [rec] if rec else []
