"""Static reference data: LDTK tube tables and screw catalogs."""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Sequence

import pandas as pd


class RoofType(str, Enum):
    CONCRETE = "concrete"
    METAL = "metal"

    @property
    def label(self) -> str:
        return "Stalowy" if self is RoofType.METAL else "Betonowy"

    @property
    def anchor_depth(self) -> int:
        """Required penetration into the substrate, in mm."""
        return 14 if self is RoofType.METAL else 30


ROOF_TYPES = [(t.value, t.label) for t in (RoofType.CONCRETE, RoofType.METAL)]


@dataclass(frozen=True)
class InsulationRow:
    insulation: int  # largest insulation thickness this tube covers
    screw: int       # base screw length
    length: int      # tube length


@dataclass(frozen=True)
class Screw:
    length: int
    code: str


# Concrete decks: tube sits 30 mm short of the insulation surface.
CONCRETE_TABLE = (
    InsulationRow(80, 80, 50),
    InsulationRow(100, 80, 70),
    InsulationRow(120, 80, 90),
    InsulationRow(140, 80, 110),
    InsulationRow(160, 80, 130),
    InsulationRow(180, 80, 150),
    InsulationRow(200, 80, 170),
    InsulationRow(220, 80, 190),
    InsulationRow(240, 80, 210),
    InsulationRow(260, 80, 230),
    InsulationRow(280, 80, 250),
    InsulationRow(300, 80, 270),
    InsulationRow(320, 80, 290),
    InsulationRow(340, 80, 310),
    InsulationRow(360, 80, 330),
    InsulationRow(380, 80, 350),
    InsulationRow(440, 100, 400),
    InsulationRow(500, 100, 450),
    InsulationRow(560, 120, 500),
    InsulationRow(620, 120, 550),
    InsulationRow(680, 140, 600),
    InsulationRow(740, 140, 650),
    InsulationRow(800, 160, 700),
    InsulationRow(860, 160, 750),
)

METAL_TABLE = (
    InsulationRow(60, 40, 40),
    InsulationRow(80, 40, 60),
    InsulationRow(100, 40, 80),
    InsulationRow(120, 40, 100),
    InsulationRow(140, 40, 120),
    InsulationRow(160, 40, 140),
    InsulationRow(180, 40, 160),
    InsulationRow(200, 40, 180),
    InsulationRow(240, 60, 200),
    InsulationRow(280, 60, 240),
    InsulationRow(320, 60, 280),
    InsulationRow(360, 60, 320),
    InsulationRow(400, 60, 360),
    InsulationRow(450, 70, 400),
    InsulationRow(500, 70, 450),
    InsulationRow(550, 70, 500),
    InsulationRow(600, 70, 550),
    InsulationRow(650, 70, 600),
    InsulationRow(700, 70, 650),
    InsulationRow(750, 70, 700),
    InsulationRow(800, 70, 750),
    InsulationRow(850, 70, 800),
)

# WDB 6.3 mm screws for concrete
WDB_63 = (
    Screw(80, "WDB-S 6,3x80"),
    Screw(100, "WDB-S 6,3x100"),
    Screw(120, "WDB-S 6,3x120"),
    Screw(140, "WDB-S 6,3x140"),
    Screw(160, "WDB-S 6,3x160"),
    Screw(180, "WDB-S 6,3x180"),
    Screw(200, "WDB-S 6,3x200"),
    Screw(220, "WDB-S 6,3x220"),
    Screw(240, "WDB-S 6,3x240"),
)

# WDS 4.8 mm self-drilling screws for steel decks
WDS_48 = (
    Screw(35, "WDS 4,8x35"),
    Screw(45, "WDS 4,8x45"),
    Screw(60, "WDS 4,8x60"),
    Screw(80, "WDS 4,8x80"),
)


def table_for(roof_type: RoofType) -> Sequence[InsulationRow]:
    return METAL_TABLE if roof_type is RoofType.METAL else CONCRETE_TABLE


def screws_for(roof_type: RoofType) -> Sequence[Screw]:
    return WDS_48 if roof_type is RoofType.METAL else WDB_63


def check_ascending(rows: Sequence, key: Callable[[object], int]) -> None:
    """Raise ValueError unless ``rows`` is strictly ascending by ``key``."""
    values = [key(r) for r in rows]
    for prev, cur in zip(values, values[1:]):
        if cur <= prev:
            raise ValueError(f"reference table out of order: {cur} after {prev}")


def table_frame(rows: Sequence) -> pd.DataFrame:
    """Return a reference table as a DataFrame for display."""
    return pd.DataFrame([asdict(r) for r in rows])


# first-match lookups depend on this ordering
check_ascending(CONCRETE_TABLE, lambda r: r.insulation)
check_ascending(METAL_TABLE, lambda r: r.insulation)
check_ascending(WDB_63, lambda s: s.length)
check_ascending(WDS_48, lambda s: s.length)
