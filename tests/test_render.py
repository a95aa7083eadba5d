from datetime import datetime

import pytz

from ldtk.data import RoofType
from ldtk.engine import ConfigurationInput, Recommendation
from ldtk.render import (
    DISCLAIMER_HTML,
    NO_OLD_LAYERS,
    compose_email_body,
    escape_markdown,
    recommendations_html,
    stats_payload,
    summary_frame,
    template_params,
    timestamp,
)
from ldtk.settings import VARIANTS

REC = Recommendation("LDTK 110", "WDB-S 6,3x120", 30)
NOW = datetime(2025, 3, 5, 13, 7, tzinfo=pytz.utc)


def test_timestamp_is_warsaw_local():
    assert timestamp(NOW) == "05.03.2025, 14:07"
    # naive datetimes are taken as UTC; summer time is +2
    assert timestamp(datetime(2025, 7, 1, 10, 0)) == "01.07.2025, 12:00"


def test_template_params_with_old_layers():
    inp = ConfigurationInput(RoofType.CONCRETE, 140, True, 30)
    params = template_params("jan@example.pl", inp, REC, now=NOW)
    assert params["to_email"] == params["client_email"] == "jan@example.pl"
    assert params["roofType"] == "Betonowy"
    assert params["newThickness"] == 140
    assert params["oldLayers"] == "30 mm"
    assert params["disclaimer_html"] == DISCLAIMER_HTML
    assert "LDTK 110" in params["recommendations_html"]
    assert params["timestamp"] == "05.03.2025, 14:07"


def test_template_params_metal_has_no_old_layers():
    inp = ConfigurationInput(RoofType.METAL, 600, True, 80)
    params = template_params("jan@example.pl", inp, REC, now=NOW)
    assert params["roofType"] == "Stalowy"
    assert params["oldLayers"] == NO_OLD_LAYERS


def test_recommendations_html_escapes():
    html = recommendations_html(Recommendation("LDTK 50", "<b>x</b>", 14))
    assert "&lt;b&gt;x&lt;/b&gt;" in html
    assert "14 mm" in html


def test_compose_email_body_uses_template():
    template = VARIANTS["ldtk-50"].template
    inp = ConfigurationInput(RoofType.CONCRETE, 140)
    body = compose_email_body(template_params("jan@example.pl", inp, REC, now=NOW), template)
    assert template.heading in body
    assert template.template_id in body
    assert "WDB-S 6,3x120" in body
    assert NO_OLD_LAYERS in body


def test_summary_frame():
    df = summary_frame(ConfigurationInput(RoofType.METAL, 200, True, 50))
    values = dict(zip(df["Parametr"], df["Wartość"]))
    assert values == {
        "Rodzaj dachu": "Stalowy",
        "Nowa izolacja": "200 mm",
        "Stare warstwy": "-",
        "Kotwienie": "14 mm",
    }


def test_stats_payload():
    inp = ConfigurationInput(RoofType.CONCRETE, 140, True, 30)
    payload = stats_payload("jan@example.pl", inp, [REC])
    assert payload == {
        "source": "ldtk",
        "substrate": "Betonowy",
        "insulation_type": "Dach",
        "hD": 140,
        "adhesive_thickness": 30,
        "recessed_depth": 0,
        "recommendations": [{"name": "LDTK 110", "screw": "WDB-S 6,3x120"}],
        "email": "jan@example.pl",
    }


def test_escape_markdown():
    assert escape_markdown("jan@example.pl") == r"jan@example\.pl"
    assert escape_markdown("*a*_b_[c](d)") == r"\*a\*\_b\_\[c\]\(d\)"
    assert escape_markdown(r"x\y") == r"x\\y"
