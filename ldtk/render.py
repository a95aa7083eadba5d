import html
import re
from datetime import datetime
from typing import Optional, Sequence

import pandas as pd
import pytz

from ldtk.engine import ConfigurationInput, Recommendation, effective_old_thickness
from ldtk.settings import STATS_SOURCE, TIMEZONE, EmailTemplate

NO_OLD_LAYERS = "Brak / Nie dotyczy"

MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!<>|~$:])")


def escape_markdown(text: str) -> str:
    """Backslash-escape text shown through st.markdown-based elements."""
    return MARKDOWN_SPECIAL.sub(r"\\\1", text)


# --- Result screen ------------------------------------------------------------

def summary_frame(inp: ConfigurationInput) -> pd.DataFrame:
    old = effective_old_thickness(inp)
    rows = [
        ("Rodzaj dachu", inp.roof_type.label),
        ("Nowa izolacja", f"{inp.new_thickness} mm"),
        ("Stare warstwy", f"{old} mm" if old > 0 else "-"),
        ("Kotwienie", f"{inp.roof_type.anchor_depth} mm"),
    ]
    return pd.DataFrame(rows, columns=["Parametr", "Wartość"])


# --- Email & HTML --------------------------------------------------------------

def recommendations_html(rec: Recommendation) -> str:
    return f"""
<table width="100%" style="border-collapse: collapse; font-family: Arial, sans-serif;">
  <thead>
    <tr style="background-color: #f8f9fa;">
      <th style="border: 1px solid #ddd; padding: 10px; text-align: left;">Tuleja</th>
      <th style="border: 1px solid #ddd; padding: 10px; text-align: left; color: #d32f2f;">Wkręt</th>
      <th style="border: 1px solid #ddd; padding: 10px; text-align: center;">Głębokość kotwienia</th>
    </tr>
  </thead>
  <tbody>
    <tr>
      <td style="border: 1px solid #ddd; padding: 12px; font-weight: bold; font-size: 16px;">{html.escape(rec.tube_name)}</td>
      <td style="border: 1px solid #ddd; padding: 12px; font-weight: bold; color: #d32f2f; font-size: 16px;">{html.escape(rec.screw_name)}</td>
      <td style="border: 1px solid #ddd; padding: 12px; text-align: center;">{rec.anchor_depth} mm</td>
    </tr>
  </tbody>
</table>
"""


DISCLAIMER_HTML = """
<div style="background-color: #e8f5e9; padding: 15px; border-radius: 4px; margin-bottom: 20px; border: 1px solid #c8e6c9;">
  <h4 style="margin: 0 0 10px 0; color: #2e7d32; font-family: Arial, sans-serif;">Potwierdzenie zapoznania się z warunkami korzystania</h4>
  <p style="margin: 0; font-size: 14px; color: #1b5e20; font-family: Arial, sans-serif;">Użytkownik potwierdził, że zapoznał się z następującymi warunkami:</p>
  <ul style="margin: 5px 0 0 0; padding-left: 20px; font-size: 13px; color: #333; font-family: Arial, sans-serif;">
    <li>Konfigurator ma charakter wyłącznie orientacyjny i teoretyczny</li>
    <li>Wynik jest jedynie rekomendacją i nie zastępuje projektu technicznego</li>
    <li>Wymagana jest weryfikacja przez specjalistę zgodnie z KOT i ETA</li>
  </ul>
</div>
"""


def timestamp(now: Optional[datetime] = None) -> str:
    """Local Polish time, e.g. ``05.03.2025, 14:07``."""
    tz = pytz.timezone(TIMEZONE)
    if now is None:
        local = datetime.now(tz)
    elif now.tzinfo is None:
        local = pytz.utc.localize(now).astimezone(tz)
    else:
        local = now.astimezone(tz)
    return local.strftime("%d.%m.%Y, %H:%M")


def template_params(
    email: str,
    inp: ConfigurationInput,
    rec: Recommendation,
    now: Optional[datetime] = None,
) -> dict:
    old = effective_old_thickness(inp)
    return {
        "to_email": email,
        "client_email": email,
        "roofType": inp.roof_type.label,
        "newThickness": inp.new_thickness,
        "oldLayers": f"{old} mm" if old > 0 else NO_OLD_LAYERS,
        "recommendations_html": recommendations_html(rec),
        "disclaimer_html": DISCLAIMER_HTML,
        "timestamp": timestamp(now),
    }


def compose_email_body(params: dict, template: EmailTemplate) -> str:
    return f"""<html>
<head><style>
  body {{ font-family: Arial, sans-serif; color: #333; }}
  .container {{ max-width: 640px; margin: 0 auto; padding: 20px; }}
  h1 {{ color: #dd0000; margin-bottom: 4px; }}
  p.meta {{ margin: 0; font-size: 0.9rem; color: #555; }}
  h2 {{ color: #dd0000; border-bottom: 1px solid #eee; padding-bottom: 5px; margin-top: 20px; }}
  table.params {{ width: 100%; border-collapse: collapse; margin: 10px 0; }}
  table.params td {{ padding: 8px; text-align: left; border-bottom: 1px solid #ddd; }}
  .footer {{ font-size: 10px; color: #666; text-align: center; margin-top: 20px; }}
</style></head>
<body>
  <div class="container">
    <h1>{html.escape(template.heading)}</h1>
    <p class="meta"><strong>Email:</strong> {html.escape(params["client_email"])}</p>

    {params["disclaimer_html"]}

    <h2>Parametry</h2>
    <table class="params">
      <tr><td>Rodzaj dachu:</td><td>{params["roofType"]}</td></tr>
      <tr><td>Nowa izolacja:</td><td>{params["newThickness"]} mm</td></tr>
      <tr><td>Stare warstwy:</td><td>{params["oldLayers"]}</td></tr>
    </table>

    <h2>Rekomendowany zestaw</h2>
    {params["recommendations_html"]}

    <div class="footer">Wygenerowano {params["timestamp"]} ({template.template_id})</div>
  </div>
</body>
</html>"""


# --- Stats ---------------------------------------------------------------------

def stats_payload(email: str, inp: ConfigurationInput, recommendations: Sequence[Recommendation]) -> dict:
    return {
        "source": STATS_SOURCE,
        "substrate": inp.roof_type.label,
        "insulation_type": "Dach",
        "hD": int(inp.new_thickness),
        "adhesive_thickness": effective_old_thickness(inp),
        "recessed_depth": 0,
        "recommendations": [{"name": r.tube_name, "screw": r.screw_name} for r in recommendations],
        "email": email,
    }
