import logging
import os
from dataclasses import dataclass, field

import streamlit as st

logger = logging.getLogger(__name__)

# --- Product constants ---
TUBE_PREFIX = "LDTK"
NO_SCREW = "Brak wkrętu (wymagany dłuższy niż w ofercie)"

MAX_NEW_THICKNESS = 880
NEW_THICKNESS_STEP = 10
MAX_OLD_THICKNESS = 100
OLD_THICKNESS_STEP = 10

TIMEZONE = "Europe/Warsaw"
STATS_SOURCE = "ldtk"
STATS_MESSAGE_TYPE = "SF_STATS"


@dataclass(frozen=True)
class EmailTemplate:
    service_id: str
    template_id: str
    subject: str
    heading: str


@dataclass(frozen=True)
class Variant:
    key: str
    title: str
    min_new_thickness: int
    template: EmailTemplate


# Both variants were deployed side by side; they differ only in the floor and
# in the mail template they point at.
VARIANTS = {
    "ldtk": Variant(
        key="ldtk",
        title="LDTK • Konfigurator 2025",
        min_new_thickness=40,
        template=EmailTemplate(
            service_id="service_wl8dg9a",
            template_id="template_7lxbqqx",
            subject="LDTK – Twoja konfiguracja",
            heading="Konfigurator LDTK – wynik doboru",
        ),
    ),
    "ldtk-50": Variant(
        key="ldtk-50",
        title="LDTK • Konfigurator",
        min_new_thickness=50,
        template=EmailTemplate(
            service_id="service_wl8dg9a",
            template_id="template_ldtk_50",
            subject="LDTK – wynik konfiguratora",
            heading="Wynik doboru łączników LDTK",
        ),
    ),
}
DEFAULT_VARIANT = "ldtk"


# --- Secrets & environment ---

def safe_get_secret(key: str, required: bool = False, default: str | None = None) -> str | None:
    """Read a value from Streamlit secrets, then the environment."""
    try:
        val = st.secrets.get(key)
    except Exception:
        # no secrets.toml, or not running under streamlit
        val = None
    if val is None or val == "":
        val = os.environ.get(key, default)
    if required and not val:
        logger.warning("Missing required secret: %s", key)
    return val


def parse_email_list(s: str | None) -> list[str]:
    if not s:
        return []
    parts = [p.strip() for p in s.replace(";", ",").split(",")]
    return [p for p in parts if p]


def configure_logging() -> None:
    level = (safe_get_secret("LOG_LEVEL", default="INFO") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_variant() -> Variant:
    key = safe_get_secret("LDTK_VARIANT", default=DEFAULT_VARIANT) or DEFAULT_VARIANT
    if key not in VARIANTS:
        logger.warning("Unknown LDTK_VARIANT %r, using %r", key, DEFAULT_VARIANT)
        key = DEFAULT_VARIANT
    return VARIANTS[key]


@dataclass(frozen=True)
class SmtpConfig:
    sender: str
    server: str
    port: int
    user: str
    password: str
    cc: list[str] = field(default_factory=list)


def load_smtp_config() -> SmtpConfig | None:
    """Return the SMTP settings, or None when email delivery is not configured."""
    frm = safe_get_secret("SENDER_FROM_EMAIL")
    server = safe_get_secret("SMTP_SERVER")
    user = safe_get_secret("EMAIL_USER")
    password = safe_get_secret("EMAIL_PASSWORD")
    if not (frm and server and user and password):
        logger.info("SMTP not configured, email notifications disabled")
        return None
    try:
        port = int(safe_get_secret("SMTP_PORT") or 587)
    except ValueError:
        logger.warning("Invalid SMTP_PORT, using 587")
        port = 587
    return SmtpConfig(
        sender=frm,
        server=server,
        port=port,
        user=user,
        password=password,
        cc=parse_email_list(safe_get_secret("QUOTE_TRACKING_CC_EMAIL")),
    )


def load_stats_sheet() -> tuple[str, str] | None:
    """Spreadsheet id and tab for the stats log, if one is configured."""
    spreadsheet_id = safe_get_secret("STATS_SPREADSHEET_ID")
    if not spreadsheet_id:
        return None
    return spreadsheet_id, safe_get_secret("STATS_TAB", default="Stats") or "Stats"
