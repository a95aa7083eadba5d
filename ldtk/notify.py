"""Outbound notifications sent after a successful calculation.

Every sender is best effort: failures are logged and never reach the user or
the displayed result.
"""
import json
import logging
import smtplib
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Iterable, Optional, Sequence

import gspread
import streamlit.components.v1 as components

from ldtk.engine import ConfigurationInput, Recommendation
from ldtk.render import compose_email_body, stats_payload, template_params
from ldtk.settings import STATS_MESSAGE_TYPE, EmailTemplate, SmtpConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationSummary:
    email: str
    input: ConfigurationInput
    recommendations: Sequence[Recommendation]


class NotificationSender(ABC):
    name = "sender"

    @abstractmethod
    def send(self, summary: NotificationSummary) -> None:
        ...


class SmtpEmailSender(NotificationSender):
    name = "email"

    def __init__(self, config: SmtpConfig, template: EmailTemplate):
        self.config = config
        self.template = template

    def build_message(self, summary: NotificationSummary) -> MIMEMultipart:
        params = template_params(summary.email, summary.input, summary.recommendations[0])
        msg = MIMEMultipart("alternative")
        msg["Subject"] = self.template.subject
        msg["From"] = self.config.sender
        msg["To"] = summary.email
        if self.config.cc:
            msg["Cc"] = ", ".join(self.config.cc)
        msg.attach(MIMEText(compose_email_body(params, self.template), "html"))
        return msg

    def send(self, summary: NotificationSummary) -> None:
        msg = self.build_message(summary)
        recipients = [summary.email] + list(self.config.cc)
        with smtplib.SMTP(self.config.server, self.config.port) as server:
            server.starttls()
            server.login(self.config.user, self.config.password)
            server.sendmail(self.config.sender, recipients, msg.as_string())


class ParentWindowStatsReporter(NotificationSender):
    """Post the stats payload to the page embedding the app.

    Must run in the Streamlit script thread, it renders a hidden component.
    """
    name = "stats"

    def script(self, summary: NotificationSummary) -> str:
        message = {
            "type": STATS_MESSAGE_TYPE,
            "payload": stats_payload(summary.email, summary.input, summary.recommendations),
        }
        # keep user text from closing the script element
        payload = json.dumps(message).replace("</", "<\\/")
        # component iframe -> app page -> embedding page
        return (
            "<script>"
            f"window.parent.parent.postMessage({payload}, '*');"
            "</script>"
        )

    def send(self, summary: NotificationSummary) -> None:
        components.html(self.script(summary), height=0)


class SheetStatsReporter(NotificationSender):
    """Append one stats row per calculation to a Google Sheet."""
    name = "stats-sheet"

    def __init__(self, spreadsheet_id: str, tab_name: str, credentials: dict):
        self.spreadsheet_id = spreadsheet_id
        self.tab_name = tab_name
        self.credentials = credentials

    def row(self, summary: NotificationSummary) -> list:
        p = stats_payload(summary.email, summary.input, summary.recommendations)
        recs = "; ".join(f"{r['name']} + {r['screw']}" for r in p["recommendations"])
        return [p["source"], p["substrate"], p["insulation_type"], p["hD"], p["adhesive_thickness"], recs, p["email"]]

    def send(self, summary: NotificationSummary) -> None:
        gc = gspread.service_account_from_dict(self.credentials)
        ws = gc.open_by_key(self.spreadsheet_id).worksheet(self.tab_name)
        ws.append_row(self.row(summary), value_input_option="USER_ENTERED")


def _log_result(sender: NotificationSender, future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("%s notification failed", sender.name, exc_info=exc)
    else:
        logger.info("%s notification sent", sender.name)


def _send_quietly(sender: NotificationSender, summary: NotificationSummary) -> None:
    try:
        sender.send(summary)
    except Exception:
        logger.exception("%s notification failed", sender.name)
    else:
        logger.info("%s notification sent", sender.name)


def notify_all(
    summary: NotificationSummary,
    senders: Iterable[NotificationSender],
    executor: Optional[Executor] = None,
) -> None:
    """Fire every sender; never raises and never waits on an executor."""
    if not summary.recommendations:
        return
    for sender in senders:
        if executor is None:
            _send_quietly(sender, summary)
            continue
        try:
            future = executor.submit(sender.send, summary)
        except RuntimeError:
            logger.exception("could not schedule %s notification", sender.name)
            continue
        future.add_done_callback(lambda f, s=sender: _log_result(s, f))
