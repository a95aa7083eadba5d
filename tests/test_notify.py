import json
import logging
from concurrent.futures import ThreadPoolExecutor

from ldtk import notify
from ldtk.data import RoofType
from ldtk.engine import ConfigurationInput, Recommendation
from ldtk.notify import (
    NotificationSender,
    NotificationSummary,
    ParentWindowStatsReporter,
    SheetStatsReporter,
    SmtpEmailSender,
    notify_all,
)
from ldtk.settings import VARIANTS, SmtpConfig

REC = Recommendation("LDTK 110", "WDB-S 6,3x80", 30)
SUMMARY = NotificationSummary("jan@example.pl", ConfigurationInput(RoofType.CONCRETE, 140), [REC])
SMTP = SmtpConfig("noreply@starfix.eu", "smtp.example.pl", 587, "user", "secret", ["biuro@starfix.eu"])


class Recorder(NotificationSender):
    name = "recorder"

    def __init__(self):
        self.sent = []

    def send(self, summary):
        self.sent.append(summary)


class Broken(NotificationSender):
    name = "broken"

    def send(self, summary):
        raise ConnectionError("provider down")


class FakeSMTP:
    instances = []

    def __init__(self, server, port):
        self.server, self.port = server, port
        self.calls = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def sendmail(self, frm, recipients, body):
        self.calls.append(("sendmail", frm, recipients, body))


def test_failures_are_logged_not_raised(caplog):
    ok = Recorder()
    with caplog.at_level(logging.INFO, logger="ldtk.notify"):
        notify_all(SUMMARY, [Broken(), ok])
    assert ok.sent == [SUMMARY]
    assert "broken notification failed" in caplog.text
    assert "recorder notification sent" in caplog.text


def test_empty_result_sends_nothing():
    ok = Recorder()
    notify_all(NotificationSummary("jan@example.pl", SUMMARY.input, []), [ok])
    assert ok.sent == []


def test_executor_failures_are_logged(caplog):
    ok = Recorder()
    executor = ThreadPoolExecutor(max_workers=1)
    with caplog.at_level(logging.INFO, logger="ldtk.notify"):
        notify_all(SUMMARY, [Broken(), ok], executor=executor)
        executor.shutdown(wait=True)
    assert ok.sent == [SUMMARY]
    assert "broken notification failed" in caplog.text


def test_shut_down_executor_is_tolerated(caplog):
    executor = ThreadPoolExecutor(max_workers=1)
    executor.shutdown()
    notify_all(SUMMARY, [Recorder()], executor=executor)
    assert "could not schedule recorder notification" in caplog.text


def test_smtp_sender(monkeypatch):
    FakeSMTP.instances.clear()
    monkeypatch.setattr(notify.smtplib, "SMTP", FakeSMTP)
    template = VARIANTS["ldtk"].template
    SmtpEmailSender(SMTP, template).send(SUMMARY)

    (server,) = FakeSMTP.instances
    assert (server.server, server.port) == ("smtp.example.pl", 587)
    assert server.calls[0] == "starttls"
    assert server.calls[1] == ("login", "user", "secret")
    _, frm, recipients, body = server.calls[2]
    assert frm == "noreply@starfix.eu"
    assert recipients == ["jan@example.pl", "biuro@starfix.eu"]
    assert "Subject:" in body


def test_smtp_message_headers():
    msg = SmtpEmailSender(SMTP, VARIANTS["ldtk"].template).build_message(SUMMARY)
    assert msg["To"] == "jan@example.pl"
    assert msg["Cc"] == "biuro@starfix.eu"
    assert msg.get_content_subtype() == "alternative"


def test_parent_window_reporter(monkeypatch):
    rendered = []
    monkeypatch.setattr(notify.components, "html", lambda body, height: rendered.append((body, height)))
    ParentWindowStatsReporter().send(SUMMARY)

    (body, height), = rendered
    assert height == 0
    raw = body[body.index("postMessage(") + len("postMessage("):body.rindex(", '*')")]
    message = json.loads(raw)
    assert message["type"] == "SF_STATS"
    assert message["payload"]["hD"] == 140
    assert message["payload"]["recommendations"] == [{"name": "LDTK 110", "screw": "WDB-S 6,3x80"}]


def test_sheet_reporter(monkeypatch):
    appended = []

    class Worksheet:
        def append_row(self, row, value_input_option):
            appended.append(row)

    class Sheet:
        def worksheet(self, tab):
            assert tab == "Stats"
            return Worksheet()

    class Client:
        def open_by_key(self, key):
            assert key == "sheet-id"
            return Sheet()

    monkeypatch.setattr(notify.gspread, "service_account_from_dict", lambda creds: Client())
    SheetStatsReporter("sheet-id", "Stats", {"type": "service_account"}).send(SUMMARY)
    assert appended == [["ldtk", "Betonowy", "Dach", 140, 0, "LDTK 110 + WDB-S 6,3x80", "jan@example.pl"]]



def test_parent_window_script_cannot_be_closed_by_email():
    hostile = "a</script><script>alert(1)</script>@x.pl"
    summary = NotificationSummary(hostile, SUMMARY.input, [REC])
    body = ParentWindowStatsReporter().script(summary)

    assert body.count("</script>") == 1
    assert body.endswith("</script>")
    raw = body[body.index("postMessage(") + len("postMessage("):body.rindex(", '*')")]
    assert json.loads(raw)["payload"]["email"] == hostile
