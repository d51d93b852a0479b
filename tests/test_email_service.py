import datetime as dt

import pytest
import requests

from ensport_backend.core.errors import NotificationError, ValidationError
from ensport_backend.models.match_model import Match, MatchStatus, Winner
from ensport_backend.services import email_service
from ensport_backend.services.email_service import ResendEmailClient


@pytest.fixture
def post(mocker):
    response = mocker.Mock()
    response.json.return_value = {"id": "email-1"}
    response.raise_for_status.return_value = None
    return mocker.patch("ensport_backend.services.email_service.requests.post", return_value=response)


def resend_client():
    return ResendEmailClient(api_key="re_test", from_email="alerts@kku.example", api_url="https://mail.example/emails")


def make_match(**overrides):
    values = dict(
        id="m1", sport_type="Football", team1="Engineering", team2="Science <b>",
        date=dt.date(2025, 12, 26), time_start="09:00", time_end="10:00",
        location="KKU Main Stadium", maps_link="https://maps.example/kku", status=MatchStatus.SCHEDULED,
    )
    values.update(overrides)
    return Match(**values)


def test_single_recipient_goes_in_to(post):
    ids = resend_client().send(["fan@kku.ac.th"], "Hello", "<p>hi</p>")

    assert ids == ["email-1"]
    _, kwargs = post.call_args
    assert kwargs["json"] == {
        "from": "alerts@kku.example", "subject": "Hello", "html": "<p>hi</p>", "to": ["fan@kku.ac.th"],
    }
    assert kwargs["headers"] == {"Authorization": "Bearer re_test"}


def test_many_recipients_are_blind_copied_in_batches(post):
    recipients = [f"fan{i}@kku.ac.th" for i in range(120)]

    resend_client().send(recipients, "Reminder", "<p>tomorrow</p>")

    payloads = [call.kwargs["json"] for call in post.call_args_list]
    assert [len(p["bcc"]) for p in payloads] == [50, 50, 20]
    assert all(p["to"] == ["alerts@kku.example"] for p in payloads)
    assert [a for p in payloads for a in p["bcc"]] == recipients


def test_missing_api_key_raises(post):
    with pytest.raises(NotificationError):
        ResendEmailClient(api_key="").send(["fan@kku.ac.th"], "Hello", "<p>hi</p>")
    post.assert_not_called()


def test_provider_error_raises_notification_error(post):
    post.side_effect = requests.ConnectionError("boom")
    with pytest.raises(NotificationError):
        resend_client().send(["fan@kku.ac.th"], "Hello", "<p>hi</p>")


def test_no_recipients_sends_nothing(post):
    assert resend_client().send([], "Hello", "<p>hi</p>") == []
    post.assert_not_called()


def test_reminder_email_content():
    message = email_service.build_24hour_reminder(make_match())

    assert "Engineering" in message["subject"]
    assert "26 Dec 2025" in message["html"]
    assert "09:00" in message["html"] and "10:00" in message["html"]
    assert "https://maps.example/kku" in message["html"]
    assert "Science &lt;b&gt;" in message["html"]


def test_result_email_content():
    message = email_service.build_match_result(
        make_match(status=MatchStatus.COMPLETED, home_score=85, away_score=78, winner=Winner.TEAM1)
    )
    assert message["subject"].startswith("Result: Engineering 85 - 78")
    assert "85" in message["html"] and "78" in message["html"]


def test_winner_label():
    assert email_service.winner_label(make_match(winner=Winner.TEAM2)) == "Science <b>"
    assert email_service.winner_label(make_match(winner=Winner.DRAW)) == "Draw"
    assert email_service.winner_label(make_match()) == ""


def test_welcome_and_upcoming_match_emails():
    assert email_service.build_welcome_email()["subject"] == "Welcome to EN Sport Alerts!"
    upcoming = email_service.build_match_notification(make_match())
    assert "coming up soon" in upcoming["subject"]
    assert "KKU Main Stadium" in upcoming["html"]


def test_failed_batch_reports_recipients_already_reached(post):
    post.side_effect = [post.return_value, requests.ConnectionError("boom")]
    recipients = [f"fan{i}@kku.ac.th" for i in range(60)]

    with pytest.raises(NotificationError) as excinfo:
        resend_client().send(recipients, "Reminder", "<p>tomorrow</p>")

    assert excinfo.value.delivered == 50


def test_reply_without_json_still_counts_as_sent(post):
    post.return_value.json.side_effect = ValueError("Expecting value")

    assert resend_client().send(["fan@kku.ac.th"], "Hello", "<p>hi</p>") == [None]


def test_sample_emails():
    result = email_service.build_sample_email("match-result")
    assert result["subject"] == "Result: Team A 85 - 78 Team B (Basketball)"
    assert "coming up soon" in email_service.build_sample_email("match-notification")["subject"]
    with pytest.raises(ValidationError):
        email_service.build_sample_email("newsletter")
