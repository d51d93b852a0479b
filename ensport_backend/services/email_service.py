# ensport_backend/services/email_service.py
# Transactional email over the Resend REST API, with Jinja2 HTML templates

import datetime as dt
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from jinja2 import Environment, FileSystemLoader, select_autoescape

from ensport_backend.core.config import (
    RESEND_API_KEY, RESEND_API_URL, FROM_EMAIL, HTTP_TIMEOUT_SECONDS, SITE_NAME
)
from ensport_backend.core.errors import NotificationError, ValidationError
from ensport_backend.models.match_model import Match, MatchStatus, Winner

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"
templates = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)

# Resend accepts at most 50 addresses per message
MAX_RECIPIENTS_PER_MESSAGE = 50


class ResendEmailClient:
    """Client for the Resend email API."""

    def __init__(self, api_key: str = RESEND_API_KEY, from_email: str = FROM_EMAIL,
                 api_url: str = RESEND_API_URL, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.from_email = from_email
        self.api_url = api_url
        self.timeout = timeout

    def send(self, to: List[str], subject: str, html: str) -> List[Optional[str]]:
        """
        Send one HTML email to every address in `to` and return the provider message ids.

        Recipients are blind-copied in batches so subscribers never see each other.
        Raises NotificationError on any failure, carrying how many recipients were
        already reached by earlier batches.
        """
        if not self.api_key:
            raise NotificationError("RESEND_API_KEY not set. Please set it in your .env file.")
        if not to:
            return []

        message_ids = []
        delivered = 0
        for i in range(0, len(to), MAX_RECIPIENTS_PER_MESSAGE):
            batch = to[i:i + MAX_RECIPIENTS_PER_MESSAGE]
            payload = {"from": self.from_email, "subject": subject, "html": html}
            if len(to) == 1:
                payload["to"] = batch
            else:
                payload["to"] = [self.from_email]
                payload["bcc"] = batch

            logger.debug("Sending '%s' to %d recipients", subject, len(batch))
            try:
                response = requests.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    timeout=self.timeout,
                )
                response.raise_for_status()
            except requests.RequestException as e:
                raise NotificationError(
                    f"Email provider rejected '{subject}': {e}", delivered=delivered
                ) from e
            delivered += len(batch)

            try:
                message_ids.append(response.json().get("id"))
            except ValueError:
                logger.warning("Email provider accepted '%s' but returned no message id", subject)
                message_ids.append(None)

        return message_ids


_default_client: Optional[ResendEmailClient] = None


def get_mailer() -> ResendEmailClient:
    """FastAPI dependency (overridden in tests)."""
    global _default_client
    if _default_client is None:
        _default_client = ResendEmailClient()
    return _default_client


# -------------------------------
# Message builders
# -------------------------------

def render_template(name: str, **context: Any) -> str:
    return templates.get_template(name).render(site_name=SITE_NAME, **context)


def match_details(match: Match) -> Dict[str, Any]:
    """Fields shared by every match email."""
    return {
        "sport_type": match.sport_type,
        "team1": match.team1,
        "team2": match.team2,
        "date": match.date.strftime("%d %b %Y"),
        "time_start": match.time_start or "",
        "time_end": match.time_end or "",
        "location": match.location,
        "maps_link": match.maps_link,
    }


def winner_label(match: Match) -> str:
    if match.winner is None:
        return ""
    winner = Winner(match.winner)
    if winner == Winner.TEAM1:
        return match.team1
    if winner == Winner.TEAM2:
        return match.team2
    return "Draw"


def build_welcome_email() -> Dict[str, str]:
    return {
        "subject": f"Welcome to {SITE_NAME}!",
        "html": render_template("welcome.html"),
    }


def build_match_notification(match: Match) -> Dict[str, str]:
    return {
        "subject": f"{match.sport_type}: {match.team1} vs {match.team2} is coming up soon!",
        "html": render_template("match_notification.html", match=match_details(match)),
    }


def build_24hour_reminder(match: Match) -> Dict[str, str]:
    return {
        "subject": f"Reminder: {match.sport_type} match tomorrow, {match.team1} vs {match.team2}",
        "html": render_template("reminder_24h.html", match=match_details(match)),
    }


def build_match_result(match: Match) -> Dict[str, str]:
    details = match_details(match)
    details.update({
        "home_score": match.home_score,
        "away_score": match.away_score,
        "winner": winner_label(match),
        "is_draw": match.winner is not None and Winner(match.winner) == Winner.DRAW,
    })
    return {
        "subject": f"Result: {match.team1} {match.home_score} - {match.away_score} {match.team2} ({match.sport_type})",
        "html": render_template("match_result.html", match=details),
    }


# -------------------------------
# Sample emails (admin email check)
# -------------------------------

def sample_match() -> Match:
    """Unsaved match used to render the sample emails."""
    return Match(
        id="sample",
        sport_type="Basketball",
        team1="Team A",
        team2="Team B",
        date=dt.date(2025, 5, 12),
        time_start="11:00",
        time_end="13:00",
        location="KKU Sports Complex",
        maps_link="https://maps.google.com",
        status=MatchStatus.COMPLETED,
        home_score=85,
        away_score=78,
        winner=Winner.TEAM1,
    )


SAMPLE_BUILDERS = {
    "welcome": build_welcome_email,
    "match-notification": lambda: build_match_notification(sample_match()),
    "24hour-reminder": lambda: build_24hour_reminder(sample_match()),
    "match-result": lambda: build_match_result(sample_match()),
}


def build_sample_email(email_type: Optional[str]) -> Dict[str, str]:
    builder = SAMPLE_BUILDERS.get(email_type or "")
    if builder is None:
        raise ValidationError(f"email_type must be one of: {', '.join(SAMPLE_BUILDERS)}")
    return builder()
