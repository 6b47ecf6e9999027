from __future__ import annotations

import html
import logging
import threading
from typing import Optional

from sqlalchemy.orm import Session

from jackemate.config import settings
from jackemate.crud import user as user_crud
from jackemate.models.catalog import StatusName
from jackemate.models.report import Report
from jackemate.utils.email import is_email_enabled, send_email

logger = logging.getLogger(__name__)


EMAIL_SUBJECT_BY_EVENT = {
    "comment_created": "New comment on your report: {title}",
    "status_changed": "Your report \"{title}\" changed status",
}

STATUS_FOOTNOTES = {
    StatusName.REPAIRED.value: "Thanks for your contribution! Your report helped improve the community.",
    StatusName.REJECTED.value: (
        "Your report did not meet the validation criteria or was marked as "
        "\"does not exist\" by other users."
    ),
}


def report_url(report_id: int) -> str:
    return f"{settings.APP_URL.rstrip('/')}/reportes/{report_id}"


def _send_notification_email(
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str],
    *,
    event_type: str,
    report_id: int,
) -> None:
    """Runs on a background thread so API latency stays low."""
    try:
        message_id = send_email(
            to_email=to_email,
            subject=subject,
            body_text=body_text,
            body_html=body_html,
        )
    except Exception:
        logger.exception("Notification email crashed (event=%s, report_id=%s)", event_type, report_id)
        return
    if message_id is None:
        logger.info("Notification email not sent (event=%s, report_id=%s)", event_type, report_id)
    else:
        logger.info("Notification email sent (event=%s, report_id=%s, message_id=%s)", event_type, report_id, message_id)


def _dispatch(
    db: Session,
    *,
    report: Report,
    event_type: str,
    body_text: str,
    body_html: str,
) -> bool:
    """
    Best-effort delivery to the report author.
    This function never raises and should not impact request success.
    """
    try:
        if not is_email_enabled():
            return False

        to_email = user_crud.get_owner_email(db, report.author_id)
        if not to_email:
            return False

        subject = EMAIL_SUBJECT_BY_EVENT[event_type].format(title=report.title)
        worker = threading.Thread(
            target=_send_notification_email,
            args=(to_email, subject, body_text, body_html),
            kwargs={"event_type": event_type, "report_id": report.id},
            daemon=True,
        )
        worker.start()
        return True
    except Exception as exc:
        logger.warning(
            "Notification email dispatch failed (event=%s, report_id=%s): %s",
            event_type,
            getattr(report, "id", None),
            exc,
        )
        return False


def notify_new_comment(
    db: Session,
    *,
    report: Report,
    commenter_username: Optional[str],
    content: str,
) -> bool:
    owner_name = report.author.username if report.author else "there"
    commenter = commenter_username or "A user"
    body_text = (
        f"Hi {owner_name},\n\n"
        f"{commenter} left a comment on your report \"{report.title}\":\n\n"
        f"{content}\n\n"
        f"View the report: {report_url(report.id)}"
    )
    body_html = (
        f"<p>Hi {html.escape(owner_name)},</p>"
        f"<p><strong>{html.escape(commenter)}</strong> left a comment on your report:</p>"
        f"<h3>{html.escape(report.title)}</h3>"
        f"<blockquote style=\"white-space: pre-wrap;\">{html.escape(content)}</blockquote>"
        f"<p><a href=\"{report_url(report.id)}\">View the full report</a></p>"
    )
    return _dispatch(
        db,
        report=report,
        event_type="comment_created",
        body_text=body_text,
        body_html=body_html,
    )


def notify_status_change(
    db: Session,
    *,
    report: Report,
    new_status: str,
    comment: Optional[str] = None,
) -> bool:
    owner_name = report.author.username if report.author else "there"
    footnote = STATUS_FOOTNOTES.get(new_status, "")
    body_text = (
        f"Hi {owner_name},\n\n"
        f"Your report \"{report.title}\" is now: {new_status}.\n"
        + (f"\nComment: {comment}\n" if comment else "")
        + (f"\n{footnote}\n" if footnote else "")
        + f"\nView the report: {report_url(report.id)}"
    )
    body_html = (
        f"<p>Hi {html.escape(owner_name)},</p>"
        f"<p>Your report <strong>{html.escape(report.title)}</strong> is now "
        f"<strong>{html.escape(new_status)}</strong>.</p>"
        + (f"<p style=\"white-space: pre-wrap;\">Comment: {html.escape(comment)}</p>" if comment else "")
        + (f"<p>{html.escape(footnote)}</p>" if footnote else "")
        + f"<p><a href=\"{report_url(report.id)}\">View report details</a></p>"
    )
    return _dispatch(
        db,
        report=report,
        event_type="status_changed",
        body_text=body_text,
        body_html=body_html,
    )
