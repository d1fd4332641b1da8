"""Unit tests for template context building.

Tests the build_template_context function for:
- Commenter name taken from the caller's email
- Welcome greeting fallback
- Required context keys per email type
"""

import pytest

from support_mailer.notifications.models import CallerIdentity
from support_mailer.notifications.payloads import DEFAULT_FULL_NAME, build_template_context
from support_mailer.notifications.schemas import (
    CommentNotificationRequest,
    PasswordResetRequest,
    WelcomeEmailRequest,
)


@pytest.fixture
def caller():
    return CallerIdentity(email="alice.smith@uni.canberra.edu.au", user_id="user-1")


def test_comment_notification_context(caller):
    request = CommentNotificationRequest(
        recipient="owner@canberra.edu.au",
        ticket_no="42",
        comment="Please check the fume hood",
        ticket_url="https://support.example/tickets/42",
    )

    context = build_template_context(request, caller)

    assert context == {
        "commenter_name": "alice.smith",
        "ticket_no": "42",
        "comment": "Please check the fume hood",
        "ticket_url": "https://support.example/tickets/42",
    }


def test_recipient_is_not_exposed_to_templates(caller):
    request = CommentNotificationRequest(
        recipient="owner@canberra.edu.au",
        ticket_no="42",
        comment="c",
        ticket_url="https://support.example/tickets/42",
    )

    assert "recipient" not in build_template_context(request, caller)


@pytest.mark.parametrize(
    "full_name,expected",
    [("Dana Whitlam", "Dana Whitlam"), (None, DEFAULT_FULL_NAME), ("", DEFAULT_FULL_NAME)],
)
def test_welcome_email_context(caller, full_name, expected):
    request = WelcomeEmailRequest(to="new.user@canberra.edu.au", full_name=full_name)

    assert build_template_context(request, caller) == {"full_name": expected}


def test_password_reset_context(caller):
    request = PasswordResetRequest(to="bob@canberra.edu.au", reset_link="https://x/reset?t=abc")

    assert build_template_context(request, caller) == {"reset_link": "https://x/reset?t=abc"}
