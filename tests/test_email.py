"""
Tests for the email service.

Tests cover:
- Publish notification email content
- Relay errors surfacing as MailRelayError
- Unconfigured mailer
"""

from unittest.mock import patch

import pytest

from folio.services.email import (
    Mailer,
    MailRelayError,
    render_post_published_html,
    render_post_published_text,
)


class TestTemplates:
    def test_plain_text_body(self):
        text = render_post_published_text("Ada", "Engines", "https://blog.test/post/engines-1")

        assert text == (
            "Hello Ada,\n\n"
            'Your post "Engines" has been published successfully!\n\n'
            "View it here: https://blog.test/post/engines-1"
        )

    def test_html_contains_link_and_title(self):
        html = render_post_published_html("Ada", "Engines", "https://blog.test/post/engines-1")

        assert 'href="https://blog.test/post/engines-1"' in html
        assert "Engines" in html

    def test_missing_name_falls_back(self):
        assert render_post_published_text(None, "T", "u").startswith("Hello there,")


class TestMailer:
    @patch("folio.services.email.resend")
    def test_send_post_published(self, mock_resend):
        mock_resend.Emails.send.return_value = {"id": "email_123"}
        mailer = Mailer("re_test_key", "Folio <noreply@blog.test>")

        message_id = mailer.send_post_published("ada@example.com", "Ada", "Engines", "https://blog.test/post/e-1")

        assert message_id == "email_123"
        params = mock_resend.Emails.send.call_args[0][0]
        assert params["to"] == ["ada@example.com"]
        assert params["from"] == "Folio <noreply@blog.test>"
        assert params["subject"] == 'Your post "Engines" has been published!'
        assert "View it here: https://blog.test/post/e-1" in params["text"]
        assert mock_resend.api_key == "re_test_key"

    @patch("folio.services.email.resend")
    def test_relay_error_raises(self, mock_resend):
        mock_resend.Emails.send.side_effect = Exception("API error")
        mailer = Mailer("re_test_key", "noreply@blog.test")

        with pytest.raises(MailRelayError):
            mailer.send("ada@example.com", "Subject", "Body")

    @patch("folio.services.email.resend")
    def test_unconfigured_mailer_raises(self, mock_resend):
        mailer = Mailer("", "noreply@blog.test")

        assert not mailer.configured
        with pytest.raises(MailRelayError):
            mailer.send("ada@example.com", "Subject", "Body")
        mock_resend.Emails.send.assert_not_called()
