"""
Tests for profile and notification-preference endpoints, plus categories.
"""

from folio.models import NotificationSettings

from conftest import OTHER_ID

PROFILES = "/api/v1/profiles"


class TestProfile:
    def test_read_own_profile(self, client, auth_headers, author_profile):
        response = client.get(f"{PROFILES}/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["full_name"] == "Ada Author"
        assert response.json()["email"] == "author@example.com"

    def test_missing_profile_is_404(self, client, other_headers):
        response = client.get(f"{PROFILES}/me", headers=other_headers)
        assert response.status_code == 404

    def test_first_save_creates_profile_and_default_settings(self, client, other_headers, test_session):
        response = client.put(
            f"{PROFILES}/me",
            json={"full_name": "Otto Other", "email": "otto@example.com"},
            headers=other_headers,
        )

        assert response.status_code == 200
        assert response.json()["id"] == OTHER_ID
        prefs = test_session.get(NotificationSettings, OTHER_ID)
        assert prefs is not None
        assert prefs.email_notifications is True

    def test_update_keeps_email_when_omitted(self, client, auth_headers, author_profile):
        response = client.put(
            f"{PROFILES}/me",
            json={"full_name": "Ada Lovelace", "bio": "Writes about engines"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["full_name"] == "Ada Lovelace"
        assert response.json()["email"] == "author@example.com"

    def test_full_name_required(self, client, auth_headers):
        response = client.put(f"{PROFILES}/me", json={"bio": "no name"}, headers=auth_headers)
        assert response.status_code == 422


class TestNotificationSettings:
    def test_defaults_to_enabled_without_row(self, client, other_headers):
        response = client.get(f"{PROFILES}/me/notifications", headers=other_headers)

        assert response.status_code == 200
        assert response.json()["email_notifications"] is True

    def test_disable(self, client, auth_headers, author_profile, test_session):
        response = client.put(
            f"{PROFILES}/me/notifications",
            json={"email_notifications": False},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["email_notifications"] is False
        test_session.expire_all()
        assert test_session.get(NotificationSettings, author_profile.id).email_notifications is False

    def test_requires_auth(self, client):
        assert client.get(f"{PROFILES}/me/notifications").status_code == 401


class TestCategories:
    def test_list_sorted_by_name(self, client, sample_categories):
        response = client.get("/api/v1/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Python", "Travel"]
