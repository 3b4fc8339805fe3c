"""Integration tests for the Celery configuration."""

import pytest

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _celery_eager(settings):
    """Run tasks synchronously in the test process."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


class TestCeleryConfig:
    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "delivery_orders"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "delivery_orders"

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_invitation_task_is_registered(self):
        from config.celery import app

        app.loader.import_default_modules()
        assert "invitations.send_invitation_email" in app.tasks


class TestInvitationEmailTask:
    def test_eager_run_succeeds(self):
        from modules.invitations.tasks import send_invitation_email

        result = send_invitation_email.delay(
            "new@example.com", "Pizza Roma", "http://localhost:3000/invite/abc"
        )

        assert result.successful()
        assert result.result == {"status": "logged", "email": "new@example.com"}

    def test_direct_call(self):
        from modules.invitations.tasks import send_invitation_email

        output = send_invitation_email("a@example.com", "Shop", "http://x/invite/t")
        assert output["status"] == "logged"
