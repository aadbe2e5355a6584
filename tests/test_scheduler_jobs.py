from unittest.mock import MagicMock, patch

from descomplicar.scheduler.jobs import run_expiration_triggers


class TestRunExpirationTriggers:
    @patch("descomplicar.scheduler.jobs.ExpirationTriggerService")
    @patch("descomplicar.scheduler.jobs.get_sync_session")
    def test_runs_service(self, mock_get_session, mock_service_cls):
        session = MagicMock()
        mock_get_session.return_value.__enter__ = MagicMock(return_value=session)
        mock_get_session.return_value.__exit__ = MagicMock(return_value=False)
        mock_service_cls.return_value.run.return_value = {"sent": 2}

        assert run_expiration_triggers() == {"sent": 2}
        mock_service_cls.assert_called_once_with(session)

    @patch("descomplicar.scheduler.jobs.ExpirationTriggerService")
    @patch("descomplicar.scheduler.jobs.get_sync_session")
    def test_failure_is_logged_not_raised(self, mock_get_session, mock_service_cls):
        mock_get_session.return_value.__enter__ = MagicMock(return_value=MagicMock())
        mock_get_session.return_value.__exit__ = MagicMock(return_value=False)
        mock_service_cls.return_value.run.side_effect = RuntimeError("database is locked")

        assert run_expiration_triggers() is None

    @patch("descomplicar.scheduler.jobs.get_sync_session")
    def test_session_failure_is_logged(self, mock_get_session):
        mock_get_session.side_effect = RuntimeError("cannot connect")
        assert run_expiration_triggers() is None
