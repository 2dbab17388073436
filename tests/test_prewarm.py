import logging
from unittest.mock import MagicMock

import pytest
import requests

from plt_deploy.exceptions import PrewarmError
from plt_deploy.prewarm import make_prewarm_request
from tests.helper import make_response

APP_URL = "https://name-name-name-name.deploy.space"


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


def test_prewarm_passes_on_first_try(session):
    # Given
    session.get.return_value = make_response(200, {})

    # When
    make_prewarm_request(APP_URL, session=session)

    # Then
    session.get.assert_called_once_with(APP_URL, timeout=120)


@pytest.mark.parametrize("failures", [1, 2, 4])
def test_prewarm_passes_after_failures(session, failures, caplog):
    # Given
    caplog.set_level(logging.WARNING)
    session.get.side_effect = [make_response(500, {})] * failures + [make_response(200, {})]

    # When
    make_prewarm_request(APP_URL, session=session)

    # Then
    assert session.get.call_count == failures + 1
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == failures
    assert warnings[0].getMessage().endswith("retrying...")


def test_prewarm_accepts_any_2xx(session):
    session.get.return_value = make_response(204)
    make_prewarm_request(APP_URL, session=session)
    assert session.get.call_count == 1


def test_prewarm_retries_transport_errors(session):
    # Given
    session.get.side_effect = [
        requests.ConnectionError("connection refused"),
        requests.Timeout("read timed out"),
        make_response(200),
    ]

    # When
    make_prewarm_request(APP_URL, session=session)

    # Then
    assert session.get.call_count == 3


def test_prewarm_fails_when_all_attempts_fail(session):
    # Given
    session.get.side_effect = [make_response(502, text="Bad gateway")] * 4 + [
        make_response(500, {"message": "Error"})
    ]

    # When / Then
    with pytest.raises(PrewarmError) as exc_info:
        make_prewarm_request(APP_URL, session=session)

    assert session.get.call_count == 5
    assert exc_info.value.status_code == 500
    assert exc_info.value.body == '{"message": "Error"}'
    assert str(exc_info.value) == (
        "Could not make a prewarm call: Request failed with status code: 500 "
        '{"message": "Error"}'
    )


def test_prewarm_surfaces_last_transport_error(session):
    # Given
    session.get.side_effect = requests.ConnectionError("connection refused")

    # When / Then
    with pytest.raises(PrewarmError, match="connection refused") as exc_info:
        make_prewarm_request(APP_URL, attempts=3, session=session)

    assert session.get.call_count == 3
    assert exc_info.value.status_code is None


def test_prewarm_no_warning_after_last_attempt(session, caplog):
    caplog.set_level(logging.WARNING)
    session.get.return_value = make_response(500)

    with pytest.raises(PrewarmError):
        make_prewarm_request(APP_URL, attempts=1, session=session)

    assert not [r for r in caplog.records if r.levelno == logging.WARNING]


def test_prewarm_rejects_empty_budget(session):
    with pytest.raises(ValueError):
        make_prewarm_request(APP_URL, attempts=0, session=session)
    session.get.assert_not_called()
