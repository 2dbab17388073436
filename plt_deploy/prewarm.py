import logging
import typing

import requests

import plt_deploy.constants as constants
from plt_deploy.exceptions import PrewarmError

logger = logging.getLogger(__name__)


def make_prewarm_request(
    app_url: str,
    attempts: int = constants.PREWARM_REQUEST_ATTEMPTS,
    timeout: float = constants.PREWARM_REQUEST_TIMEOUT,
    session: typing.Optional[requests.Session] = None,
) -> None:
    """
    GET the freshly deployed application until it answers with a 2xx.
    Failed attempts are retried immediately, at most ``attempts`` calls are made.
    """
    if attempts < 1:
        raise ValueError(f"attempts should be at least 1, got {attempts}")

    http = session or requests
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            response = http.get(app_url, timeout=timeout)
        except requests.RequestException as e:
            last_error = PrewarmError(f"Could not make a prewarm call: {e}")
        else:
            if 200 <= response.status_code < 300:
                logger.debug(f"Prewarm call succeeded on attempt {attempt}")
                return
            last_error = PrewarmError(
                "Could not make a prewarm call: Request failed with status code: "
                f"{response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        if attempt < attempts:
            logger.warning(f"{last_error.message}, retrying...")

    raise last_error
