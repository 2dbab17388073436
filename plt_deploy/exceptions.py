"""Errors raised while deploying an application."""

import typing


class DeployActionError(Exception):
    """Base exception for the deploy action."""

    def __init__(self, message: str, details: typing.Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(DeployActionError):
    """Missing or invalid action input, project layout or trigger event."""


class InvalidCredentialsError(DeployActionError):
    """The deploy service rejected the workspace credentials."""

    def __init__(self):
        super().__init__("Invalid platformatic_workspace_key provided")


class RemoteServiceError(DeployActionError):
    def __init__(self, message: str, status_code: typing.Optional[int] = None):
        super().__init__(message, {"status_code": status_code})
        self.status_code = status_code


class GitHubApiError(RemoteServiceError):
    pass


class PrewarmError(DeployActionError):
    """The deployed application did not answer the prewarm probe."""

    def __init__(
        self,
        message: str,
        status_code: typing.Optional[int] = None,
        body: typing.Optional[str] = None,
    ):
        super().__init__(message, {"status_code": status_code, "body": body})
        self.status_code = status_code
        self.body = body
