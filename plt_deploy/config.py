import os
import typing
from dataclasses import dataclass, field

import plt_deploy.constants as constants
from plt_deploy.env import split_names
from plt_deploy.exceptions import ConfigurationError
from plt_deploy.utils import load_json_file


def _input(environ: typing.Mapping[str, str], name: str) -> str:
    # the runner exposes `with:` inputs as INPUT_<NAME>, upper cased
    return (environ.get(f"INPUT_{name.upper()}") or "").strip()


@dataclass
class ActionConfig:
    event_name: str
    workspace_id: str
    workspace_key: str
    github_token: str
    repository: str
    project_path: str
    config_path: str = ""
    env_file_path: str = ""
    variable_names: typing.List[str] = field(default_factory=list)
    secret_names: typing.List[str] = field(default_factory=list)
    branch_name: str = ""
    sha: str = ""
    event_path: str = ""
    output_path: str = ""
    deploy_service_host: str = ""
    github_api_url: str = ""
    environ: typing.Mapping[str, str] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        self.env_file_path = self.env_file_path or constants.DEFAULT_ENV_FILE
        self.deploy_service_host = (
            self.deploy_service_host or constants.PROD_DEPLOY_SERVICE_HOST
        ).rstrip("/")
        self.github_api_url = (
            self.github_api_url or constants.GITHUB_API_URL
        ).rstrip("/")

    @property
    def is_pull_request(self) -> bool:
        return self.event_name == constants.PULL_REQUEST

    @classmethod
    def from_env(cls, environ: typing.Mapping[str, str]) -> "ActionConfig":
        return cls(
            event_name=environ.get("GITHUB_EVENT_NAME", ""),
            workspace_id=_input(environ, "platformatic_workspace_id"),
            workspace_key=_input(environ, "platformatic_workspace_key"),
            github_token=_input(environ, "github_token"),
            repository=environ.get("GITHUB_REPOSITORY", ""),
            project_path=environ.get("GITHUB_WORKSPACE") or os.getcwd(),
            config_path=_input(environ, "platformatic_config_path"),
            env_file_path=_input(environ, "platformatic_env_path"),
            variable_names=split_names(_input(environ, "variables")),
            secret_names=split_names(_input(environ, "secrets")),
            branch_name=environ.get("GITHUB_HEAD_REF")
            or environ.get("GITHUB_REF_NAME", ""),
            sha=environ.get("GITHUB_SHA", ""),
            event_path=environ.get("GITHUB_EVENT_PATH", ""),
            output_path=environ.get("GITHUB_OUTPUT", ""),
            deploy_service_host=environ.get("DEPLOY_SERVICE_HOST", ""),
            github_api_url=environ.get("GITHUB_API_URL", ""),
            environ=dict(environ),
        )

    def validate(self):
        if self.event_name not in constants.SUPPORTED_EVENTS:
            raise ConfigurationError(
                "The action only works on push and pull_request events"
            )
        if not self.workspace_id:
            raise ConfigurationError("platformatic_workspace_id action param is required")
        if not self.workspace_key:
            raise ConfigurationError("platformatic_workspace_key action param is required")
        if not self.github_token:
            raise ConfigurationError("github_token action param is required")
        if not self.repository:
            raise ConfigurationError("GITHUB_REPOSITORY is not set")

    def load_event(self) -> typing.Dict[str, typing.Any]:
        if not self.event_path:
            raise ConfigurationError("GITHUB_EVENT_PATH is not set")
        return load_json_file(self.event_path)

    def __repr__(self):
        return (
            f"ActionConfig({self.event_name=!r}, {self.repository=!r}, {self.branch_name=!r}, "
            f"{self.project_path=!r}, {self.config_path=!r}, {self.env_file_path=!r}, "
            f"{self.deploy_service_host=!r})"
        )
