import logging
import os
import tempfile
import typing

import plt_deploy.constants as constants
from plt_deploy.client import DeployClient
from plt_deploy.config import ActionConfig
from plt_deploy.env import EnvVarSet, load_env_file, merge
from plt_deploy.exceptions import ConfigurationError
from plt_deploy.prewarm import make_prewarm_request
from plt_deploy.utils import (
    DeploymentRequest,
    archive_project,
    check_platformatic_dependency,
    find_config_file,
    generate_md5_hash,
    get_application_type,
)

logger = logging.getLogger(__name__)


def get_deployment_label(
    config: ActionConfig, github_metadata: typing.Dict[str, typing.Any]
) -> str:
    if config.is_pull_request:
        return f"github-pr:{github_metadata['pullRequest']['number']}"
    return f"github-branch:{github_metadata['branch']['name']}"


class Deployer:
    def __init__(
        self,
        config: ActionConfig,
        github_metadata: typing.Dict[str, typing.Any],
        variables: EnvVarSet,
        secrets: EnvVarSet,
        client: typing.Optional[DeployClient] = None,
    ):
        self._config = config
        self._github_metadata = github_metadata
        self._variables = variables
        self._secrets = secrets
        self._project_path: typing.Final[str] = config.project_path
        self._client = client or DeployClient(
            config.deploy_service_host, config.workspace_id, config.workspace_key
        )

    def _resolve_config_path(self) -> str:
        config_path = self._config.config_path
        if config_path:
            if not os.path.exists(os.path.join(self._project_path, config_path)):
                raise ConfigurationError("There is no Platformatic config file")
        else:
            config_path = find_config_file(self._project_path)
            if config_path is None:
                raise ConfigurationError(
                    "Could not find Platformatic config file, please specify it in the action input"
                )
        logger.info(f"Found Platformatic config file: {config_path}")
        return config_path

    def _archive_project(self, archive_dir: str) -> bytes:
        archive_path = os.path.join(archive_dir, constants.ARCHIVE_FILE_NAME)
        archive_project(self._project_path, archive_path)
        logger.info("Project has been successfully archived")
        with open(archive_path, "rb") as file:
            return file.read()

    def _get_deployment_variables(self) -> EnvVarSet:
        env_file_path = os.path.join(self._project_path, self._config.env_file_path)
        return merge(load_env_file(env_file_path), self._variables)

    def deploy(self) -> str:
        check_platformatic_dependency(self._project_path)
        config_path = self._resolve_config_path()
        app_type = get_application_type(config_path)

        with tempfile.TemporaryDirectory(prefix="plt-deploy-") as archive_dir:
            bundle = self._archive_project(archive_dir)

        checksum = generate_md5_hash(bundle)
        request = DeploymentRequest(
            app_type=app_type,
            config_path=config_path,
            checksum=checksum,
            size=len(bundle),
            label=get_deployment_label(self._config, self._github_metadata),
            github_metadata=self._github_metadata,
        )

        handle = self._client.create_bundle(request)
        if handle.is_bundle_uploaded:
            logger.info("Bundle has been already uploaded. Skipping upload...")
        else:
            logger.info("Uploading bundle to the cloud...")
            self._client.upload_bundle(handle, bundle, checksum)
            logger.info("Bundle has been successfully uploaded")

        entry_point_url = self._client.create_deployment(
            handle, request.label, self._get_deployment_variables(), self._secrets
        )
        logger.info("Application has been successfully created")
        logger.info(f"Application URL: {entry_point_url}")

        logger.info("Making a prewarm application call...")
        make_prewarm_request(entry_point_url)
        logger.info("Application has been successfully prewarmed")

        return entry_point_url
