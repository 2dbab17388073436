import logging
import os
import sys
import typing

import requests
from dotenv import load_dotenv

from action.utils import comment_on_gh_pr, set_output
import plt_deploy.constants as constants
from plt_deploy.client import DeployClient
from plt_deploy.config import ActionConfig
from plt_deploy.deployer import Deployer
from plt_deploy.env import collect_secrets, collect_variables
from plt_deploy.exceptions import DeployActionError
from plt_deploy.github import GitHubClient, get_github_metadata
from plt_deploy.logs import configure_logging

logger = logging.getLogger(__name__)


def run(config: ActionConfig) -> str:
    config.validate()
    event = config.load_event()

    github_client = GitHubClient(
        config.github_token, config.repository, config.github_api_url
    )
    deploy_client = DeployClient(
        config.deploy_service_host, config.workspace_id, config.workspace_key
    )
    try:
        github_metadata = get_github_metadata(github_client, config, event)

        logger.info("Getting environment secrets")
        secrets = collect_secrets(config.environ, config.secret_names)

        logger.info("Getting environment variables")
        variables = collect_variables(config.environ, config.variable_names)

        deployer = Deployer(config, github_metadata, variables, secrets, deploy_client)
        entry_point_url = deployer.deploy()

        if config.is_pull_request:
            comment_on_gh_pr(github_client, event, github_metadata, entry_point_url)

        set_output(config.output_path, constants.APP_URL_OUTPUT, entry_point_url)
        return entry_point_url
    finally:
        deploy_client.close()
        github_client.close()


def main(environ: typing.Optional[typing.Mapping[str, str]] = None) -> int:
    if environ is None:
        load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env"))
        environ = os.environ

    configure_logging(debug=environ.get("RUNNER_DEBUG") == "1")
    config = ActionConfig.from_env(environ)
    logger.debug(f"Running with {config}")

    try:
        run(config)
    except (DeployActionError, requests.RequestException) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
