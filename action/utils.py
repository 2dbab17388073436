import logging
import typing

from plt_deploy.github import GitHubClient, create_status_comment_body, get_pull_request_number

logger = logging.getLogger(__name__)


def set_output(output_path: str, name: str, value: str) -> None:
    if not output_path:
        logger.warning(f"GITHUB_OUTPUT is not set, could not set {name} output")
        return
    with open(output_path, "a", encoding="utf-8") as file:
        file.write(f"{name}={value}\n")


def comment_on_gh_pr(
    github_client: GitHubClient,
    event: typing.Dict[str, typing.Any],
    github_metadata: typing.Dict[str, typing.Any],
    app_url: str,
) -> None:
    commit_sha = github_metadata["commit"]["sha"]
    commit_url = f"{github_metadata['repository']['url']}/commit/{commit_sha}"
    comment = create_status_comment_body(app_url, commit_sha, commit_url)
    github_client.upsert_status_comment(get_pull_request_number(event), comment)
