"""
GitHub REST helpers: metadata describing what is being deployed, and the
single status comment the action keeps on a pull request.
"""
import datetime
import logging
import re
import typing

import requests

import plt_deploy.constants as constants
from plt_deploy.config import ActionConfig
from plt_deploy.exceptions import ConfigurationError, GitHubApiError

logger = logging.getLogger(__name__)

STATUS_COMMENT_PATTERN = re.compile(constants.STATUS_COMMENT_REGEXP)


class GitHubClient:
    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = constants.GITHUB_API_URL,
        session: typing.Optional[requests.Session] = None,
    ):
        self._repo_url = f"{api_url.rstrip('/')}/repos/{repository}"
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": constants.GITHUB_API_VERSION,
                "Accept": "application/vnd.github+json",
            }
        )

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        response = self._session.request(method, url, **kwargs)
        if not response.ok:
            logger.debug(f"GitHub API {method} {url} returned {response.status_code}")
            raise GitHubApiError(
                f"GitHub API request failed: {response.status_code} {response.text}",
                response.status_code,
            )
        return response

    def get_commit(self, ref: str) -> typing.Dict[str, typing.Any]:
        return self._request("GET", f"{self._repo_url}/commits/{ref}").json()

    def get_pull_request(self, number: int) -> typing.Dict[str, typing.Any]:
        return self._request("GET", f"{self._repo_url}/pulls/{number}").json()

    def list_comments(self, issue_number: int) -> typing.List[typing.Dict[str, typing.Any]]:
        comments = []
        url = f"{self._repo_url}/issues/{issue_number}/comments"
        params = {"per_page": 100}
        while url:
            response = self._request("GET", url, params=params)
            comments.extend(response.json())
            # the next link already carries the query string
            url = (response.links or {}).get("next", {}).get("url")
            params = None
        return comments

    def create_comment(self, issue_number: int, body: str) -> typing.Dict[str, typing.Any]:
        return self._request(
            "POST",
            f"{self._repo_url}/issues/{issue_number}/comments",
            json={"body": body},
        ).json()

    def update_comment(self, comment_id: int, body: str) -> typing.Dict[str, typing.Any]:
        return self._request(
            "PATCH",
            f"{self._repo_url}/issues/comments/{comment_id}",
            json={"body": body},
        ).json()

    def upsert_status_comment(self, issue_number: int, body: str) -> None:
        last_comment = find_last_status_comment(self.list_comments(issue_number))
        if last_comment is None:
            self.create_comment(issue_number, body)
            logger.info(f"Posted deployment status comment on #{issue_number}")
        else:
            self.update_comment(last_comment["id"], body)
            logger.info(
                f"Updated deployment status comment {last_comment['id']} on #{issue_number}"
            )

    def close(self):
        self._session.close()


def create_status_comment_body(app_url: str, commit_sha: str, commit_url: str) -> str:
    return "\n".join(
        [
            "**Your application was successfully deployed!** :rocket:",
            f"Application url: {app_url}",
            f"Built from the commit: [{commit_sha[:7]}]({commit_url})",
            constants.STATUS_COMMENT_MARKER,
        ]
    )


def is_status_comment(comment: typing.Dict[str, typing.Any]) -> bool:
    author = (comment.get("user") or {}).get("login")
    if author != constants.BOT_LOGIN:
        return False
    body = comment.get("body") or ""
    return (
        constants.STATUS_COMMENT_MARKER in body
        or STATUS_COMMENT_PATTERN.search(body) is not None
    )


def _updated_at(comment: typing.Dict[str, typing.Any]) -> datetime.datetime:
    value = comment.get("updated_at") or comment.get("created_at") or ""
    try:
        updated_at = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=datetime.timezone.utc)
    return updated_at


def find_last_status_comment(
    comments: typing.Iterable[typing.Dict[str, typing.Any]],
) -> typing.Optional[typing.Dict[str, typing.Any]]:
    status_comments = [comment for comment in comments if is_status_comment(comment)]
    if not status_comments:
        return None
    return max(status_comments, key=_updated_at)


def get_repository_metadata(event: typing.Dict[str, typing.Any]) -> typing.Dict[str, typing.Any]:
    repository = event["repository"]
    return {
        "name": repository["name"],
        "url": repository["html_url"],
        "githubRepoId": repository.get("id"),
    }


def get_branch_metadata(config: ActionConfig) -> typing.Dict[str, typing.Any]:
    return {"name": config.branch_name}


def get_head_commit_ref(config: ActionConfig, event: typing.Dict[str, typing.Any]) -> str:
    pull_request = event.get("pull_request") or {}
    ref = (
        event.get("after")
        or (pull_request.get("head") or {}).get("sha")
        or config.sha
    )
    if not ref:
        raise ConfigurationError("Could not determine the head commit of the event")
    return ref


def get_head_commit_metadata(client: GitHubClient, ref: str) -> typing.Dict[str, typing.Any]:
    commit = client.get_commit(ref)
    # author is null when GitHub cannot map the commit email to an account
    author = commit.get("author") or {}
    stats = commit.get("stats") or {}
    return {
        "sha": commit["sha"],
        "username": author.get("login"),
        "additions": stats.get("additions"),
        "deletions": stats.get("deletions"),
    }


def get_pull_request_number(event: typing.Dict[str, typing.Any]) -> int:
    pull_request = event.get("pull_request")
    if not pull_request:
        raise ConfigurationError("The event payload does not describe a pull request")
    return pull_request["number"]


def get_pull_request_metadata(client: GitHubClient, number: int) -> typing.Dict[str, typing.Any]:
    pull_request = client.get_pull_request(number)
    return {"title": pull_request["title"], "number": pull_request["number"]}


def get_github_metadata(
    client: GitHubClient, config: ActionConfig, event: typing.Dict[str, typing.Any]
) -> typing.Dict[str, typing.Any]:
    metadata = {
        "repository": get_repository_metadata(event),
        "branch": get_branch_metadata(config),
        "commit": get_head_commit_metadata(client, get_head_commit_ref(config, event)),
    }
    if config.is_pull_request:
        metadata["pullRequest"] = get_pull_request_metadata(
            client, get_pull_request_number(event)
        )
    return metadata
