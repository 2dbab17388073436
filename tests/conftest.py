import json

import pytest

from plt_deploy.config import ActionConfig
from tests.helper import COMMIT_SHA, OWNER, REPOSITORY_NAME, WORKSPACE_ID, WORKSPACE_KEY


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "repository"
    project.mkdir()
    (project / "platformatic.db.json").write_text('{"server": {"port": 3042}}')
    (project / ".env").write_text(
        "PLT_ENV_VARIABLE1=platformatic_variable1\n"
        "PLT_ENV_VARIABLE2=platformatic_variable2\n"
        "\n"
        "ENV_VARIABLE_1=from-env-file\n"
    )
    (project / "migrations").mkdir()
    (project / "migrations" / "001.do.sql").write_text("CREATE TABLE movies (id INTEGER);")
    return project


@pytest.fixture
def github_event():
    return {
        "after": COMMIT_SHA,
        "pull_request": {"number": 1, "head": {"sha": COMMIT_SHA}},
        "repository": {
            "id": 1234,
            "name": REPOSITORY_NAME,
            "html_url": f"https://github.com/{OWNER}/{REPOSITORY_NAME}",
            "owner": {"login": OWNER},
        },
    }


@pytest.fixture
def environ(tmp_path, project_dir, github_event):
    event_path = tmp_path / "github_event.json"
    event_path.write_text(json.dumps(github_event))
    return {
        "GITHUB_EVENT_NAME": "pull_request",
        "GITHUB_EVENT_PATH": str(event_path),
        "GITHUB_WORKSPACE": str(project_dir),
        "GITHUB_REPOSITORY": f"{OWNER}/{REPOSITORY_NAME}",
        "GITHUB_HEAD_REF": "test",
        "GITHUB_REF_NAME": "1/merge",
        "GITHUB_SHA": COMMIT_SHA,
        "GITHUB_OUTPUT": str(tmp_path / "github_output"),
        "DEPLOY_SERVICE_HOST": "http://localhost:3042",
        "INPUT_PLATFORMATIC_WORKSPACE_ID": WORKSPACE_ID,
        "INPUT_PLATFORMATIC_WORKSPACE_KEY": WORKSPACE_KEY,
        "INPUT_GITHUB_TOKEN": "test",
        "INPUT_VARIABLES": "ENV_VARIABLE_1,ENV_VARIABLE_2",
        "INPUT_SECRETS": "ENV_VARIABLE_3",
        "ENV_VARIABLE_1": "value1",
        "ENV_VARIABLE_2": "value2",
        "ENV_VARIABLE_3": "value3",
        "PLT_ENV_VARIABLE": "value4",
        "IGNORED_ENV_VARIABLE": "ignore",
    }


@pytest.fixture
def action_config(environ):
    return ActionConfig.from_env(environ)


@pytest.fixture
def github_metadata():
    return {
        "repository": {
            "name": REPOSITORY_NAME,
            "url": f"https://github.com/{OWNER}/{REPOSITORY_NAME}",
            "githubRepoId": 1234,
        },
        "branch": {"name": "test"},
        "commit": {"sha": COMMIT_SHA, "username": OWNER, "additions": 1, "deletions": 1},
        "pullRequest": {"title": "Test PR title", "number": 1},
    }
