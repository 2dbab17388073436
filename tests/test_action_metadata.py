import pathlib

import pytest
import yaml

from plt_deploy import constants

ACTION_FILE = pathlib.Path(__file__).parent.parent / "action.yml"


@pytest.fixture
def action_metadata():
    with open(ACTION_FILE) as file:
        return yaml.safe_load(file)


def test_action_inputs_are_forwarded(action_metadata):
    deploy_step = next(
        step for step in action_metadata["runs"]["steps"] if step.get("id") == "deploy"
    )

    for name in action_metadata["inputs"]:
        assert deploy_step["env"][f"INPUT_{name.upper()}"] == f"${{{{ inputs.{name} }}}}"


def test_action_exposes_app_url_output(action_metadata):
    assert constants.APP_URL_OUTPUT in action_metadata["outputs"]
