import json
from unittest.mock import MagicMock

import requests

WORKSPACE_ID = "test-workspace-id"
WORKSPACE_KEY = "test-workspace-key"
OWNER = "test-github-user"
REPOSITORY_NAME = "test-repo-name"
COMMIT_SHA = "1234567890abcdef"


def make_response(status_code=200, json_data=None, text="", links=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = json_data
    response.text = text or (json.dumps(json_data) if json_data is not None else "")
    response.links = links or {}
    return response
