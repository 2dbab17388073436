import logging
import typing

import requests

import plt_deploy.constants as constants
from plt_deploy.exceptions import InvalidCredentialsError, RemoteServiceError
from plt_deploy.utils import BundleHandle, DeploymentRequest

logger = logging.getLogger(__name__)


class DeployClient:
    def __init__(
        self,
        deploy_service_host: str,
        workspace_id: str,
        workspace_key: str,
        session: typing.Optional[requests.Session] = None,
    ):
        self._deploy_service_host = deploy_service_host.rstrip("/")
        self._session = session or requests.Session()
        self._workspace_headers = {
            constants.WORKSPACE_ID_HEADER: workspace_id,
            constants.WORKSPACE_KEY_HEADER: workspace_key,
        }

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self._deploy_service_host}{path}"
        try:
            return self._session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.debug(f"{method} {url} failed: {e}")
            raise RemoteServiceError(f"Could not reach the deploy service: {e}")

    def create_bundle(self, request: DeploymentRequest) -> BundleHandle:
        response = self._request(
            "POST",
            "/bundles",
            headers={**self._workspace_headers, "Accept": "application/json"},
            json=request.to_bundle_payload(),
        )
        if response.status_code == 401:
            raise InvalidCredentialsError()
        if response.status_code != 200:
            raise RemoteServiceError(
                f"Could not create a bundle: {response.status_code}",
                response.status_code,
            )

        handle = BundleHandle.from_response(response.json())
        logger.debug(f"Created bundle {handle}")
        return handle

    def upload_bundle(self, handle: BundleHandle, data: bytes, checksum: str) -> None:
        response = self._request(
            "PUT",
            "/upload",
            headers={
                "Content-Type": "application/x-tar",
                "Content-Length": str(len(data)),
                "Content-MD5": checksum,
                "Authorization": f"Bearer {handle.upload_token}",
            },
            data=data,
            timeout=constants.UPLOAD_REQUEST_TIMEOUT,
        )
        if response.status_code != 200:
            raise RemoteServiceError(
                f"Failed to upload code archive: {response.status_code}",
                response.status_code,
            )

    def create_deployment(
        self,
        handle: BundleHandle,
        label: str,
        variables: typing.Dict[str, str],
        secrets: typing.Dict[str, str],
    ) -> str:
        response = self._request(
            "POST",
            "/deployments",
            headers={
                **self._workspace_headers,
                "Accept": "application/json",
                "Authorization": f"Bearer {handle.upload_token}",
            },
            json={"label": label, "variables": variables, "secrets": secrets},
        )
        if response.status_code == 401:
            raise InvalidCredentialsError()
        if response.status_code != 200:
            raise RemoteServiceError(
                f"Could not create a deployment: {response.status_code}",
                response.status_code,
            )
        entry_point_url = response.json().get("entryPointUrl")
        if not entry_point_url:
            raise RemoteServiceError(
                "Deploy service did not return an entry point url",
                response.status_code,
            )
        return entry_point_url

    def close(self):
        self._session.close()
