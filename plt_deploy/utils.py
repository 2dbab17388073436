import base64
import hashlib
import json
import logging
import os
import tarfile
import typing
from dataclasses import dataclass, field

import plt_deploy.constants as constants
from plt_deploy.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeploymentRequest:
    app_type: str
    config_path: str
    checksum: str
    size: int
    label: str
    github_metadata: typing.Dict[str, typing.Any] = field(default_factory=dict)

    def to_bundle_payload(self) -> typing.Dict[str, typing.Any]:
        return {
            **self.github_metadata,
            "bundle": {
                "appType": self.app_type,
                "configPath": self.config_path,
                "checksum": self.checksum,
                "size": self.size,
            },
        }


@dataclass(frozen=True)
class BundleHandle:
    bundle_id: str
    upload_token: str
    is_bundle_uploaded: bool = False

    @classmethod
    def from_response(cls, data: typing.Dict[str, typing.Any]) -> "BundleHandle":
        return cls(
            bundle_id=data.get("id") or data.get("bundleId"),
            upload_token=data.get("token") or data.get("uploadToken"),
            is_bundle_uploaded=bool(data.get("isBundleUploaded", False)),
        )

    def __repr__(self):
        # the upload token is a credential, keep it out of logs
        return (
            f"BundleHandle(bundle_id={self.bundle_id!r}, "
            f"is_bundle_uploaded={self.is_bundle_uploaded!r})"
        )


def generate_md5_hash(data: bytes) -> str:
    return base64.b64encode(hashlib.md5(data).digest()).decode("ascii")


def load_json_file(filename: str):
    try:
        with open(filename, encoding="utf-8") as file:
            return json.load(file)
    except FileNotFoundError as e:
        logger.debug(f"File not found: {filename}. Error: {str(e)}")
        raise ConfigurationError(f"File not found: {filename}")
    except json.JSONDecodeError as e:
        logger.debug(f"Error parsing JSON file: {filename}. Error: {str(e)}")
        raise ConfigurationError(f"Error parsing JSON file: {filename}")


def find_config_file(project_dir: str) -> typing.Optional[str]:
    for filename in sorted(os.listdir(project_dir)):
        parts = filename.split(".")
        if len(parts) != 3:
            continue
        name, app_type, ext = parts
        if (
            name == constants.CONFIG_FILE_NAME
            and app_type in constants.APPLICATION_TYPES
            and ext in constants.CONFIG_FILE_EXTENSIONS
        ):
            return filename
    return None


def get_application_type(config_path: str) -> str:
    parts = os.path.basename(config_path).split(".")
    app_type = parts[-2] if len(parts) >= 2 else ""
    if app_type not in constants.APPLICATION_TYPES:
        raise ConfigurationError(
            f"Invalid application type: {app_type}, must be one of: "
            f"{', '.join(constants.APPLICATION_TYPES)}"
        )
    return app_type


def check_platformatic_dependency(project_dir: str) -> None:
    package_json_path = os.path.join(project_dir, "package.json")
    if not os.path.exists(package_json_path):
        return

    package_json = load_json_file(package_json_path)
    dependencies = package_json.get("dependencies") or {}
    if "platformatic" in dependencies:
        logger.warning(
            "Move platformatic dependency to devDependencies to speed up deployment"
        )


def _reset_tar_info(tar_info: tarfile.TarInfo) -> tarfile.TarInfo:
    tar_info.uid = tar_info.gid = 0
    tar_info.uname = tar_info.gname = ""
    return tar_info


def archive_project(project_dir: str, archive_path: str) -> None:
    """
    Write an uncompressed tar snapshot of the whole project directory.
    Entries are added in sorted order with owner info stripped so the same tree
    gives the same checksum on different runners.
    """
    with tarfile.open(archive_path, "w") as archive:
        archive.add(project_dir, arcname=".", recursive=False, filter=_reset_tar_info)
        for root, dirs, files in os.walk(project_dir):
            dirs.sort()
            rel_root = os.path.relpath(root, project_dir)
            for name in dirs + sorted(files):
                path = os.path.join(root, name)
                arcname = os.path.normpath(os.path.join(".", rel_root, name))
                archive.add(
                    path,
                    arcname=f"./{arcname}",
                    recursive=False,
                    filter=_reset_tar_info,
                )
