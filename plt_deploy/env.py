"""Environment variables forwarded to the deployed application.

Variables reach the application from two places: the project's dotenv file
and the workflow environment of the action run. Only names on an allow-list
(reserved platform names, names listed in the action inputs, or names under
the platform prefix) leave the runner, so CI-internal secrets are never
forwarded by accident.
"""
import logging
import os
import typing

import plt_deploy.constants as constants

logger = logging.getLogger(__name__)

EnvVarSet = typing.Dict[str, str]


def normalize_name(name: str) -> str:
    return name.strip().upper()


def split_names(param: typing.Optional[str]) -> typing.List[str]:
    """Turn a comma separated action input into a list of variable names."""
    if not param:
        return []
    return [name.strip() for name in param.split(",") if name.strip()]


def _collect(
    environ: typing.Mapping[str, str],
    names: typing.Iterable[str],
    reserved: typing.Iterable[str],
    prefix: typing.Optional[str] = None,
) -> EnvVarSet:
    allowed = {normalize_name(name) for name in names}
    allowed.update(reserved)

    collected = {}
    for key, value in environ.items():
        name = normalize_name(key)
        if name in allowed or (prefix and name.startswith(prefix)):
            collected[name] = value
    return collected


def collect_variables(
    environ: typing.Mapping[str, str], names: typing.Iterable[str]
) -> EnvVarSet:
    return _collect(
        environ,
        names,
        constants.PLATFORMATIC_VARIABLES,
        constants.PLATFORMATIC_VARIABLE_PREFIX,
    )


def collect_secrets(
    environ: typing.Mapping[str, str], names: typing.Iterable[str]
) -> EnvVarSet:
    return _collect(environ, names, constants.PLATFORMATIC_SECRETS)


def merge(*sources: typing.Mapping[str, str]) -> EnvVarSet:
    """Shallow merge of variable sets, the rightmost source wins."""
    merged = {}
    for source in sources:
        for key, value in source.items():
            merged[normalize_name(key)] = value
    return merged


def serialize(env: typing.Mapping[str, str]) -> str:
    return "".join(f"{key}={value}\n" for key, value in env.items())


def parse(text: str) -> EnvVarSet:
    """Read `KEY=VALUE` lines, values are kept verbatim after the first `=`."""
    variables = {}
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if not line.strip():
            continue
        key, _, value = line.partition("=")
        variables[normalize_name(key)] = value
    return variables


def load_env_file(env_file_path: str) -> EnvVarSet:
    if not os.path.exists(env_file_path):
        logger.debug(f"No env file found at {env_file_path}")
        return {}

    with open(env_file_path, encoding="utf-8") as file:
        variables = parse(file.read())
    logger.info(f"Loaded {len(variables)} variables from {env_file_path}")
    return variables
