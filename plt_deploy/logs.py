import logging
import sys

# https://docs.github.com/actions/using-workflows/workflow-commands-for-github-actions
WORKFLOW_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommandFormatter(logging.Formatter):
    """Render records so the runner turns warnings and errors into annotations."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = WORKFLOW_COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"


def configure_logging(debug: bool = False) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(WorkflowCommandFormatter("%(message)s"))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[handler],
    )
    # keep connection pool chatter out of the job log
    logging.getLogger("urllib3").setLevel(logging.WARNING)
