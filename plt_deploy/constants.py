PROD_DEPLOY_SERVICE_HOST = "https://plt-production-deploy-service.fly.dev"
GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"

PUSH = "push"
PULL_REQUEST = "pull_request"
SUPPORTED_EVENTS = [PUSH, PULL_REQUEST]

APPLICATION_TYPES = ["service", "db"]
CONFIG_FILE_EXTENSIONS = ["yml", "yaml", "json", "json5", "tml", "toml"]
CONFIG_FILE_NAME = "platformatic"
DEFAULT_ENV_FILE = ".env"
ARCHIVE_FILE_NAME = "project.tar"

# TODO: move PORT and DATABASE_URL to secrets
PLATFORMATIC_VARIABLES = ["PORT", "DATABASE_URL"]
PLATFORMATIC_SECRETS = []
PLATFORMATIC_VARIABLE_PREFIX = "PLT_"

WORKSPACE_ID_HEADER = "x-platformatic-workspace-id"
WORKSPACE_KEY_HEADER = "x-platformatic-api-key"

UPLOAD_REQUEST_TIMEOUT = 60
PREWARM_REQUEST_TIMEOUT = 2 * 60
PREWARM_REQUEST_ATTEMPTS = 5

APP_URL_OUTPUT = "platformatic_app_url"

BOT_LOGIN = "github-actions[bot]"
STATUS_COMMENT_MARKER = "<!-- platformatic-deploy-status -->"
STATUS_COMMENT_REGEXP = (
    r"\*\*Your application was successfully deployed!\*\* :rocket:\n"
    r"Application url: (.*)"
)
