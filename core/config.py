"""
devsetup configuration - workspace conventions, defaults, and tool settings.

All modules import path constants and fallback values from here. The
workspace layout is fixed by convention; only the tool's own behaviour
(package manager, readiness budget, ...) is configurable through the
environment.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Workspace layout
# ---------------------------------------------------------------------------

APPS_DIR = "apps"
PACKAGES_DIR = "packages"

API_DIR = "api"
WEB_SPA_DIR = "web-spa"
WEB_SSR_DIR = "web-ssr"
OPENAPI_GENERATOR_DIR = "openapi-generator"

# Renamed whenever the manifest exists, detected or not
DOCUMENTATION_DIR = "documentation"
UI_DIR = "ui"

ENV_TEMPLATE = ".env.example"
ENV_TARGET = ".env"
MANIFEST_FILE = "package.json"

# ---------------------------------------------------------------------------
# Recognized keys
# ---------------------------------------------------------------------------

DATABASE_KEYS = (
    "DATABASE_USER",
    "DATABASE_PASSWORD",
    "DATABASE_NAME",
    "DATABASE_HOST",
    "DATABASE_PORT",
)
SMTP_KEYS = ("SMTP_PORT", "SMTP_PORT_WEB")

API_PORT_KEY = "API_PORT"
WEB_SPA_PORT_KEY = "VITE_PORT"
WEB_SSR_PORT_KEY = "PORT"

# ---------------------------------------------------------------------------
# Fallback defaults (used when neither the target nor the template has a value)
# ---------------------------------------------------------------------------

DEFAULT_DATABASE = {
    "DATABASE_USER": "postgres",
    "DATABASE_PASSWORD": "postgres",
    "DATABASE_NAME": "lonestone_test",
    "DATABASE_HOST": "localhost",
    "DATABASE_PORT": "5111",
}
DEFAULT_API_PORT = 3000
DEFAULT_WEB_SPA_PORT = 5173
DEFAULT_WEB_SSR_PORT = 5174
DEFAULT_SMTP_PORT = 1025
DEFAULT_SMTP_PORT_WEB = 1080

LOCALHOST = "localhost"

# ---------------------------------------------------------------------------
# Tool settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """devsetup behaviour, overridable through DEVSETUP_* variables.

    Only the process environment is read. The workspace .env files are the
    data this tool edits, never its own configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEVSETUP_",
        case_sensitive=False,
    )

    # Workspace scripts
    package_manager: str = "pnpm"
    lint_fix_script: str = "lint:fix"
    docker_up_script: str = "docker:up"
    dev_script: str = "dev"
    migrate_filter: str = "api"
    migrate_script: str = "db:migrate:up"

    # Package renaming
    org_scope: str = "@lonestone"
    default_project_name: str = "my-project"

    # Readiness
    readiness_retries: int = Field(default=30, ge=1)
    readiness_interval: float = Field(default=1.0, ge=0)
    db_service: str = "db"

    def migrate_args(self) -> list[str]:
        """Arguments for the package manager that run the API migrations."""
        return [f"--filter={self.migrate_filter}", self.migrate_script]

    def command_line(self, *args: str) -> str:
        """Render a package-manager invocation for guidance messages."""
        return " ".join([self.package_manager, *args])


def get_settings() -> Settings:
    """Return settings instance."""
    return Settings()
