"""
Collected configuration and the values derived from it.

The wizard resolves database credentials, ports, and SMTP ports from the
user; everything here is pure string construction on top of those.
plan_env_updates decides which owned keys are written to which env file.
"""

from dataclasses import dataclass

from bootstrap.detect import (
    API_PATH,
    OPENAPI_GENERATOR_PATH,
    ROOT_DIR,
    WEB_SPA_PATH,
    WEB_SSR_PATH,
    AvailableApps,
    target_for,
)
from core.config import API_PORT_KEY, LOCALHOST, WEB_SPA_PORT_KEY, WEB_SSR_PORT_KEY

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseConfig:
    user: str
    password: str
    name: str
    host: str
    port: int

    def summary(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.name}"


@dataclass(frozen=True)
class PortsConfig:
    """Resolved ports, None for subprojects that are absent or unresolved."""

    api: int | None = None
    web_spa: int | None = None
    web_ssr: int | None = None


@dataclass(frozen=True)
class SmtpConfig:
    port: int
    port_web: int


@dataclass(frozen=True)
class EnvConfig:
    """Everything the interactive stages resolved, consumed once at write-back."""

    database: DatabaseConfig
    ports: PortsConfig
    smtp: SmtpConfig


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


def derive_service_url(port: int) -> str:
    """Local URL of a service listening on port."""
    return f"http://{LOCALHOST}:{port}"


def derive_trusted_origins(ports: PortsConfig) -> list[str]:
    """Origins the API must trust: API first, then each frontend."""
    ordered = (ports.api, ports.web_spa, ports.web_ssr)
    return [derive_service_url(port) for port in ordered if port]


def trusted_origins_value(ports: PortsConfig) -> str:
    return ",".join(derive_trusted_origins(ports))


# ---------------------------------------------------------------------------
# Write-back plan
# ---------------------------------------------------------------------------


def plan_env_updates(
    config: EnvConfig, apps: AvailableApps,
) -> list[tuple[str, dict[str, str]]]:
    """Owned keys per env target, in write order.

    Every key listed here is overwritten unconditionally at write-back.
    Keys not listed are never touched.
    """
    db = config.database
    ports = config.ports
    plan: list[tuple[str, dict[str, str]]] = []

    # Root .env feeds docker compose
    plan.append((target_for(ROOT_DIR), {
        "DATABASE_USER": db.user,
        "DATABASE_PASSWORD": db.password,
        "DATABASE_NAME": db.name,
        "DATABASE_HOST": db.host,
        "DATABASE_PORT": str(db.port),
        "SMTP_PORT": str(config.smtp.port),
        "SMTP_PORT_WEB": str(config.smtp.port_web),
    }))

    if apps.api and ports.api:
        updates = {
            API_PORT_KEY: str(ports.api),
            "DATABASE_USER": db.user,
            "DATABASE_PASSWORD": db.password,
            "DATABASE_NAME": db.name,
            "DATABASE_HOST": db.host,
            "DATABASE_PORT": str(db.port),
            "TRUSTED_ORIGINS": trusted_origins_value(ports),
        }
        if ports.web_spa:
            updates["CLIENTS_WEB_APP_URL"] = derive_service_url(ports.web_spa)
        if ports.web_ssr:
            updates["CLIENTS_WEB_SSR_URL"] = derive_service_url(ports.web_ssr)
        plan.append((target_for(API_PATH), updates))

    api_url = derive_service_url(ports.api) if ports.api else None

    if apps.web_spa:
        updates = {}
        if ports.web_spa:
            updates[WEB_SPA_PORT_KEY] = str(ports.web_spa)
        if api_url:
            updates["VITE_API_URL"] = api_url
        plan.append((target_for(WEB_SPA_PATH), updates))

    if apps.web_ssr:
        updates = {}
        if ports.web_ssr:
            updates[WEB_SSR_PORT_KEY] = str(ports.web_ssr)
        if api_url:
            updates["API_URL"] = api_url
        plan.append((target_for(WEB_SSR_PATH), updates))

    if apps.openapi_generator and api_url:
        plan.append((target_for(OPENAPI_GENERATOR_PATH), {"API_URL": api_url}))

    return [(target, updates) for target, updates in plan if updates]
