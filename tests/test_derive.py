"""Tests for bootstrap.derive - derived URLs and the write-back plan."""

from bootstrap.derive import (
    DatabaseConfig,
    EnvConfig,
    PortsConfig,
    SmtpConfig,
    derive_service_url,
    derive_trusted_origins,
    plan_env_updates,
    trusted_origins_value,
)
from bootstrap.detect import AvailableApps


def _make_config(api: int | None = 3000, web_spa: int | None = None, web_ssr: int | None = None) -> EnvConfig:
    return EnvConfig(
        database=DatabaseConfig(
            user="postgres", password="secret", name="app_db", host="localhost", port=5111,
        ),
        ports=PortsConfig(api=api, web_spa=web_spa, web_ssr=web_ssr),
        smtp=SmtpConfig(port=1025, port_web=1080),
    )


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


class TestDerivedValues:
    def test_service_url(self) -> None:
        assert derive_service_url(3000) == "http://localhost:3000"

    def test_trusted_origins_backend_first(self) -> None:
        ports = PortsConfig(api=3000, web_spa=5173)
        assert trusted_origins_value(ports) == "http://localhost:3000,http://localhost:5173"

    def test_trusted_origins_fixed_order(self) -> None:
        ports = PortsConfig(api=3000, web_spa=5173, web_ssr=5174)
        assert derive_trusted_origins(ports) == [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://localhost:5174",
        ]

    def test_trusted_origins_skip_unresolved(self) -> None:
        assert derive_trusted_origins(PortsConfig(web_ssr=5174)) == ["http://localhost:5174"]
        assert trusted_origins_value(PortsConfig()) == ""

    def test_database_summary(self) -> None:
        assert _make_config().database.summary() == "postgres@localhost:5111/app_db"


# ---------------------------------------------------------------------------
# Write-back plan
# ---------------------------------------------------------------------------


class TestPlanEnvUpdates:
    """Which owned keys land in which env file."""

    def test_root_only(self) -> None:
        plan = plan_env_updates(_make_config(api=None), AvailableApps())
        assert plan == [(".env", {
            "DATABASE_USER": "postgres",
            "DATABASE_PASSWORD": "secret",
            "DATABASE_NAME": "app_db",
            "DATABASE_HOST": "localhost",
            "DATABASE_PORT": "5111",
            "SMTP_PORT": "1025",
            "SMTP_PORT_WEB": "1080",
        })]

    def test_root_never_gets_app_keys(self) -> None:
        root_updates = dict(plan_env_updates(_make_config(), AvailableApps(api=True)))[".env"]
        assert "API_PORT" not in root_updates
        assert "TRUSTED_ORIGINS" not in root_updates

    def test_api_gets_database_ports_and_origins(self) -> None:
        apps = AvailableApps(api=True, web_spa=True)
        plan = dict(plan_env_updates(_make_config(api=3000, web_spa=5173), apps))

        api = plan["apps/api/.env"]
        assert api["API_PORT"] == "3000"
        assert api["DATABASE_HOST"] == "localhost"
        assert api["DATABASE_PASSWORD"] == "secret"
        assert api["TRUSTED_ORIGINS"] == "http://localhost:3000,http://localhost:5173"
        assert api["CLIENTS_WEB_APP_URL"] == "http://localhost:5173"
        assert "CLIENTS_WEB_SSR_URL" not in api

    def test_frontends_get_api_url_and_own_port(self) -> None:
        apps = AvailableApps(api=True, web_spa=True, web_ssr=True)
        plan = dict(plan_env_updates(_make_config(api=4000, web_spa=5173, web_ssr=5174), apps))

        assert plan["apps/web-spa/.env"] == {
            "VITE_PORT": "5173",
            "VITE_API_URL": "http://localhost:4000",
        }
        assert plan["apps/web-ssr/.env"] == {
            "PORT": "5174",
            "API_URL": "http://localhost:4000",
        }
        assert plan["apps/api/.env"]["CLIENTS_WEB_SSR_URL"] == "http://localhost:5174"

    def test_openapi_generator_needs_api_port(self) -> None:
        apps = AvailableApps(api=True, openapi_generator=True)
        plan = dict(plan_env_updates(_make_config(api=3000), apps))
        assert plan["packages/openapi-generator/.env"] == {"API_URL": "http://localhost:3000"}

        plan = dict(plan_env_updates(_make_config(api=None), AvailableApps(openapi_generator=True)))
        assert "packages/openapi-generator/.env" not in plan

    def test_frontend_without_api(self) -> None:
        apps = AvailableApps(web_spa=True)
        plan = dict(plan_env_updates(_make_config(api=None, web_spa=5173), apps))
        assert plan["apps/web-spa/.env"] == {"VITE_PORT": "5173"}
        assert "apps/api/.env" not in plan

    def test_undetected_apps_are_not_written(self) -> None:
        plan = dict(plan_env_updates(_make_config(api=3000, web_spa=5173), AvailableApps()))
        assert list(plan) == [".env"]

    def test_write_order(self) -> None:
        apps = AvailableApps(api=True, web_spa=True, web_ssr=True, openapi_generator=True)
        config = _make_config(api=3000, web_spa=5173, web_ssr=5174)
        targets = [target for target, _ in plan_env_updates(config, apps)]
        assert targets == [
            ".env",
            "apps/api/.env",
            "apps/web-spa/.env",
            "apps/web-ssr/.env",
            "packages/openapi-generator/.env",
        ]
