"""devsetup - development environment setup wizard.

Takes a freshly cloned workspace to a runnable local environment: detects
which subprojects exist, asks only for env values that are still missing,
writes the answers (and the URLs derived from them) into every .env file,
and optionally starts the docker stack and runs the API migrations.

Usage: devsetup  (run in the workspace root)
"""

import logging
import shutil
from pathlib import Path
from typing import Iterable

from bootstrap.derive import (
    DatabaseConfig,
    EnvConfig,
    PortsConfig,
    SmtpConfig,
    derive_service_url,
    plan_env_updates,
)
from bootstrap.detect import (
    API_PATH,
    ROOT_DIR,
    WEB_SPA_PATH,
    WEB_SSR_PATH,
    AvailableApps,
    TemplatePairStatus,
    detect_available_apps,
    snapshot_env_files,
    target_for,
    template_pairs,
)
from bootstrap.rename import rename_packages
from cli.prompts import PromptAborted, Prompter
from core.config import (
    API_PORT_KEY,
    DATABASE_KEYS,
    DEFAULT_API_PORT,
    DEFAULT_DATABASE,
    DEFAULT_SMTP_PORT,
    DEFAULT_SMTP_PORT_WEB,
    DEFAULT_WEB_SPA_PORT,
    DEFAULT_WEB_SSR_PORT,
    SMTP_KEYS,
    WEB_SPA_PORT_KEY,
    WEB_SSR_PORT_KEY,
    Settings,
)
from core.console import (
    colorize,
    print_error,
    print_header,
    print_status,
    print_step,
    print_warning,
)
from core.env_file import parse_env_file, write_merged
from core.process import ProcessError, run_command
from core.readiness import command_probe, wait_ready

log = logging.getLogger("devsetup.wizard")

EnvStatuses = dict[str, TemplatePairStatus]


# ---------------------------------------------------------------------------
# Value resolution
# ---------------------------------------------------------------------------


class _PairValues:
    """Existing and template values of one env pair, plus its missing keys."""

    def __init__(self, workspace: Path, status: TemplatePairStatus) -> None:
        self.missing = status.missing_keys
        self.existing = parse_env_file(workspace / status.pair.target)
        self.template = parse_env_file(workspace / status.pair.template)

    def needs_any(self, keys: Iterable[str]) -> bool:
        return any(key in self.missing for key in keys)

    def resolve(self, prompter: Prompter, key: str, label: str, fallback: str) -> str:
        """Ask for key if it is missing, otherwise reuse the existing value."""
        if key in self.missing:
            default = self.existing.get(key) or self.template.get(key) or fallback
            return prompter.ask_text(label, default)
        return self.existing.get(key) or fallback


def _to_port(value: str, fallback: int) -> int:
    try:
        return int(value) or fallback
    except ValueError:
        return fallback


# ---------------------------------------------------------------------------
# Prompt stages
# ---------------------------------------------------------------------------


def prompt_database_config(
    workspace: Path, statuses: EnvStatuses, prompter: Prompter,
) -> DatabaseConfig:
    values = _PairValues(workspace, statuses[target_for(ROOT_DIR)])

    print_header("📊 Database Configuration")
    if not values.needs_any(DATABASE_KEYS):
        print_status("Database variables already configured")
    else:
        print()

    labels = {
        "DATABASE_USER": "Database user",
        "DATABASE_PASSWORD": "Database password",
        "DATABASE_NAME": "Database name",
        "DATABASE_HOST": "Database host",
        "DATABASE_PORT": "Database port",
    }
    resolved = {
        key: values.resolve(prompter, key, labels[key], DEFAULT_DATABASE[key])
        for key in DATABASE_KEYS
    }
    default_port = int(DEFAULT_DATABASE["DATABASE_PORT"])

    return DatabaseConfig(
        user=resolved["DATABASE_USER"],
        password=resolved["DATABASE_PASSWORD"],
        name=resolved["DATABASE_NAME"],
        host=resolved["DATABASE_HOST"],
        port=_to_port(resolved["DATABASE_PORT"], default_port),
    )


def prompt_ports_config(
    workspace: Path, apps: AvailableApps, statuses: EnvStatuses, prompter: Prompter,
) -> PortsConfig:
    # (field, env dir, key, label, fallback, detected)
    candidates = [
        ("api", API_PATH, API_PORT_KEY, "API port", DEFAULT_API_PORT, apps.api),
        ("web_spa", WEB_SPA_PATH, WEB_SPA_PORT_KEY, "Web SPA port", DEFAULT_WEB_SPA_PORT, apps.web_spa),
        ("web_ssr", WEB_SSR_PATH, WEB_SSR_PORT_KEY, "Web SSR port", DEFAULT_WEB_SSR_PORT, apps.web_ssr),
    ]
    detected = [
        (name, _PairValues(workspace, statuses[target_for(path)]), key, label, fallback)
        for name, path, key, label, fallback, present in candidates
        if present
    ]

    print_header("🔌 Application Ports Configuration")
    if not any(values.needs_any([key]) for _, values, key, _, _ in detected):
        print_status("Ports already configured")
    else:
        print()

    ports: dict[str, int] = {}
    for name, values, key, label, fallback in detected:
        answer = values.resolve(prompter, key, label, str(fallback))
        ports[name] = _to_port(answer, fallback)

    return PortsConfig(**ports)


def prompt_smtp_config(
    workspace: Path, statuses: EnvStatuses, prompter: Prompter,
) -> SmtpConfig:
    values = _PairValues(workspace, statuses[target_for(ROOT_DIR)])

    print_header("📧 SMTP Configuration (MailDev)")
    if not values.needs_any(SMTP_KEYS):
        print_status("SMTP variables already configured")
    else:
        print()

    port = values.resolve(prompter, "SMTP_PORT", "SMTP port", str(DEFAULT_SMTP_PORT))
    port_web = values.resolve(
        prompter, "SMTP_PORT_WEB", "MailDev web port", str(DEFAULT_SMTP_PORT_WEB),
    )
    return SmtpConfig(
        port=_to_port(port, DEFAULT_SMTP_PORT),
        port_web=_to_port(port_web, DEFAULT_SMTP_PORT_WEB),
    )


# ---------------------------------------------------------------------------
# File stages
# ---------------------------------------------------------------------------


def rename_workspace(
    workspace: Path, project_name: str, apps: AvailableApps, settings: Settings,
) -> None:
    """Rename package manifests, then run the lint auto-fix (best effort)."""
    print_header("📦 Renaming project packages")
    print()

    for path in rename_packages(workspace, project_name, apps, settings.org_scope):
        print_status(f"Updated {colorize(path, 'dim')}")

    print()
    print_status(f"All project packages renamed to {colorize(f'@{project_name}/*', 'bright')}")

    print()
    print_step("Running linter with auto-fix...")
    try:
        run_command(settings.package_manager, [settings.lint_fix_script], workspace)
        print_status("Linting completed")
    except ProcessError as e:
        log.debug("Lint auto-fix failed: %s", e)
        print_warning("Linting failed, but continuing setup")


def copy_env_files(workspace: Path, statuses: Iterable[TemplatePairStatus]) -> list[str]:
    """Seed absent targets from their templates. Returns the copied targets.

    Existing targets are only reported; they are updated in place later.
    """
    print_header("📋 Checking .env files")
    print()

    copied = []
    for status in statuses:
        template, target = status.pair.template, status.pair.target

        if status.target_exists:
            if status.missing_keys:
                missing = ", ".join(status.missing_keys)
                print_warning(
                    f"{colorize(target, 'dim')} exists but missing variables: "
                    f"{colorize(missing, 'yellow')}"
                )
            else:
                print_status(f"{colorize(target, 'dim')} exists and is complete")
            continue

        template_path = workspace / template
        if template_path.exists():
            shutil.copy2(template_path, workspace / target)
            copied.append(target)
            print_status(f"Copied {colorize(template, 'dim')} → {colorize(target, 'dim')}")
        else:
            print_warning(f"File not found: {colorize(template, 'dim')}")

    return copied


def update_all_env_files(workspace: Path, config: EnvConfig, apps: AvailableApps) -> list[str]:
    """Write owned and derived keys into every target. Returns changed targets."""
    print_header("✏️  Updating .env files")
    print()

    changed = []
    for target, updates in plan_env_updates(config, apps):
        path = workspace / target
        if not path.exists():
            print_warning(f"File not found: {colorize(target, 'dim')}")
            continue
        if write_merged(path, updates, overwrite_existing=True):
            changed.append(target)

    print_status("Configuration values have been updated in .env files")
    return changed


# ---------------------------------------------------------------------------
# Docker stack and migrations
# ---------------------------------------------------------------------------


def _bright(text: str) -> str:
    return colorize(text, "bright")


def run_migrations(
    workspace: Path, settings: Settings, prompter: Prompter, db_ready: bool,
) -> None:
    migrate_cmd = settings.command_line(*settings.migrate_args())

    if not db_ready:
        print_step(f"Database not ready. Run migrations manually with: {_bright(migrate_cmd)}")
        return

    print_header("🗄️  Database Migrations")
    if not prompter.ask_yes_no("Run database migrations?"):
        print_step(f"Skipped migrations. Run manually with: {_bright(migrate_cmd)}")
        return

    try:
        run_command(settings.package_manager, settings.migrate_args(), workspace)
        print()
        print_status("Migrations completed successfully")
    except ProcessError as e:
        print()
        print_warning(f"Migration failed: {e}")
        print(f"  {colorize('You can run migrations manually later with:', 'dim')} {_bright(migrate_cmd)}")


def start_dependency_stack(
    workspace: Path,
    config: EnvConfig,
    apps: AvailableApps,
    settings: Settings,
    prompter: Prompter,
) -> bool:
    """Optionally start docker services, wait for the database, migrate.

    Returns True if the docker services were started.
    """
    docker_cmd = settings.command_line(settings.docker_up_script)
    migrate_cmd = settings.command_line(*settings.migrate_args())

    print_header("🐳 Docker Services")
    if not prompter.ask_yes_no("Start Docker services (database, maildev)?"):
        print_step(f"Skipped Docker. Start manually with: {_bright(docker_cmd)}")
        if apps.api:
            print_step(f"Migrations skipped (requires Docker). Run with: {_bright(migrate_cmd)}")
        return False

    try:
        run_command(settings.package_manager, [settings.docker_up_script], workspace)
    except ProcessError as e:
        print()
        print_warning(f"Failed to start Docker: {e}")
        print(f"  {colorize('You can start Docker manually with:', 'dim')} {_bright(docker_cmd)}")
        return False

    print()
    print_status("Docker services started")

    print(f"  {colorize('⏳', 'yellow')} Waiting for database to be ready...")
    probe = command_probe(
        ["docker", "compose", "exec", "-T", settings.db_service,
         "pg_isready", "-U", config.database.user],
        workspace,
    )
    db_ready = wait_ready(probe, settings.readiness_retries, settings.readiness_interval)
    if db_ready:
        print_status("Database is ready!")
    else:
        print_warning(f"Database not ready after {settings.readiness_retries} attempts")

    if apps.api:
        run_migrations(workspace, settings, prompter, db_ready)
    return True


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def _report_detected(apps: AvailableApps) -> None:
    print(colorize("📦 Detected Applications:", "cyan"))
    for name in apps.display_names():
        print_status(_bright(name))


def print_summary(config: EnvConfig) -> None:
    print(f"\n{colorize('✅ Setup completed successfully!', 'green')}")
    print_header("📝 Configuration Summary:")
    print(f"  {_bright('Database:')} {colorize(config.database.summary(), 'dim')}")

    services = [
        ("API:", config.ports.api),
        ("Web SPA:", config.ports.web_spa),
        ("Web SSR:", config.ports.web_ssr),
    ]
    for label, port in services:
        if port:
            print(f"  {_bright(label)} {colorize(derive_service_url(port), 'blue')}")

    smtp = config.smtp
    print(
        f"  {_bright('SMTP:')} {colorize(f'localhost:{smtp.port}', 'dim')} "
        f"{colorize(f'(Web: {smtp.port_web})', 'dim')}"
    )


def print_next_steps(apps: AvailableApps, settings: Settings, stack_started: bool) -> None:
    print(f"\n{colorize('🎉 Setup complete!', 'green')}")
    print_header("Next steps:")

    steps = []
    if not stack_started:
        steps.append(("Start Docker services", settings.command_line(settings.docker_up_script)))
        if apps.api:
            steps.append(("Run migrations", settings.command_line(*settings.migrate_args())))
    steps.append(("Start development", settings.command_line(settings.dev_script)))

    for number, (label, command) in enumerate(steps, start=1):
        print(f"  {_bright(f'{number}.')} {label}: {colorize(command, 'blue')}")
    print()


# ---------------------------------------------------------------------------
# Wizard
# ---------------------------------------------------------------------------


def run_setup(workspace: Path, settings: Settings, prompter: Prompter | None = None) -> int:
    """Run the setup wizard. Returns 0 on success, 1 on failure."""
    try:
        return _run_setup_impl(workspace, settings, prompter or Prompter())
    except KeyboardInterrupt:
        print()
        print_error("Setup cancelled.")
        return 1
    except PromptAborted:
        print_error("No terminal input available. Run devsetup in an interactive terminal.")
        return 1
    except (OSError, ValueError) as e:
        log.debug("Setup aborted", exc_info=True)
        print_error(f"Error during setup: {e}")
        return 1


def _run_setup_impl(workspace: Path, settings: Settings, prompter: Prompter) -> int:
    """Implementation of the setup wizard."""
    print(f"\n{_bright('🚀 Development Environment Setup')}\n")

    apps = detect_available_apps(workspace)
    _report_detected(apps)

    # Snapshot before anything is copied, so fresh copies don't hide missing keys
    statuses = snapshot_env_files(workspace, template_pairs(apps))

    print()
    project_name = prompter.ask_text("Project name", settings.default_project_name)
    rename_workspace(workspace, project_name, apps, settings)

    config = EnvConfig(
        database=prompt_database_config(workspace, statuses, prompter),
        ports=prompt_ports_config(workspace, apps, statuses, prompter),
        smtp=prompt_smtp_config(workspace, statuses, prompter),
    )

    copy_env_files(workspace, statuses.values())
    update_all_env_files(workspace, config, apps)
    print_summary(config)

    stack_started = start_dependency_stack(workspace, config, apps, settings, prompter)
    print_next_steps(apps, settings, stack_started)
    return 0
