"""Config commands for glacierctl."""

from __future__ import annotations

from typing import Optional

import click

from glacierctl.core.config import CONFIG_FILE, DEFAULT_TIMEOUT, Config
from glacierctl.core.exceptions import ValidationError
from glacierctl.core.output import (
    OutputFormat,
    print_error,
    print_key_value,
    print_output,
    print_success,
)
from glacierctl.core.validation import (
    validate_endpoint_url,
    validate_part_size_mb,
    validate_region,
    validate_timeout,
    validate_vault_name,
)


def _validated_settings(
    region: str,
    endpoint_url: Optional[str],
    vault: Optional[str],
    part_size: int,
    timeout: int = DEFAULT_TIMEOUT,
) -> dict:
    """Validate profile settings, exiting with an error message on failure."""
    try:
        return {
            "region": validate_region(region),
            "endpoint_url": validate_endpoint_url(endpoint_url) if endpoint_url else None,
            "default_vault": validate_vault_name(vault) if vault else None,
            "part_size_mb": validate_part_size_mb(part_size),
            "timeout": validate_timeout(timeout),
        }
    except ValidationError as e:
        print_error(str(e))
        raise SystemExit(1)


@click.group()
def config() -> None:
    """Manage glacierctl configuration."""
    pass


@config.command("init")
@click.option("--region", prompt="Region", default="us-east-1", help="Service region")
@click.option("--profile", default="default", help="Profile name")
@click.option("--vault-name", "vault", default=None, help="Default vault")
@click.option("--part-size", type=int, default=1, help="Default part size in MiB")
@click.option("--endpoint-url", default=None, help="Custom service endpoint")
@click.option("--force", is_flag=True, help="Overwrite existing profile")
def config_init(
    region: str,
    profile: str,
    vault: Optional[str],
    part_size: int,
    endpoint_url: Optional[str],
    force: bool,
) -> None:
    """Create configuration file with a new profile.

    Example:
        glacierctl config init --region eu-central-1 --vault-name backups
    """
    settings = _validated_settings(region, endpoint_url, vault, part_size)

    if CONFIG_FILE.exists():
        cfg = Config.load()
        if cfg.has_profile(profile) and not force:
            print_error(f"Profile '{profile}' already exists. Use --force to overwrite.")
            raise SystemExit(1)
    else:
        cfg = Config()

    cfg.add_profile(profile, **settings)

    if len(cfg.profiles) == 1:
        cfg.default_profile = profile

    cfg.save()

    print_success(f"Configuration saved to {CONFIG_FILE}")
    print_key_value({"profile": profile, **settings})


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table")
def config_show(output: str) -> None:
    """Show current configuration."""
    try:
        cfg = Config.load()
    except Exception as e:
        print_error(f"Failed to load config: {e}")
        raise SystemExit(1)

    if not cfg.profiles:
        print_error("No configuration found. Run 'glacierctl config init' first.")
        raise SystemExit(1)

    data = {
        "config_file": str(CONFIG_FILE),
        "default_profile": cfg.default_profile,
        "output_format": cfg.output_format,
        "profiles": list(cfg.profiles.keys()),
    }

    if output == "json":
        data["profile_details"] = {name: p.to_dict() for name, p in cfg.profiles.items()}
        print_output(data, format=OutputFormat.JSON)
        return

    print_key_value(data, title="Configuration")
    click.echo()
    for name, profile in cfg.profiles.items():
        marker = " (default)" if name == cfg.default_profile else ""
        click.echo(f"Profile: {name}{marker}")
        print_key_value(
            {
                "region": profile.region,
                "endpoint": profile.url,
                "default_vault": profile.default_vault or "-",
                "part_size": f"{profile.part_size_mb} MiB",
                "timeout": f"{profile.timeout}s",
            },
        )
        click.echo()


@config.command("use-context")
@click.argument("profile")
def config_use_context(profile: str) -> None:
    """Switch the active profile.

    Example:
        glacierctl config use-context archive-eu
    """
    cfg = Config.load()

    if not cfg.has_profile(profile):
        print_error(f"Profile '{profile}' not found.")
        click.echo(f"Available profiles: {', '.join(cfg.profiles.keys())}")
        raise SystemExit(1)

    cfg.set_default_profile(profile)
    cfg.save()

    print_success(f"Switched to profile '{profile}'")


@config.command("current-context")
def config_current_context() -> None:
    """Show the current active profile."""
    cfg = Config.load()

    if not cfg.profiles:
        print_error("No configuration found.")
        raise SystemExit(1)

    click.echo(cfg.default_profile)


@config.command("add-profile")
@click.argument("name")
@click.option("--region", required=True, help="Service region")
@click.option("--vault-name", "vault", default=None, help="Default vault")
@click.option("--part-size", type=int, default=1, help="Default part size in MiB")
@click.option("--endpoint-url", default=None, help="Custom service endpoint")
@click.option("--timeout", type=int, default=DEFAULT_TIMEOUT, help="Request timeout in seconds")
@click.option("--no-verify-ssl", is_flag=True, help="Disable SSL verification")
def config_add_profile(
    name: str,
    region: str,
    vault: Optional[str],
    part_size: int,
    endpoint_url: Optional[str],
    timeout: int,
    no_verify_ssl: bool,
) -> None:
    """Add a new profile.

    Example:
        glacierctl config add-profile archive-eu --region eu-central-1
    """
    settings = _validated_settings(region, endpoint_url, vault, part_size, timeout)

    cfg = Config.load()

    if cfg.has_profile(name):
        print_error(f"Profile '{name}' already exists.")
        raise SystemExit(1)

    cfg.add_profile(name, verify_ssl=not no_verify_ssl, **settings)
    cfg.save()

    print_success(f"Profile '{name}' added")
