"""Common CLI utilities, decorators, and helpers."""

from __future__ import annotations

import sys
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import click

from glacierctl.core.auth import Credentials, SigV4Auth
from glacierctl.core.client import GlacierClient
from glacierctl.core.config import Config, Profile
from glacierctl.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    FinalizeError,
    GlacierCtlError,
    PartUploadError,
    ProfileNotFoundError,
)
from glacierctl.core.logging import setup_logging
from glacierctl.core.output import OutputFormat, print_error, print_info

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Context Object
# =============================================================================


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[Config] = None
        self.client: Optional[GlacierClient] = None
        self.profile_name: Optional[str] = None
        self.region: Optional[str] = None
        self.output_format: OutputFormat = OutputFormat.TABLE
        self.quiet: bool = False
        self.verbose: bool = False

    def get_profile(self) -> Profile:
        """Resolve the active profile.

        Without a config file the built-in defaults are used, unless a
        profile was requested by name.

        Raises:
            ConfigurationError: If a named profile does not exist.
        """
        if self.config is None:
            self.config = Config.load()

        try:
            profile = self.config.get_profile(self.profile_name)
        except ProfileNotFoundError:
            if self.profile_name:
                raise ConfigurationError(
                    f"Profile '{self.profile_name}' not found. "
                    "Run 'glacierctl config init' to create one."
                )
            profile = Profile()

        if self.region:
            data = profile.to_dict()
            data["region"] = self.region
            profile = Profile.from_dict(data)
        return profile

    def get_client(self) -> GlacierClient:
        """Get or create a signing client for the active profile.

        Raises:
            ConfigurationError: If the profile cannot be resolved.
            AuthenticationError: If no credentials are available.
        """
        if self.client is not None:
            return self.client

        profile = self.get_profile()
        self.client = GlacierClient(
            base_url=profile.url,
            account_id=profile.account_id,
            auth=SigV4Auth(Credentials.from_env(), region=profile.region),
            timeout=profile.timeout,
            verify_ssl=profile.verify_ssl,
        )
        return self.client

    def resolve_vault(self, vault: Optional[str]) -> str:
        """Vault from the command line, else the profile's default vault."""
        if vault:
            return vault
        profile = self.get_profile()
        if not profile.default_vault:
            raise click.ClickException(
                "Vault required. Pass --vault-name/-v or set default_vault in the profile."
            )
        return profile.default_vault


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Global Options
# =============================================================================


def global_options(f: F) -> F:
    """Add global options to a command."""

    @click.option(
        "--profile",
        "-p",
        envvar="GLACIER_PROFILE",
        help="Config profile to use",
    )
    @click.option(
        "--region",
        "-r",
        default=None,
        help="Region override (e.g. eu-central-1)",
    )
    @click.option(
        "--output",
        "-o",
        "output_format",
        type=click.Choice(["json", "table"]),
        default="table",
        help="Output format",
    )
    @click.option(
        "--quiet",
        "-q",
        is_flag=True,
        help="Minimal output (IDs only)",
    )
    @click.option(
        "--verbose",
        is_flag=True,
        help="Enable verbose output",
    )
    @pass_context
    @wraps(f)
    def wrapper(
        ctx: Context,
        profile: Optional[str],
        region: Optional[str],
        output_format: str,
        quiet: bool,
        verbose: bool,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Populate context from global options and invoke the command."""
        ctx.profile_name = profile
        ctx.region = region
        ctx.output_format = OutputFormat.from_string(output_format)
        ctx.quiet = quiet
        ctx.verbose = verbose

        setup_logging(quiet=quiet, verbose=verbose)

        if ctx.config is None:
            ctx.config = Config.load()

        return f(ctx, *args, **kwargs)

    return wrapper  # type: ignore


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Handle common errors and convert to CLI exits."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Capture errors and exit with consistent messaging."""
        try:
            return f(*args, **kwargs)
        except PartUploadError as e:
            print_error(str(e))
            if e.upload_id:
                print_info(f"Upload ID: {e.upload_id}")
            print_info(f"Re-run with {e.resume_hint} to skip parts already accepted")
            sys.exit(ExitCode.UPLOAD_ERROR)
        except FinalizeError as e:
            print_error(str(e))
            print_info(f"Upload ID: {e.upload_id}")
            print_info(
                f"All {e.parts_sent} parts were sent; --skip-parts cannot help. "
                "Re-run the full upload, and abort this one with "
                f"'glacierctl uploads abort {e.upload_id}'"
            )
            sys.exit(ExitCode.UPLOAD_ERROR)
        except AuthenticationError as e:
            print_error(str(e))
            sys.exit(ExitCode.AUTH_ERROR)
        except GlacierCtlError as e:
            print_error(str(e))
            sys.exit(ExitCode.GENERAL_ERROR)
        except (click.ClickException, click.Abort):
            raise
        except Exception as e:
            print_error(f"Unexpected error: {e}")
            sys.exit(ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 2
    UPLOAD_ERROR = 3
