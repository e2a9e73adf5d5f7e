"""Main CLI entry point for glacierctl."""

from __future__ import annotations

import click

from glacierctl import __version__
from glacierctl.cli.archive import treehash, upload
from glacierctl.cli.config_cmd import config
from glacierctl.cli.uploads import uploads


# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="glacierctl")
def cli() -> None:
    """glacierctl - Upload large streams to cold-storage vaults.

    Files or standard input are sent as multipart uploads with SHA-256
    tree hashes, one part at a time. Failed uploads can be re-run with
    --skip-parts to avoid re-sending parts the service already holds.

    Get started:

      glacierctl config init                     # Create config file

      glacierctl upload backup.tar -v my-vault   # Upload an archive

      glacierctl treehash backup.tar             # Checksum locally

    Credentials are read from AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY.
    """
    pass


# =============================================================================
# Register Commands
# =============================================================================

cli.add_command(config)
cli.add_command(upload)
cli.add_command(treehash)
cli.add_command(uploads)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
