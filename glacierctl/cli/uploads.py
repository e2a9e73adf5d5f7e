"""Commands for in-progress multipart uploads."""

from __future__ import annotations

from typing import Optional

import click

from glacierctl.cli.common import Context, global_options, handle_errors
from glacierctl.core.output import print_output, print_success
from glacierctl.services.archives import ArchiveService


@click.group()
def uploads() -> None:
    """Inspect and abort in-progress multipart uploads."""
    pass


@uploads.command("list")
@click.option("--vault-name", "-v", "vault", default=None, help="Vault name")
@global_options
@handle_errors
def uploads_list(ctx: Context, vault: Optional[str]) -> None:
    """List in-progress uploads for a vault.

    Use the upload ID and part size shown here when deciding how to
    re-run a failed upload.

    Example:
        glacierctl uploads list -v my-vault
    """
    vault_name = ctx.resolve_vault(vault)
    with ctx.get_client() as client:
        items = ArchiveService(client).list_uploads(vault_name)

    rows = [
        {
            "upload_id": u.upload_id,
            "description": u.description or "",
            "part_size_mb": f"{u.part_size_mb:g}",
            "created": u.created.isoformat() if u.created else "",
        }
        for u in items
    ]
    print_output(
        rows,
        format=ctx.output_format,
        columns=["upload_id", "description", "part_size_mb", "created"],
        column_labels={"upload_id": "Upload ID", "part_size_mb": "Part Size (MiB)"},
        quiet=ctx.quiet,
        id_field="upload_id",
    )


@uploads.command("abort")
@click.argument("upload_id")
@click.option("--vault-name", "-v", "vault", default=None, help="Vault name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@global_options
@handle_errors
def uploads_abort(ctx: Context, upload_id: str, vault: Optional[str], yes: bool) -> None:
    """Abort an in-progress upload and discard its parts.

    Example:
        glacierctl uploads abort <upload-id> -v my-vault -y
    """
    vault_name = ctx.resolve_vault(vault)
    if not yes:
        click.confirm(f"Abort upload {upload_id} in vault {vault_name}?", abort=True)

    with ctx.get_client() as client:
        ArchiveService(client).abort(vault_name, upload_id)
    print_success(f"Aborted upload {upload_id}")
