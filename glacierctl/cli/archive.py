"""Archive commands: upload and local tree hashing."""

from __future__ import annotations

import os
from typing import Optional

import click

from glacierctl.cli.common import Context, global_options, handle_errors
from glacierctl.core.output import (
    OutputFormat,
    create_progress,
    print_output,
    print_upload_summary,
    print_warning,
)
from glacierctl.core.validation import STDIN_MARKER
from glacierctl.models.progress import OperationPhase, UploadProgress
from glacierctl.services.archives import ArchiveService


@click.command("upload")
@click.argument("file", metavar="FILE")
@click.option(
    "--part-size",
    "-s",
    type=int,
    default=None,
    help="Part size in MiB (defaults to the profile, then 1)",
)
@click.option("--vault-name", "-v", "vault", default=None, help="Vault name")
@click.option("--description", "-d", default="", help="Archive description")
@click.option(
    "--skip-parts",
    "-k",
    type=click.IntRange(min=0),
    default=None,
    help="Retry an upload, skipping all parts before this part number",
)
@click.option("--dry-run", is_flag=True, help="Read and hash only; do not contact the service")
@global_options
@handle_errors
def upload(
    ctx: Context,
    file: str,
    part_size: Optional[int],
    vault: Optional[str],
    description: str,
    skip_parts: Optional[int],
    dry_run: bool,
) -> None:
    """Upload FILE to a vault as a single archive (use `-` for stdin).

    Example:
        glacierctl upload backup.tar -v my-vault -s 8 -d "nightly backup"
        tar c /data | glacierctl upload - -v my-vault -s 64
        glacierctl upload backup.tar -v my-vault -s 8 -k 12
    """
    vault_name = ctx.resolve_vault(vault)
    profile = ctx.get_profile()
    part_size_mb = part_size if part_size is not None else profile.part_size_mb

    if dry_run:
        print_warning("Dry run: the file is read and hashed, nothing is uploaded")
    if skip_parts:
        print_warning(
            f"Skipping parts 0-{skip_parts - 1}; they must already be stored by the service"
        )

    service = ArchiveService(None if dry_run else ctx.get_client())
    show_progress = ctx.output_format == OutputFormat.TABLE and not ctx.quiet

    try:
        if show_progress:
            total = None
            if file != STDIN_MARKER and os.path.isfile(file):
                total = os.path.getsize(file)
            with create_progress() as progress:
                task = progress.add_task(f"Uploading to {vault_name}", total=total)

                def on_progress(p: UploadProgress) -> None:
                    if p.phase == OperationPhase.FINALIZING:
                        progress.update(task, description="Completing archive")
                    elif p.is_part:
                        verb = "Skipped" if p.skipped else "Uploaded"
                        progress.update(
                            task,
                            completed=p.bytes_read,
                            description=f"{verb} part {p.part_index}",
                        )

                summary = service.upload(
                    file,
                    vault_name,
                    part_size_mb=part_size_mb,
                    description=description,
                    skip_parts=skip_parts,
                    dry_run=dry_run,
                    progress_callback=on_progress,
                )
        else:
            summary = service.upload(
                file,
                vault_name,
                part_size_mb=part_size_mb,
                description=description,
                skip_parts=skip_parts,
                dry_run=dry_run,
            )
    finally:
        if ctx.client is not None:
            ctx.client.close()

    if ctx.output_format == OutputFormat.JSON or ctx.quiet:
        print_output(
            summary.to_dict(),
            format=ctx.output_format,
            quiet=ctx.quiet,
            id_field="archive_id",
        )
        return

    print_upload_summary(summary)


@click.command("treehash")
@click.argument("file", metavar="FILE")
@global_options
@handle_errors
def treehash(ctx: Context, file: str) -> None:
    """Print the SHA-256 tree hash of FILE (use `-` for stdin).

    The value matches the checksum the service reports for the archive.

    Example:
        glacierctl treehash backup.tar
    """
    checksum, size = ArchiveService(None).tree_hash(file)
    if ctx.quiet:
        click.echo(checksum)
        return
    print_output(
        {"file": file, "tree_hash": checksum, "size": size},
        format=ctx.output_format,
        column_labels={"tree_hash": "Tree Hash", "size": "Size (bytes)"},
    )
