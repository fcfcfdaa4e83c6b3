"""Command-line interface for bucketfs.

This module exposes directory-style operations on an S3 bucket.

Commands:
    - mkdir: Create a directory (and its parents)
    - ls: List a directory, optionally the whole subtree
    - mv: Rename a file or a directory tree
    - rm: Delete a file or a directory
    - stat: Show the kind, size and modification time of a path

Paths are S3 URIs (s3://bucket/key). Connection options are shared by
every command.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

import typer

from . import __version__
from .cli_params import (
    AccessKeyIdOption,
    AwsProfileOption,
    EndpointUrlOption,
    RecursiveOption,
    RegionOption,
    SecretAccessKeyOption,
    SessionTokenOption,
    UriArgument,
)
from .filesystem import ObjectUnderFileSystem, create_filesystem
from .objectstorage import S3ClientConfig

app = typer.Typer(
    name="bucketfs",
    help="Directory operations on S3-compatible object storage.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"bucketfs {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    bucketfs: directories, renames and recursive deletes on S3 buckets.
    """
    pass


def _create_filesystem(
    uri: str,
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
    session_token: Optional[str] = None,
    region_name: str = "us-east-1",
    endpoint_url: Optional[str] = None,
    aws_profile: Optional[str] = None,
) -> ObjectUnderFileSystem:
    """Create a filesystem for the bucket named in ``uri``."""
    config = S3ClientConfig(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        session_token=session_token,
        region_name=region_name,
        endpoint_url=endpoint_url,
        aws_profile=aws_profile,
    )
    return create_filesystem(uri, config)


@app.command("mkdir")
def mkdir_cmd(
    uri: UriArgument,
    parents: Annotated[
        bool,
        typer.Option(
            "--parents/--no-parents", help="Create missing parent directories"
        ),
    ] = True,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    session_token: SessionTokenOption = None,
    region_name: RegionOption = "us-east-1",
    endpoint_url: EndpointUrlOption = None,
    aws_profile: AwsProfileOption = None,
) -> None:
    """
    Create a directory.

    Example:
        bucketfs mkdir s3://bucket/data/2024 --aws-profile myprofile
    """
    try:
        fs = _create_filesystem(
            uri,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            region_name=region_name,
            endpoint_url=endpoint_url,
            aws_profile=aws_profile,
        )
        created = fs.mkdirs(uri, create_parent=parents)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not created:
        typer.echo(f"Error: could not create directory {uri}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Created directory: {uri}")


@app.command("ls")
def ls_cmd(
    uri: UriArgument,
    recursive: RecursiveOption = False,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    session_token: SessionTokenOption = None,
    region_name: RegionOption = "us-east-1",
    endpoint_url: EndpointUrlOption = None,
    aws_profile: AwsProfileOption = None,
) -> None:
    """
    List a directory.

    Example:
        bucketfs ls s3://bucket/data --recursive
    """
    try:
        fs = _create_filesystem(
            uri,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            region_name=region_name,
            endpoint_url=endpoint_url,
            aws_profile=aws_profile,
        )
        statuses = fs.list_status(uri, recursive=recursive)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if statuses is None:
        typer.echo(f"Error: {uri} is not a directory or cannot be listed", err=True)
        raise typer.Exit(1)

    if not statuses:
        typer.echo("No entries found.")
        return
    for status in statuses:
        if status.is_directory:
            typer.echo(f"d {'-':>12}  {status.name}/")
        else:
            typer.echo(f"- {status.content_length:>12,}  {status.name}")


@app.command("mv")
def mv_cmd(
    src: Annotated[str, typer.Argument(help="Source path, e.g. s3://bucket/a")],
    dst: Annotated[str, typer.Argument(help="Destination path in the same bucket")],
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    session_token: SessionTokenOption = None,
    region_name: RegionOption = "us-east-1",
    endpoint_url: EndpointUrlOption = None,
    aws_profile: AwsProfileOption = None,
) -> None:
    """
    Rename a file or a directory tree within one bucket.

    A directory rename copies every object and then deletes the source; if
    it fails part way, some objects may already be at the destination.
    """
    try:
        fs = _create_filesystem(
            src,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            region_name=region_name,
            endpoint_url=endpoint_url,
            aws_profile=aws_profile,
        )
        # Reject a destination in another bucket before touching anything
        fs.emulator.to_key(dst)
        if fs.is_file(src):
            renamed = fs.rename_file(src, dst)
        else:
            renamed = fs.rename_directory(src, dst)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not renamed:
        typer.echo(f"Error: could not rename {src} to {dst}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Renamed {src} -> {dst}")


@app.command("rm")
def rm_cmd(
    uri: UriArgument,
    recursive: RecursiveOption = False,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    session_token: SessionTokenOption = None,
    region_name: RegionOption = "us-east-1",
    endpoint_url: EndpointUrlOption = None,
    aws_profile: AwsProfileOption = None,
) -> None:
    """
    Delete a file or a directory.

    Non-empty directories require --recursive.
    """
    try:
        fs = _create_filesystem(
            uri,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            region_name=region_name,
            endpoint_url=endpoint_url,
            aws_profile=aws_profile,
        )
        deleted = fs.delete(uri, recursive=recursive)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not deleted:
        typer.echo(f"Error: could not delete {uri}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Deleted: {uri}")


@app.command("stat")
def stat_cmd(
    uri: UriArgument,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    session_token: SessionTokenOption = None,
    region_name: RegionOption = "us-east-1",
    endpoint_url: EndpointUrlOption = None,
    aws_profile: AwsProfileOption = None,
) -> None:
    """
    Show whether a path is a file or directory, with its size and mtime.
    """
    try:
        fs = _create_filesystem(
            uri,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            region_name=region_name,
            endpoint_url=endpoint_url,
            aws_profile=aws_profile,
        )
        kind = "directory" if fs.is_directory(uri) else "file"
        size = fs.get_file_size(uri)
        modified_ms = fs.get_modification_time_ms(uri)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    modified = datetime.fromtimestamp(modified_ms / 1000, tz=timezone.utc)
    typer.echo(f"Path: {uri}")
    typer.echo(f"Type: {kind}")
    typer.echo(f"Size: {size:,} bytes")
    typer.echo(f"Modified: {modified.isoformat()}")
    typer.echo(f"Mode: {oct(fs.get_mode(uri))}")


if __name__ == "__main__":
    app()
