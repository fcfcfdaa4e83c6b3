"""Shared CLI parameter definitions.

Every command talks to S3 the same way, so the connection options are
declared once here as ``Annotated`` aliases and reused in each command
signature:

    @app.command()
    def my_command(
        uri: UriArgument,
        region_name: RegionOption = "us-east-1",
    ):
        pass
"""

from typing import Annotated, Optional

import typer

UriArgument = Annotated[
    str, typer.Argument(help="Path inside a bucket, e.g. s3://bucket/data/")
]

AccessKeyIdOption = Annotated[
    Optional[str],
    typer.Option("--access-key-id", help="AWS access key ID"),
]

SecretAccessKeyOption = Annotated[
    Optional[str],
    typer.Option("--secret-access-key", help="AWS secret access key"),
]

SessionTokenOption = Annotated[
    Optional[str],
    typer.Option("--session-token", help="AWS session token"),
]

RegionOption = Annotated[
    str,
    typer.Option("--region", help="AWS region name"),
]

EndpointUrlOption = Annotated[
    Optional[str],
    typer.Option("--endpoint-url", help="Custom S3 endpoint URL"),
]

AwsProfileOption = Annotated[
    Optional[str],
    typer.Option("--aws-profile", help="AWS CLI profile name"),
]

RecursiveOption = Annotated[
    bool,
    typer.Option("--recursive", "-r", help="Apply to the whole subtree"),
]
