from pathlib import Path

import click

from deployment.constants import DEFAULT_CONFIG_FILEPATH, DEPLOY_DIR
from deployment.types import Tags

tags_option = click.option(
    "--tags",
    "-t",
    help="Only run deployment tasks carrying these tags (comma separated).",
    type=Tags(),
    multiple=True,
    required=False,
)

config_option = click.option(
    "--config",
    "-c",
    "config_filepath",
    help="Deployment config file.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=DEFAULT_CONFIG_FILEPATH,
    show_default=True,
)

deploy_dir_option = click.option(
    "--deploy-dir",
    help="Directory holding the deployment task files.",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=DEPLOY_DIR,
    show_default=True,
)

autosign_option = click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)

verify_option = click.option(
    "--verify",
    help="Publish deployed contracts to the block explorer.",
    is_flag=True,
)

reset_option = click.option(
    "--reset",
    help="Ignore deployments recorded in the registry and deploy again.",
    is_flag=True,
)
