import asyncio
import logging
import os

import typer

from deploy_comment import config
from deploy_comment.context import MalformedInput, parse_repository_url, resolve_fields
from deploy_comment.logger import get_log_handlers
from deploy_comment.metric import push_metrics, record_outcome
from deploy_comment.model import DeployEvent, RunOptions
from deploy_comment.render import render_comment
from deploy_comment.run import Outcome, post_deploy_comment


logging.basicConfig(
    format="%(asctime)s %(name)s %(levelname)s - %(message)s", level=logging.INFO
)
logger = logging.getLogger("deploy_comment")


app = typer.Typer()


@app.callback()
def init():
    logging.getLogger().setLevel(config.OVERRIDE_LOGGING)
    logger.setLevel(config.OVERRIDE_LOGGING)
    get_log_handlers(logger)


def _load(env_var_name: str, qr_code: bool, dry_run: bool):
    event = DeployEvent.from_env(os.environ, env_var_name=env_var_name)
    options = RunOptions(
        qr_code=qr_code,
        dry_run=dry_run,
        github_api_url=config.GITHUB_API_URL,
        github_host=config.GITHUB_HOST,
    )
    return event, options


@app.command()
def post(
    env_var_name: str = typer.Option(
        config.ENV_VAR_NAME, help="Variable holding the backend environment"
    ),
    qr_code: bool = typer.Option(config.QR_CODE, help="Add a QR code row"),
    dry_run: bool = typer.Option(config.DRY_RUN, help="Log the comment, post nothing"),
):
    """Post or update the deploy preview comment on the pull request."""
    event, options = _load(env_var_name, qr_code, dry_run)
    try:
        outcome = asyncio.run(post_deploy_comment(event, options))
    except Exception:
        logger.error("Deploy comment run failed", exc_info=True)
        record_outcome(Outcome.failed.value)
    else:
        logger.info("Deploy comment: %s", outcome.value)
    push_metrics()


@app.command()
def render(
    env_var_name: str = typer.Option(
        config.ENV_VAR_NAME, help="Variable holding the backend environment"
    ),
    qr_code: bool = typer.Option(config.QR_CODE, help="Add a QR code row"),
):
    """Print the comment body for the current environment."""
    event, options = _load(env_var_name, qr_code, dry_run=True)

    repo = None
    if event.repository_url is not None:
        try:
            repo = parse_repository_url(event.repository_url, host=options.github_host)
        except MalformedInput as e:
            logger.warning("%s", e)

    typer.echo(render_comment(resolve_fields(event, options, repo)))
