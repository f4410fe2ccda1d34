import asyncio
from enum import Enum
import json
import logging
from typing import AsyncContextManager, Callable, Optional

import aiohttp
import gidgethub

from deploy_comment.context import ResolveError, resolve_context
from deploy_comment.gate import should_comment
from deploy_comment.github import AuthenticationError, open_comment_api
from deploy_comment.github.api import CommentAPI
from deploy_comment.metric import record_outcome
from deploy_comment.model import Credentials, DeployEvent, RunOptions
from deploy_comment.publisher import PublishAction, upsert_comment
from deploy_comment.render import render_comment

logger = logging.getLogger("deploy_comment")

Connect = Callable[[Credentials, str], AsyncContextManager[CommentAPI]]


class Outcome(Enum):
    skipped = "skipped"
    aborted = "aborted"
    updated = "updated"
    created = "created"
    failed = "failed"
    dry_run = "dry_run"


def log_remote_failure(exc: Exception) -> None:
    logger.error("Failed to post comment to GitHub: %s", exc)

    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(exc, "status", None)
    if status is not None:
        logger.error("Response status: %d", int(status))

    payload = getattr(exc, "errors", None)
    if payload:
        logger.error("Response data: %s", json.dumps(payload, indent=2, default=str))


async def post_deploy_comment(
    event: DeployEvent,
    options: RunOptions,
    connect: Optional[Connect] = None,
) -> Outcome:
    if connect is None:
        connect = open_comment_api
    outcome = await _post_deploy_comment(event, options, connect)
    record_outcome(outcome.value)
    logger.debug("Run finished: %s", outcome.value)
    return outcome


async def _post_deploy_comment(
    event: DeployEvent, options: RunOptions, connect: Connect
) -> Outcome:
    if not should_comment(event):
        return Outcome.skipped

    try:
        ctx = resolve_context(event, options)
    except ResolveError as e:
        logger.error("ERROR: %s", e)
        return Outcome.aborted

    body = render_comment(ctx.fields)

    if options.dry_run:
        logger.info(
            "Dry run, would post to %s#%d:\n%s", ctx.repo, ctx.issue_number, body
        )
        return Outcome.dry_run

    try:
        async with connect(ctx.credentials, options.github_api_url) as api:
            result = await upsert_comment(api, ctx.repo, ctx.issue_number, body)
    except (
        gidgethub.GitHubException,
        aiohttp.ClientError,
        asyncio.TimeoutError,
        AuthenticationError,
    ) as e:
        log_remote_failure(e)
        return Outcome.failed

    if result.action == PublishAction.updated:
        return Outcome.updated
    return Outcome.created
