import logging

from deploy_comment.model import DEPLOY_PREVIEW, DeployEvent

logger = logging.getLogger("deploy_comment")


def should_comment(event: DeployEvent) -> bool:
    if event.context != DEPLOY_PREVIEW:
        logger.debug("Context is %s, not %s: skipping", event.context, DEPLOY_PREVIEW)
        return False
    if not event.is_pull_request:
        logger.debug("Deploy is not for a pull request: skipping")
        return False
    return True
