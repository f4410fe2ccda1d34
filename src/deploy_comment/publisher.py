from dataclasses import dataclass
from enum import Enum
import logging
from typing import Iterable, Optional

from deploy_comment.github.api import CommentAPI
from deploy_comment.github.model import IssueComment
from deploy_comment.model import RepoIdentity
from deploy_comment.render import COMMENT_IDENTIFIER

logger = logging.getLogger("deploy_comment")


class PublishAction(Enum):
    updated = "updated"
    created = "created"


@dataclass(frozen=True)
class PublishResult:
    action: PublishAction
    comment: IssueComment


def find_existing_comment(
    comments: Iterable[IssueComment], marker: str = COMMENT_IDENTIFIER
) -> Optional[IssueComment]:
    for comment in comments:
        if comment.contains(marker):
            return comment
    return None


async def upsert_comment(
    api: CommentAPI, repo: RepoIdentity, number: int, body: str
) -> PublishResult:
    """
    Make sure ``repo#number`` carries exactly one comment with ``body``.

    The first comment containing :data:`COMMENT_IDENTIFIER` is edited in place,
    otherwise a new comment is created. Errors from the API are not handled
    here.
    """
    if COMMENT_IDENTIFIER not in body:
        raise ValueError("Comment body does not contain the comment identifier")

    comments = await api.list_comments(repo, number)
    logger.debug("Have %d comments on %s#%d", len(comments), repo, number)

    existing = find_existing_comment(comments)

    if existing is not None:
        logger.debug("Found existing %s", existing)
        comment = await api.update_comment(repo, existing.id, body)
        logger.info("Updated comment %s on %s#%d", comment.id, repo, number)
        return PublishResult(PublishAction.updated, comment)

    comment = await api.create_comment(repo, number, body)
    logger.info("Created comment %s on %s#%d", comment.id, repo, number)
    return PublishResult(PublishAction.created, comment)
