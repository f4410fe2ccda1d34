import logging
from typing import List

from gidgethub.abc import GitHubAPI

from deploy_comment.github.model import IssueComment
from deploy_comment.metric import record_api_call
from deploy_comment.model import RepoIdentity

logger = logging.getLogger("deploy_comment")

ISSUE_COMMENTS_URL = "/repos/{owner}/{repo}/issues/{issue_number}/comments"
COMMENT_URL = "/repos/{owner}/{repo}/issues/comments/{comment_id}"


class CommentAPI:
    gh: GitHubAPI

    call_count: int

    def __init__(self, gh: GitHubAPI):
        self.gh = gh
        self.call_count = 0

    def _record(self, url: str) -> None:
        self.call_count += 1
        record_api_call(url)

    async def list_comments(
        self, repo: RepoIdentity, number: int
    ) -> List[IssueComment]:
        self._record(ISSUE_COMMENTS_URL)
        logger.debug("Listing comments on %s#%d", repo, number)
        url_vars = {"owner": repo.owner, "repo": repo.name, "issue_number": number}
        return [
            IssueComment.model_validate(item)
            async for item in self.gh.getiter(ISSUE_COMMENTS_URL, url_vars=url_vars)
        ]

    async def update_comment(
        self, repo: RepoIdentity, comment_id: int, body: str
    ) -> IssueComment:
        self._record(COMMENT_URL)
        logger.debug("Updating comment %d on %s", comment_id, repo)
        url_vars = {"owner": repo.owner, "repo": repo.name, "comment_id": comment_id}
        data = await self.gh.patch(COMMENT_URL, url_vars=url_vars, data={"body": body})
        return IssueComment.model_validate(data)

    async def create_comment(
        self, repo: RepoIdentity, number: int, body: str
    ) -> IssueComment:
        self._record(ISSUE_COMMENTS_URL)
        logger.debug("Creating comment on %s#%d", repo, number)
        url_vars = {"owner": repo.owner, "repo": repo.name, "issue_number": number}
        data = await self.gh.post(
            ISSUE_COMMENTS_URL, url_vars=url_vars, data={"body": body}
        )
        return IssueComment.model_validate(data)
