from contextlib import asynccontextmanager
import logging
from typing import AsyncIterator

import aiohttp
import jwt
from gidgethub import aiohttp as gh_aiohttp
from gidgethub.abc import GitHubAPI
from gidgethub.apps import get_installation_access_token

from deploy_comment.github.api import CommentAPI
from deploy_comment.metric import record_api_call
from deploy_comment.model import AppAuth, Credentials

logger = logging.getLogger("deploy_comment")


class AuthenticationError(Exception):
    pass


async def get_access_token(gh: GitHubAPI, auth: AppAuth) -> str:
    logger.debug("Getting installation access token for %d", auth.installation_id)
    record_api_call("installation_token")
    try:
        access_token_response = await get_installation_access_token(
            gh,
            installation_id=auth.installation_id,
            app_id=str(auth.app_id),
            private_key=auth.private_key.get_secret_value(),
        )
    except (jwt.PyJWTError, ValueError) as e:
        raise AuthenticationError(f"Unable to sign app JWT: {e}") from e

    token = access_token_response["token"]
    return token


@asynccontextmanager
async def open_comment_api(
    credentials: Credentials, base_url: str = "https://api.github.com"
) -> AsyncIterator[CommentAPI]:
    async with aiohttp.ClientSession() as session:
        if isinstance(credentials, AppAuth):
            gh_pre = gh_aiohttp.GitHubAPI(session, __name__, base_url=base_url)
            token = await get_access_token(gh_pre, credentials)
        else:
            token = credentials.token.get_secret_value()

        gh = gh_aiohttp.GitHubAPI(
            session,
            __name__,
            oauth_token=token,
            base_url=base_url,
        )

        yield CommentAPI(gh)
