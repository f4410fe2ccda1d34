import logging
import re
from typing import Optional
from urllib.parse import quote

from deploy_comment.model import (
    AppAuth,
    CommentContext,
    CommentFields,
    Credentials,
    DeployEvent,
    RepoIdentity,
    RunOptions,
    TokenAuth,
)

logger = logging.getLogger("deploy_comment")

QR_CODE_URL = "https://api.qrserver.com/v1/create-qr-code/?size=150x150&data={data}"
DEPLOY_LOG_URL = "https://app.netlify.com/sites/{site}/deploys/{deploy_id}"

_NETLIFY_SITE = re.compile(r"^https?://[^/.]*--([^/.]+)\.")


class ResolveError(Exception):
    pass


class ConfigurationMissing(ResolveError):
    variable: str

    def __init__(self, *args, **kwargs):
        self.variable = kwargs.pop("variable")
        if not args:
            args = (f"{self.variable} environment variable is not set",)
        super().__init__(*args, **kwargs)


class MalformedInput(ResolveError):
    value: str

    def __init__(self, *args, **kwargs):
        self.value = kwargs.pop("value")
        super().__init__(*args, **kwargs)


def parse_repository_url(url: str, host: str = "github.com") -> RepoIdentity:
    """
    Extract owner and name from an HTTPS or SSH style repository URL.

    ``https://github.com/o/r``, ``https://github.com/o/r.git`` and
    ``git@github.com:o/r.git`` all give ``RepoIdentity(owner="o", name="r")``.
    Anything else raises :class:`MalformedInput`.
    """
    m = re.search(
        r"(?<![\w-])" + re.escape(host) + r"[:/]([^/:]+)/([^/]+?)(?:\.git)?/?$",
        url,
    )
    if m is None:
        raise MalformedInput(f"Could not parse repository URL: {url}", value=url)
    return RepoIdentity(owner=m.group(1), name=m.group(2))


def short_commit(commit_ref: Optional[str]) -> str:
    if not commit_ref:
        return "unknown"
    return commit_ref[:7]


def site_label(event: DeployEvent) -> str:
    """
    ``SITE_NAME`` if set, else the ``<site>`` part of a Netlify deploy URL
    (``https://<prefix>--<site>.netlify.app``), else ``"site"``.
    """
    if event.site_name is not None:
        return event.site_name
    if event.deploy_url is not None:
        m = _NETLIFY_SITE.match(event.deploy_url)
        if m is not None:
            return m.group(1)
    return "site"


def deploy_log_url(event: DeployEvent) -> str:
    site = event.site_id or event.site_name
    if event.deploy_id is None or site is None:
        return ""
    return DEPLOY_LOG_URL.format(site=site, deploy_id=event.deploy_id)


def qr_code_url(deploy_url: str) -> str:
    return QR_CODE_URL.format(data=quote(deploy_url, safe=""))


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise MalformedInput(f"{name} is not an integer: {value}", value=value)


def select_credentials(event: DeployEvent) -> Credentials:
    if event.has_app_credentials:
        logger.debug("Authenticating as GitHub App installation")
        private_key = event.github_private_key.get_secret_value()
        return AppAuth(
            app_id=_parse_int("GITHUB_APP_ID", event.github_app_id),
            private_key=private_key.replace("\\n", "\n"),
            installation_id=_parse_int(
                "GITHUB_INSTALLATION_ID", event.github_installation_id
            ),
        )

    partial = {
        "GITHUB_APP_ID": event.github_app_id,
        "GITHUB_PRIVATE_KEY": event.github_private_key,
        "GITHUB_INSTALLATION_ID": event.github_installation_id,
    }
    missing = [k for k, v in partial.items() if v is None]

    if event.github_token is not None:
        if len(missing) < len(partial):
            logger.warning(
                "Incomplete GitHub App credentials (missing %s), using GITHUB_TOKEN",
                ", ".join(missing),
            )
        logger.debug("Authenticating with personal token")
        return TokenAuth(token=event.github_token)

    if len(missing) == len(partial):
        raise ConfigurationMissing(
            "GITHUB_TOKEN environment variable is not set",
            variable="GITHUB_TOKEN",
        )
    raise ConfigurationMissing(
        f"GitHub App credentials are incomplete, missing {', '.join(missing)}",
        variable=missing[0],
    )


def resolve_fields(
    event: DeployEvent, options: RunOptions, repo: Optional[RepoIdentity] = None
) -> CommentFields:
    commit_url = None
    if event.commit_ref and repo is not None:
        commit_url = (
            f"https://{options.github_host}/{repo.full_name}/commit/{event.commit_ref}"
        )

    qr = None
    if options.qr_code and event.deploy_url is not None:
        qr = qr_code_url(event.deploy_url)

    return CommentFields(
        site_label=site_label(event),
        short_commit=short_commit(event.commit_ref),
        commit_url=commit_url,
        deploy_log_url=deploy_log_url(event),
        deploy_url=event.deploy_url,
        backend_env=event.backend_env_value or "unknown",
        qr_code_url=qr,
    )


def resolve_context(event: DeployEvent, options: RunOptions) -> CommentContext:
    if event.review_id is None:
        raise ConfigurationMissing(variable="REVIEW_ID")
    if event.repository_url is None:
        raise ConfigurationMissing(variable="REPOSITORY_URL")

    credentials = select_credentials(event)
    repo = parse_repository_url(event.repository_url, host=options.github_host)
    issue_number = _parse_int("REVIEW_ID", event.review_id)
    fields = resolve_fields(event, options, repo)

    logger.debug("Resolved %s#%d for site %s", repo, issue_number, fields.site_label)

    return CommentContext(
        repo=repo,
        issue_number=issue_number,
        credentials=credentials,
        fields=fields,
    )
