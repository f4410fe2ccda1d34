from typing import Annotated, Literal, Mapping, Optional, Union

import pydantic

from deploy_comment.config import DEFAULT_ENV_VAR_NAME

DEPLOY_PREVIEW = "deploy-preview"


class Model(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="forbid", frozen=True)


def _get(environ: Mapping[str, str], key: str) -> Optional[str]:
    value = environ.get(key)
    if value is None or value.strip() == "":
        return None
    return value.strip()


class DeployEvent(Model):
    """Snapshot of the build environment for one deploy, read once at startup."""

    context: Optional[str] = None
    is_pull_request: bool = False
    review_id: Optional[str] = None
    repository_url: Optional[str] = None
    deploy_url: Optional[str] = None
    commit_ref: Optional[str] = None
    backend_env_value: Optional[str] = None

    deploy_id: Optional[str] = None
    site_id: Optional[str] = None
    site_name: Optional[str] = None

    github_token: Optional[pydantic.SecretStr] = None
    github_app_id: Optional[str] = None
    github_private_key: Optional[pydantic.SecretStr] = None
    github_installation_id: Optional[str] = None

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str], env_var_name: str = DEFAULT_ENV_VAR_NAME
    ) -> "DeployEvent":
        return cls(
            context=_get(environ, "CONTEXT"),
            is_pull_request=(_get(environ, "PULL_REQUEST") or "").lower() == "true",
            review_id=_get(environ, "REVIEW_ID"),
            repository_url=_get(environ, "REPOSITORY_URL"),
            deploy_url=_get(environ, "DEPLOY_PRIME_URL"),
            commit_ref=_get(environ, "COMMIT_REF"),
            backend_env_value=_get(environ, env_var_name),
            deploy_id=_get(environ, "DEPLOY_ID"),
            site_id=_get(environ, "SITE_ID"),
            site_name=_get(environ, "SITE_NAME"),
            github_token=_get(environ, "GITHUB_TOKEN"),
            github_app_id=_get(environ, "GITHUB_APP_ID"),
            github_private_key=_get(environ, "GITHUB_PRIVATE_KEY"),
            github_installation_id=_get(environ, "GITHUB_INSTALLATION_ID"),
        )

    @property
    def has_app_credentials(self) -> bool:
        return (
            self.github_app_id is not None
            and self.github_private_key is not None
            and self.github_installation_id is not None
        )


class RepoIdentity(Model):
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


class TokenAuth(Model):
    kind: Literal["token"] = "token"
    token: pydantic.SecretStr


class AppAuth(Model):
    kind: Literal["app"] = "app"
    app_id: int
    private_key: pydantic.SecretStr
    installation_id: int


Credentials = Annotated[Union[TokenAuth, AppAuth], pydantic.Field(discriminator="kind")]


class CommentFields(Model):
    site_label: str = "site"
    short_commit: str = "unknown"
    commit_url: Optional[str] = None
    deploy_log_url: str = ""
    deploy_url: Optional[str] = None
    backend_env: str = "unknown"
    qr_code_url: Optional[str] = None


class RunOptions(Model):
    qr_code: bool = False
    dry_run: bool = False
    github_api_url: str = "https://api.github.com"
    github_host: str = "github.com"


class CommentContext(Model):
    repo: RepoIdentity
    issue_number: int
    credentials: Credentials
    fields: CommentFields
