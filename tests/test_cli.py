import http

from gidgethub import BadRequest
from typer.testing import CliRunner

from deploy_comment import cli, run
from deploy_comment.cli import app
from deploy_comment.metric import run_counter
from deploy_comment.render import COMMENT_IDENTIFIER

runner = CliRunner()


def test_render_prints_comment(deploy_env):
    result = runner.invoke(app, ["render", "--qr-code"], env=deploy_env)

    assert result.exit_code == 0
    assert result.output.startswith(COMMENT_IDENTIFIER)
    assert "[abcdef1](https://github.com/org/repo/commit/" in result.output
    assert "`https://api.staging.example.com`" in result.output
    assert "QR Code" in result.output


def test_render_custom_env_var_name(deploy_env):
    deploy_env["API_BASE"] = "https://api.prod.example.com"
    result = runner.invoke(app, ["render", "--env-var-name", "API_BASE"], env=deploy_env)

    assert result.exit_code == 0
    assert "`https://api.prod.example.com`" in result.output


def test_post_dry_run(deploy_env):
    result = runner.invoke(app, ["post", "--dry-run"], env=deploy_env)
    assert result.exit_code == 0


def test_post_exits_cleanly_when_skipped(deploy_env):
    deploy_env["CONTEXT"] = "production"
    result = runner.invoke(app, ["post"], env=deploy_env)
    assert result.exit_code == 0


def test_post_exits_cleanly_when_aborted(deploy_env):
    deploy_env["REVIEW_ID"] = None
    result = runner.invoke(app, ["post"], env=deploy_env)
    assert result.exit_code == 0


def test_post_creates_then_updates(deploy_env, fake_github, make_connect, monkeypatch):
    gh = fake_github()
    monkeypatch.setattr(run, "open_comment_api", make_connect(gh))

    result = runner.invoke(app, ["post"], env=deploy_env)
    assert result.exit_code == 0
    assert len(gh.comments) == 1
    comment_id = gh.comments[0]["id"]

    deploy_env["COMMIT_REF"] = "1234567deadbeef"
    result = runner.invoke(app, ["post"], env=deploy_env)
    assert result.exit_code == 0
    assert len(gh.comments) == 1
    assert gh.comments[0]["id"] == comment_id
    assert "1234567" in gh.comments[0]["body"]


def test_post_exits_cleanly_on_remote_failure(
    deploy_env, fake_github, make_connect, monkeypatch
):
    gh = fake_github(
        fail={"POST": BadRequest(http.HTTPStatus.FORBIDDEN, "Bad credentials")}
    )
    monkeypatch.setattr(run, "open_comment_api", make_connect(gh))

    result = runner.invoke(app, ["post"], env=deploy_env)

    assert result.exit_code == 0
    assert gh.comments == []
    assert len(gh.mutations) == 1


def test_post_exits_cleanly_on_unexpected_error(deploy_env, monkeypatch):
    async def broken(event, options):
        raise KeyError("token")

    monkeypatch.setattr(cli, "post_deploy_comment", broken)
    metric = run_counter.labels(outcome="failed")
    before = metric._value.get()

    result = runner.invoke(app, ["post"], env=deploy_env)

    assert result.exit_code == 0
    assert result.exception is None
    assert metric._value.get() == before + 1
