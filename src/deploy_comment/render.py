from typing import Optional

from deploy_comment.model import CommentFields

COMMENT_IDENTIFIER = "<!-- netlify-pr-deploy-info -->"


def _icon(emoji: str) -> str:
    return f'<span aria-hidden="true">{emoji}</span>'


def _cell(value: Optional[str]) -> str:
    if not value:
        return "N/A"
    while COMMENT_IDENTIFIER in value:
        value = value.replace(COMMENT_IDENTIFIER, "")
    return value.replace("|", "\\|")


def _link(text: str, url: Optional[str]) -> str:
    if not url:
        return _cell(text)
    return f"[{_cell(text)}]({_cell(url)})"


def render_comment(fields: CommentFields) -> str:
    site = _cell(fields.site_label)

    if fields.deploy_url:
        preview = _link(fields.deploy_url, fields.deploy_url)
    else:
        preview = "N/A"

    rows = [
        (
            _icon("🔨") + " Latest commit",
            _link(fields.short_commit, fields.commit_url),
        ),
        (
            _icon("🔍") + " Latest deploy log",
            _link(fields.deploy_log_url, fields.deploy_log_url),
        ),
        (_icon("😎") + " Deploy Preview", preview),
        (_icon("🌳") + " Backend environment", f"`{_cell(fields.backend_env)}`"),
    ]

    if fields.qr_code_url:
        rows.append(
            (
                _icon("📱") + " Preview on mobile",
                "<details><summary>Toggle QR Code...</summary><br /><br />"
                f"![QR Code]({_cell(fields.qr_code_url)})<br /><br />"
                "Use your smartphone camera to open QR code link.</details>",
            )
        )

    text = COMMENT_IDENTIFIER + "\n"
    text += f"### {_icon('✅')} Deploy Preview for *{site}* ready!\n\n\n"
    text += "|  Name | Link |\n"
    text += "|:-:|------------------------|\n"
    for name, value in rows:
        text += f"|{name} | {value} |\n"
    text += "---\n"
    if fields.deploy_url:
        text += f"<!-- [{site} Preview]({_cell(fields.deploy_url)}) -->"

    return text.rstrip("\n")
