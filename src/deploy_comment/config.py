import os
import dotenv
import logging

dotenv.load_dotenv()

OVERRIDE_LOGGING = logging.getLevelName(os.environ.get("OVERRIDE_LOGGING", "INFO"))

TELEGRAM_TOKEN = os.environ.get("TELEGRAM_TOKEN")
TELEGRAM_CHAT_ID = os.environ.get("TELEGRAM_CHAT_ID")

DEFAULT_ENV_VAR_NAME = "VITE_GATEWAY_API_URL"
ENV_VAR_NAME = os.environ.get("DEPLOY_COMMENT_ENV_VAR_NAME") or DEFAULT_ENV_VAR_NAME

QR_CODE = os.environ.get("DEPLOY_COMMENT_QR_CODE", "false").lower() == "true"

GITHUB_API_URL = os.environ.get("GITHUB_API_URL") or "https://api.github.com"
GITHUB_HOST = os.environ.get("GITHUB_HOST") or "github.com"

DRY_RUN = os.environ.get("DRY_RUN", "false").lower() == "true"

PUSH_GATEWAY = os.environ.get("PUSH_GATEWAY")
