import logging
import re

from prometheus_client import CollectorRegistry, Counter, push_to_gateway

from deploy_comment import config

logger = logging.getLogger("deploy_comment")

push_registry = CollectorRegistry()

run_counter = Counter(
    "deploy_comment_runs",
    "Number of deploy comment runs by outcome",
    labelnames=["outcome"],
    registry=push_registry,
)

api_call_count = Counter(
    "deploy_comment_num_api_calls",
    "Total number of GitHub API calls",
    labelnames=["endpoint"],
    registry=push_registry,
)

_COMMENT_ENDPOINT = re.compile(r"/issues/(?:comments/[^/]+|[^/]+/comments)$")


def _normalize_api_endpoint(endpoint: str) -> str:
    if endpoint == "installation_token" or endpoint.endswith("/access_tokens"):
        return "installation_token"
    if _COMMENT_ENDPOINT.search(endpoint):
        return "issue_comments"
    return "other"


def record_api_call(endpoint: str) -> None:
    api_call_count.labels(endpoint=_normalize_api_endpoint(endpoint)).inc()


def record_outcome(outcome: str) -> None:
    run_counter.labels(outcome=outcome).inc()


def push_metrics(gateway=None) -> bool:
    gateway = gateway or config.PUSH_GATEWAY
    if gateway is None:
        return False
    try:
        push_to_gateway(gateway, job="deploy_comment", registry=push_registry)
    except OSError:
        logger.warning("Unable to push metrics to %s", gateway, exc_info=True)
        return False
    return True
