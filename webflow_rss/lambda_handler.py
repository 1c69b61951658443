"""Main Lambda handler for the Webflow RSS feed."""

import json
import os
from datetime import UTC, datetime
from typing import Any

import boto3
from botocore.exceptions import ClientError

from .config import Config
from .logging_config import create_execution_logger, setup_structured_logging
from .rss import FeedRenderer
from .webflow import UpstreamError, WebflowClient

# Setup structured logging
setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))

RSS_CONTENT_TYPE = "application/rss+xml; charset=utf-8"
ERROR_MESSAGE = "Failed to generate RSS feed"
METRICS_NAMESPACE = "Webflow-RSS-Feed"

# Secret keys that may hold the Webflow token in a JSON secret
TOKEN_KEYS = ("token", "api_token", "webflow_api_token", "webflow_token")

_config: Config | None = None


def get_config() -> Config:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def rss_response(body: str) -> dict[str, Any]:
    """Build the 200 proxy response carrying the RSS document."""
    return {
        "statusCode": 200,
        "headers": {
            "Content-Type": RSS_CONTENT_TYPE,
            "Access-Control-Allow-Origin": "*",
        },
        "body": body,
    }


def error_response() -> dict[str, Any]:
    """Build the generic 500 proxy response; the cause is never exposed."""
    return {
        "statusCode": 500,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
        },
        "body": json.dumps({"error": ERROR_MESSAGE}),
    }


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Lambda handler that serves the collection as an RSS feed.

    The request method, body and query string are ignored. Every failure is
    logged and answered with a generic 500; no partial feed is ever returned.

    Args:
        event: API Gateway or Function URL proxy event
        context: Lambda context object

    Returns:
        Proxy response dictionary
    """
    execution_id = f"lambda_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("main", execution_id)

    main_logger.log_execution_start(
        lambda_request_id=getattr(context, "aws_request_id", "unknown"),
        lambda_function_name=getattr(context, "function_name", "unknown"),
    )

    metrics = {"items_fetched": 0, "items_rendered": 0, "errors": []}
    config = None

    try:
        config = get_config()
        main_logger.info(
            "Configuration initialized",
            collection_id=config.webflow.collection_id,
        )

        api_token = get_webflow_token(config, execution_id)
        client = WebflowClient(config.webflow, api_token, execution_id=execution_id)
        records = client.fetch_items()
        metrics["items_fetched"] = len(records)

        renderer = FeedRenderer(config.feed, execution_id=execution_id)
        body = renderer.render_feed(records)
        metrics["items_rendered"] = len(records)

    except UpstreamError as e:
        error_msg = f"Error fetching Webflow collection: {e}"
        main_logger.error(
            error_msg,
            status_code=e.status_code,
            reason=e.reason,
            error=str(e),
        )
        metrics["errors"].append(error_msg)
        return _fail(main_logger, metrics, config, execution_id, error_msg)

    except Exception as e:
        error_msg = f"Error generating RSS feed: {e}"
        main_logger.error(error_msg, error=str(e), error_type=type(e).__name__)
        metrics["errors"].append(error_msg)
        return _fail(main_logger, metrics, config, execution_id, error_msg)

    main_logger.log_metrics(metrics)
    if config.metrics_enabled:
        send_cloudwatch_metrics(metrics, config.aws_region, execution_id)
    main_logger.log_execution_end(success=True, metrics=metrics)

    return rss_response(body)


webflow_rss_feed = lambda_handler


def _fail(main_logger, metrics, config, execution_id, error_msg):
    """Record a failed invocation and return the error response."""
    if config is not None and config.metrics_enabled:
        send_cloudwatch_metrics(metrics, config.aws_region, execution_id)
    main_logger.log_execution_end(success=False, metrics=metrics, error=error_msg)
    return error_response()


def get_webflow_token(config: Config, execution_id: str) -> str:
    """
    Resolve the Webflow API token.

    A token set directly in the environment wins. Otherwise the token is read
    from the AWS Secrets Manager secret named by WEBFLOW_TOKEN_SECRET_NAME,
    stored either as plain text or as a JSON object.

    Args:
        config: Loaded configuration
        execution_id: Execution ID for logging context

    Returns:
        The bearer token

    Raises:
        ValueError: If no token source is configured
        RuntimeError: If the secret cannot be retrieved or is malformed
    """
    if config.webflow.api_token:
        return config.webflow.api_token

    secret_name = config.webflow.token_secret_name
    if not secret_name:
        raise ValueError(
            "Webflow API token is not configured "
            "(set WEBFLOW_API_TOKEN or WEBFLOW_TOKEN_SECRET_NAME)"
        )

    secrets_logger = create_execution_logger("secrets_manager", execution_id)

    try:
        secrets_logger.info(
            f"Retrieving Webflow token from Secrets Manager: {secret_name}"
        )
        secrets_client = boto3.client(
            "secretsmanager", region_name=config.aws_region
        )
        response = secrets_client.get_secret_value(SecretId=secret_name)

        secret_value = (response.get("SecretString") or "").strip()
        if not secret_value:
            raise ValueError(f"Secret {secret_name} contains empty value")

        try:
            secret_data = json.loads(secret_value)
        except json.JSONDecodeError:
            secrets_logger.info("Using plain text secret")
            return secret_value

        if not isinstance(secret_data, dict):
            raise ValueError(f"JSON secret {secret_name} must be an object")

        for key in TOKEN_KEYS:
            token = secret_data.get(key)
            if isinstance(token, str) and token.strip():
                secrets_logger.info("Using token from JSON secret", secret_key=key)
                return token.strip()

        raise ValueError(f"No token found in JSON secret {secret_name}")

    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        secrets_logger.error(
            f"AWS Secrets Manager error retrieving {secret_name}: {error_code}"
        )
        raise RuntimeError(f"Failed to retrieve secret {secret_name}") from e
    except ValueError as e:
        secrets_logger.error(f"Invalid secret format for {secret_name}: {e}")
        raise RuntimeError(f"Invalid secret format for {secret_name}") from e


def send_cloudwatch_metrics(
    metrics: dict[str, Any], aws_region: str, execution_id: str
) -> None:
    """
    Send feed generation metrics to CloudWatch.

    Failures are logged and never propagate.

    Args:
        metrics: Dictionary containing execution metrics
        aws_region: AWS region for CloudWatch client
        execution_id: Execution ID for logging context
    """
    metrics_logger = create_execution_logger("cloudwatch_metrics", execution_id)

    try:
        cloudwatch = boto3.client("cloudwatch", region_name=aws_region)
        success = not metrics["errors"]
        status = [{"Name": "Status", "Value": "Success" if success else "Failure"}]

        metric_data = [
            {
                "MetricName": "ItemsFetched",
                "Value": metrics["items_fetched"],
                "Unit": "Count",
            },
            {
                "MetricName": "ItemsRendered",
                "Value": metrics["items_rendered"],
                "Unit": "Count",
            },
            {
                "MetricName": "FeedGenerationSuccess",
                "Value": 1 if success else 0,
                "Unit": "Count",
                "Dimensions": status,
            },
            {
                "MetricName": "FeedGenerationFailure",
                "Value": 0 if success else 1,
                "Unit": "Count",
                "Dimensions": status,
            },
        ]

        cloudwatch.put_metric_data(Namespace=METRICS_NAMESPACE, MetricData=metric_data)
        metrics_logger.info(
            "Successfully sent metrics to CloudWatch",
            metrics_sent=len(metric_data),
            namespace=METRICS_NAMESPACE,
        )

    except Exception as e:
        metrics_logger.error(f"Failed to send CloudWatch metrics: {e}", error=str(e))
