#!/usr/bin/env python3
"""
Local preview of the generated feed.
Usage: python preview_feed.py [limit]

Reads the same environment variables as the Lambda function, fetches the
collection and prints the feed built from the first records (3 by default).
"""

import sys

from webflow_rss.config import Config
from webflow_rss.lambda_handler import get_webflow_token
from webflow_rss.rss import FeedRenderer
from webflow_rss.webflow import UpstreamError, WebflowClient


def preview_feed(limit: int = 3) -> int:
    """Fetch the collection and print a truncated feed."""
    config = Config.from_env()
    execution_id = "preview"

    try:
        token = get_webflow_token(config, execution_id)
        records = WebflowClient(config.webflow, token, execution_id).fetch_items()
    except (UpstreamError, ValueError, RuntimeError) as e:
        print(f"Preview failed: {e}", file=sys.stderr)
        return 1

    print(f"Found {len(records)} posts", file=sys.stderr)
    renderer = FeedRenderer(config.feed, execution_id)
    print(renderer.render_feed(records, limit=limit))
    return 0


if __name__ == "__main__":
    sys.exit(preview_feed(int(sys.argv[1]) if len(sys.argv) > 1 else 3))
