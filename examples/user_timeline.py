#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
import os

from laakhay.pacer import EndpointSpec, PacerClient, RateBudget, path

USER_TWEETS = EndpointSpec(
    id="user_tweets",
    build_path=path("/users/{id}/tweets"),
    budget=RateBudget(requests=1500, window=15 * 60),
)

USER_MENTIONS = EndpointSpec(
    id="user_mentions",
    build_path=path("/users/{id}/mentions"),
    budget=RateBudget(requests=450, window=15 * 60),
)

TWEET_BY_ID = EndpointSpec(
    id="tweet_by_id",
    build_path=path("/tweets/{id}"),
    paginated=False,
    budget=RateBudget(requests=300, window=15 * 60),
)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream a user's timeline page by page")
    p.add_argument("user_id")
    p.add_argument("--tweet", help="Look up a single tweet by ID instead")
    p.add_argument("--mentions", action="store_true", help="Stream mentions instead of tweets")
    p.add_argument("--max-pages", type=int, default=3)
    p.add_argument("--max-results", type=int, default=100)
    p.add_argument("--base-url", default="https://api.twitter.com/2")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    headers = {"Authorization": f"Bearer {os.environ.get('BEARER_TOKEN', '')}"}
    spec = USER_MENTIONS if args.mentions else USER_TWEETS

    async with PacerClient(args.base_url, headers=headers) as client:
        if args.tweet:
            page = await client.fetch_one(TWEET_BY_ID, {"id": args.tweet})
            print(page.data)
            return

        stream = client.stream(
            spec,
            {"id": args.user_id},
            query={"max_results": args.max_results},
            max_pages=args.max_pages,
        )

        async def report_errors() -> None:
            async for err in stream.errors:
                print(f"error: {err}")

        errors_task = asyncio.create_task(report_errors())
        async for page in stream:
            print(f"page: {page.result_count} results, next={page.next_token}")
        await errors_task


if __name__ == "__main__":
    asyncio.run(main())
