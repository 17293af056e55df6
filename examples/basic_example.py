"""
Basic cacheware Example
=======================

This example demonstrates:
- Decorating responses with cache headers
- Turning on request logging with CACHEWARE_LOG_REQUESTS
- Reading configuration from the environment / .env files

To run this example:
    CACHEWARE_LOG_REQUESTS=1 uv run python examples/basic_example.py
"""

import asyncio
import dataclasses
import logging

from cacheware import (
    CachewareConfig,
    HttpRequest,
    HttpResponse,
    SessionSettings,
    StaticSessionEnvironment,
    build_chain,
    load_env_files,
)


async def app(request: HttpRequest) -> HttpResponse:
    return HttpResponse(status_code=200, body=f"Hello from {request.path}".encode())


async def main() -> None:
    load_env_files()
    config = CachewareConfig.from_env()
    logging.basicConfig(level=getattr(logging, config.log_level))

    session = StaticSessionEnvironment(SessionSettings.from_env())

    for mode in ("public", "private", "private_no_expire", "nocache", "none"):
        chain = build_chain(
            app,
            dataclasses.replace(config, mode=mode, expire_minutes=5),
            session=session,
        )
        response = await chain(HttpRequest(path=f"/{mode}"))

        print(f"--- {mode}")
        for name, value in response.headers:
            print(f"{name}: {value}")


if __name__ == "__main__":
    asyncio.run(main())
