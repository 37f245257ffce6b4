#!/usr/bin/env python3
"""nel - Javascript REPL sessions in a worker process."""

from __future__ import annotations

import asyncio

import structlog

from nel.log import configure_logging
from nel.session.manager import Session

configure_logging()

logger = structlog.get_logger()


async def demo_session() -> None:
    """Demonstrate execution, completion and inspection."""
    print("=== Session Demo ===\n")

    session = Session()
    await session.start()

    done = asyncio.Event()

    def show(label: str):
        def _show(result) -> None:
            print(f"{label}: {result.model_dump(by_alias=True, exclude_none=True)}")

        return _show

    try:
        session.execute(
            "var answer = 6 * 7, list = [1, 2, 3]; answer",
            show("execute"),
            show("error"),
        )
        session.execute("undefinedFunction()", show("execute"), show("error"))

        code = "answer.toFi"
        session.complete(code, len(code), show("complete"), show("error"))

        code = "list.map"
        session.inspect(code, len(code), show("inspect"), show("error"))

        code = "Math.max"
        session.inspect(
            code,
            len(code),
            show("inspect"),
            show("error"),
            after_run=done.set,
        )

        await done.wait()
        print("-" * 40)

        print("Restarting session...")
        await session.restart(on_restarted=lambda code, sig: print(f"old worker: {code} {sig}"))

        done.clear()
        session.execute(
            "typeof answer",
            show("after restart"),
            show("error"),
            after_run=done.set,
        )
        await done.wait()

    finally:
        await session.kill()


async def main() -> None:
    """Run all demos."""
    try:
        await demo_session()
    except FileNotFoundError as e:
        logger.error("demo_failed", error=str(e))


if __name__ == "__main__":
    asyncio.run(main())
