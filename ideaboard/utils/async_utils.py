import asyncio
from functools import partial
from typing import Any, Callable


async def call_sync_from_async(fn: Callable, *args: Any, **kwargs: Any) -> Any:
    """Shorthand for running a blocking function in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(fn, *args, **kwargs))
