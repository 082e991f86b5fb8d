import asyncio
import datetime
from autoinject import injector


@injector.injectable_global
class Clock:
    """Source of the current time and of delays between polls."""

    def utc_now(self) -> datetime.datetime:
        return datetime.datetime.now(datetime.timezone.utc)

    async def sleep(self, seconds: float):
        await asyncio.sleep(seconds)
