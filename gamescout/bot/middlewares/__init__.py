from gamescout.bot.middlewares.search_session import SearchSessionMiddleware
from gamescout.bot.middlewares.throttle import ThrottleMiddleware

__all__ = [
    "SearchSessionMiddleware",
    "ThrottleMiddleware",
]
