from photo_search.bot.middlewares.search_context import SearchContextMiddleware
from photo_search.bot.middlewares.throttle import ThrottleMiddleware

__all__ = [
    "SearchContextMiddleware",
    "ThrottleMiddleware",
]
