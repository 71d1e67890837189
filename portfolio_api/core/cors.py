"""
CORS middleware for the contact API.

Browser POSTs get the usual Starlette CORS headers. OPTIONS requests,
preflights included, go straight to the routes so the contact endpoint
answers them itself.
"""
from starlette.middleware.cors import CORSMiddleware
from starlette.types import Receive, Scope, Send


class RoutePreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves OPTIONS handling to the application."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "OPTIONS":
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
