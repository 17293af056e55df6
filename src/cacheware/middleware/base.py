"""Middleware base class and the chain that runs a stack of them."""

from abc import ABC, abstractmethod

from ..types import HttpRequest, HttpResponse, RequestHandler


class Middleware(ABC):
    """
    A layer wrapped around an HTTP request handler.

    Each layer receives the request plus the rest of the stack as
    ``next_handler``. It may inspect the request, await the downstream
    response and return it, or a decorated copy of it.
    """

    @abstractmethod
    async def __call__(
        self,
        request: HttpRequest,
        next_handler: RequestHandler,
    ) -> HttpResponse:
        """
        Handle one request.

        Args:
            request: The inbound request
            next_handler: Runs the remaining layers and the application

        Returns:
            The response to send back up the stack
        """
        pass

    async def handle(
        self,
        request: HttpRequest,
        next_handler: RequestHandler,
    ) -> HttpResponse:
        """Same as calling the middleware."""
        return await self(request, next_handler)


class MiddlewareChain:
    """
    Runs an application handler behind a list of middleware.

    The first middleware in the list is the outermost layer: it sees the
    request first and the response last.
    """

    def __init__(
        self,
        middleware: list[Middleware],
        final_handler: RequestHandler,
    ):
        """
        Initialize the middleware chain.

        Args:
            middleware: Layers, outermost first
            final_handler: The application handler producing the response
        """
        self._middleware = middleware
        self._final_handler = final_handler

    async def __call__(self, request: HttpRequest) -> HttpResponse:
        """Send a request through every layer to the application."""
        return await self._execute(request, 0)

    async def _execute(self, request: HttpRequest, index: int) -> HttpResponse:
        if index >= len(self._middleware):
            return await self._final_handler(request)

        layer = self._middleware[index]

        async def next_handler(req: HttpRequest) -> HttpResponse:
            return await self._execute(req, index + 1)

        return await layer(request, next_handler)


class PassthroughMiddleware(Middleware):
    """Forwards requests untouched."""

    async def __call__(
        self,
        request: HttpRequest,
        next_handler: RequestHandler,
    ) -> HttpResponse:
        return await next_handler(request)
