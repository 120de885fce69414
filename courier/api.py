import inspect
import logging

from starlette.concurrency import run_in_threadpool
from starlette.middleware.errors import ServerErrorMiddleware
from starlette.middleware.exceptions import ExceptionMiddleware
from starlette.requests import Request
from starlette.testclient import TestClient

from . import status_codes
from .models import Response
from .templates import Templates

logger = logging.getLogger(__name__)


class API:
    """Serves a single endpoint with decorated responses.

    :param templates: The :class:`~courier.templates.Templates` cache given to
                      every response. An empty cache is created by default.
    :param card: The template cache key given to every response.
    :param debug: If ``True``, unhandled errors are answered with a traceback.
    """

    status_codes = status_codes

    def __init__(self, *, templates=None, card=None, debug=False):
        self.templates = Templates() if templates is None else templates
        self.card = card
        self.debug = debug
        self.default_endpoint = None

        # Cached test client.
        self._session = None

        self.app = ExceptionMiddleware(self.dispatch, debug=debug)
        self.add_middleware(ServerErrorMiddleware, debug=debug)

    def add_middleware(self, middleware_cls, **middleware_config):
        self.app = middleware_cls(self.app, **middleware_config)

    def endpoint(self, f):
        """Decorator registering the function that answers every request.

        Usage::

            @api.endpoint
            async def hello(req, resp):
                await resp.render("hello.html", {"name": "world"})

        """
        self.default_endpoint = f
        return f

    def session(self, base_url="http://testserver"):
        """Testing HTTP client, able to send HTTP requests to the application.

        :param base_url: The URL to mount the connection adaptor to.
        """
        if self._session is None:
            self._session = TestClient(self, base_url=base_url)
        return self._session

    @property
    def requests(self):
        return self.session()

    async def dispatch(self, scope, receive, send):
        assert scope["type"] == "http", f"Unsupported scope type: {scope['type']}"
        assert self.default_endpoint is not None, "No endpoint has been registered"

        request = Request(scope, receive)
        response = Response(templates=self.templates, card=self.card)

        view = self.default_endpoint
        if inspect.iscoroutinefunction(view):
            await view(request, response)
        else:
            await run_in_threadpool(view, request, response)

        if not response.ended:
            logger.debug(f"{view.__name__} left the response open, ending it")
            response.end()

        await response(scope, receive, send)

    async def __call__(self, scope, receive, send):
        await self.app(scope, receive, send)
