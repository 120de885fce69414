import inspect
import logging

from requests.structures import CaseInsensitiveDict
from starlette.concurrency import run_in_threadpool

from . import status_codes
from .formats import format_json, lookup
from .statics import DEFAULT_ENCODING, DEFAULT_REDIRECT_STATUS
from .templates import TemplateExtensionNotFound, TemplateNotFound, resolve
from .transport import BufferedWriter, ResponseWriter

logger = logging.getLogger(__name__)


class Response:
    """An outgoing response, decorated with chainable helpers.

    Usage::

        resp.status(201).set("X-Request-Id", 42).json({"created": True})

    :param writer: The transport response to write to. A fresh
                   :class:`~courier.transport.BufferedWriter` by default.
    :param templates: The :class:`~courier.templates.Templates` cache consulted
                      by :meth:`render`.
    :param card: The template cache key of this response.
    """

    __slots__ = ["writer", "templates", "card", "encoding"]

    def __init__(self, writer=None, *, templates=None, card=None, encoding=DEFAULT_ENCODING):
        self.writer: ResponseWriter = BufferedWriter() if writer is None else writer
        self.templates = templates
        self.card = card
        self.encoding = encoding

    def __repr__(self):
        return f"<Response [{self.status_code}]>"

    @property
    def status_code(self) -> int:
        return self.writer.status_code

    @property
    def headers(self):
        """A copy of the headers set so far."""
        return CaseInsensitiveDict(self.writer.headers)

    @property
    def body(self) -> bytes:
        return self.writer.body

    @property
    def ended(self) -> bool:
        return self.writer.ended

    def status(self, code):
        """Sets the HTTP status code. Returns the response."""
        self.writer.set_status(code)
        return self

    def set(self, header, value):
        """Sets ``header`` to the string form of ``value``. Returns the response."""
        self.writer.set_header(header, str(value))
        return self

    def get(self, field):
        """The current value of the ``field`` header, or ``None``."""
        return self.writer.get_header(field)

    def type(self, token):  # noqa: A003
        """Sets ``Content-Type`` from an extension, filename or MIME type.

        :param token: e.g. ``"html"``, ``"data.json"`` or ``"text/css"``.
        """
        return self.set("Content-Type", lookup(token))

    def end(self, body=b""):
        self.writer.end(body)

    def send(self, body=None, *, status_code=None):
        """Sends ``body`` and ends the response.

        Strings are sent as HTML, bytes as an octet stream (unless a
        ``Content-Type`` is already set) and integers as the status code with
        its reason phrase. Anything else is sent with :meth:`json`.

        :param body: The content to send.
        :param status_code: The HTTP status code to send with it.
        """
        if status_code is not None:
            self.status(status_code)

        if body is None:
            body = ""

        if isinstance(body, str):
            if not self.get("Content-Type"):
                self.type("html")
        elif isinstance(body, bytes):
            if not self.get("Content-Type"):
                self.type("bin")
        elif isinstance(body, int) and not isinstance(body, bool):
            if not self.get("Content-Type"):
                self.type("txt")
            self.status(body)
            body = status_codes.phrase(body)
        else:
            return self.json(body)

        content = body.encode(self.encoding) if isinstance(body, str) else body

        if not self.get("Content-Length"):
            self.set("Content-Length", len(content))

        self.end(content)
        return self

    def send_status(self, code):
        """Ends the response with ``code`` and its reason phrase as plain text."""
        return self.send(code)

    def json(self, body, *, status_code=None):
        """Sends ``body`` serialized as JSON.

        Serialization errors propagate to the caller.

        :param body: A JSON-serializable value.
        :param status_code: The HTTP status code to send with it.
        """
        if status_code is not None:
            self.status(status_code)

        content = format_json(body)
        self.set("Content-Type", "application/json")
        return self.send(content)

    def redirect(self, location, *, status_code=None):
        """Redirects to ``location`` and ends the response with an empty body.

        :param location: The URL for the ``Location`` header.
        :param status_code: The redirect status. Defaults to ``302``.
        """
        self.status(status_code or DEFAULT_REDIRECT_STATUS)
        self.set("Location", location)
        self.end()

    async def render(self, template, data=None, callback=None, *, card=None):
        """Renders ``template`` with ``data``. Must be awaited.

        The template is looked up in the template cache under the response's
        card first; otherwise ``template`` is used as a path and its engine is
        picked from its file extension.

        With a ``callback``, ``callback(error, html)`` is called when rendering
        is done and the response is left open. Without one, the response is
        sent: ``200`` with the HTML, or ``500`` with the error.

        :param template: A template path, or a name in the template cache.
        :param data: Values passed into the template. ``cache`` is set on it.
        :param callback: A function or coroutine function.
        :param card: Overrides the response's card for this lookup.
        """
        card = self.card if card is None else card
        source, engine = resolve(template, templates=self.templates, card=card)

        if data is None:
            data = {}
        data["cache"] = True

        error = html = None
        if engine is None or not callable(engine):
            error = TemplateExtensionNotFound(template)
        elif not source or not isinstance(source, str):
            error = TemplateNotFound(template)
        else:
            try:
                if inspect.iscoroutinefunction(engine):
                    html = await engine(source, data)
                else:
                    html = await run_in_threadpool(engine, source, data)
            except Exception as e:
                error = e

        if callback is not None:
            if inspect.iscoroutinefunction(callback):
                await callback(error, html)
            else:
                callback(error, html)
        elif error is not None:
            logger.debug(f"Rendering {template!r} failed, sending 500")
            self.send(str(error), status_code=status_codes.HTTP_500)  # type: ignore[attr-defined]
        else:
            logger.debug(f"Rendered {template!r}, sending 200")
            self.send(html, status_code=status_codes.HTTP_200)  # type: ignore[attr-defined]

        return html

    async def __call__(self, scope, receive, send):
        await self.writer(scope, receive, send)
