import typing as t

from requests.structures import CaseInsensitiveDict
from starlette.responses import Response as StarletteResponse

from .statics import DEFAULT_STATUS


def allows_body(status_code):
    """Whether a response with ``status_code`` may carry a body."""
    return not (100 <= status_code < 200 or status_code in (204, 304))


class ResponseClosed(RuntimeError):
    """Raised when a response is mutated after it has been ended."""


class ResponseWriter(t.Protocol):
    """The transport primitives a :class:`courier.Response` is layered on."""

    status_code: int

    @property
    def ended(self) -> bool: ...

    def set_status(self, code: int) -> None: ...

    def set_header(self, name: str, value: str) -> None: ...

    def get_header(self, name: str) -> t.Optional[str]: ...

    @property
    def headers(self) -> t.Mapping[str, str]: ...

    @property
    def body(self) -> bytes: ...

    def end(self, body: bytes = b"") -> None: ...

    async def __call__(self, scope, receive, send) -> None: ...


class BufferedWriter:
    """An in-memory transport response.

    Status and headers are held until the response is ended; the ended
    response is an ASGI application that transmits itself through Starlette.
    """

    __slots__ = ["status_code", "headers", "body", "_ended"]

    def __init__(self, status_code=DEFAULT_STATUS):
        self.status_code = status_code
        self.headers: CaseInsensitiveDict = CaseInsensitiveDict()
        self.body = b""
        self._ended = False

    def __repr__(self):
        state = "ended" if self._ended else "open"
        return f"<BufferedWriter [{self.status_code}] {state}>"

    @property
    def ended(self):
        return self._ended

    def _ensure_open(self):
        if self._ended:
            raise ResponseClosed("Response has already been ended")

    def set_status(self, code):
        self._ensure_open()
        self.status_code = code

    def set_header(self, name, value):
        self._ensure_open()
        self.headers[name] = value

    def get_header(self, name):
        return self.headers.get(name)

    def end(self, body=b""):
        self._ensure_open()
        if not allows_body(self.status_code):
            body = b""
            self.headers.pop("Content-Length", None)
        self.body = body or b""
        self._ended = True

    async def __call__(self, scope, receive, send):
        if not self._ended:
            raise RuntimeError("Response must be ended before it is sent")

        response = StarletteResponse(
            self.body, status_code=self.status_code, headers=dict(self.headers)
        )
        await response(scope, receive, send)
