import json
import mimetypes

from .statics import DEFAULT_MIMETYPE


def lookup(token, default=DEFAULT_MIMETYPE):
    """Resolves a MIME type from an extension (``"html"``, ``".txt"``) or a
    filename (``"report.json"``). Full types such as ``"text/css"`` are
    returned untouched."""
    if "/" in token:
        return token

    name = token if "." in token else f".{token}"
    mimetype, _ = mimetypes.guess_type(f"file{name}" if name.startswith(".") else name)
    return mimetype or default


def format_json(body):
    """Serializes ``body`` to compact JSON text.

    Raises ``TypeError`` for unserializable values and ``ValueError`` for
    circular references or non-finite floats.
    """
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
