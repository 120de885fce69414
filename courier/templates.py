import logging
import os
import re
import typing as t
from pathlib import Path

import jinja2

from .statics import DEFAULT_TEMPLATE_EXTENSION, JINJA2_EXTENSIONS

logger = logging.getLogger(__name__)

EXTENSION_RE = re.compile(r"\w+\.(\w+)$")


class TemplateError(Exception):
    pass


class TemplateExtensionNotFound(TemplateError):
    def __init__(self, template):
        super().__init__("Template extension not found")
        self.template = template


class TemplateNotFound(TemplateError):
    def __init__(self, template):
        super().__init__("Template not found")
        self.template = template


class TemplateEntry(t.NamedTuple):
    """A cached set of templates rendered by a single engine."""

    engine: str
    templates: t.Dict[str, str]


# Environments are kept per template directory, for renders with ``cache`` set.
_environments: t.Dict[str, jinja2.Environment] = {}


def _environment(directory, cache):
    if not cache:
        return jinja2.Environment(
            loader=jinja2.FileSystemLoader([directory]), autoescape=True, cache_size=0
        )

    env = _environments.get(directory)
    if env is None:
        env = _environments.setdefault(
            directory,
            jinja2.Environment(loader=jinja2.FileSystemLoader([directory]), autoescape=True),
        )
    return env


def render_jinja2(path, data):
    """Renders the `jinja2 <http://jinja.pocoo.org/docs/>`_ template stored at ``path``.

    :param path: A relative or absolute path to the template file.
    :param data: Values passed into the template. A truthy ``cache`` key reuses
                 compiled templates between renders.
    """
    path = Path(path).resolve()
    env = _environment(str(path.parent), data.get("cache", False))
    return env.get_template(path.name).render(**data)


ENGINES = {ext: render_jinja2 for ext in JINJA2_EXTENSIONS}


def extension(template):
    """Returns the trailing ``.ext`` token of ``template``, if it has one."""
    if not isinstance(template, str):
        return None
    match = EXTENSION_RE.search(template)
    return match.group(1) if match else None


class Templates:
    """A template cache, keyed by card.

    Each card owns a :class:`TemplateEntry` and a table of engines. Templates
    missing from the cache are rendered straight from their path, with the
    engine picked from ``registry`` by file extension.

    :param registry: Fallback engines keyed by extension. Defaults to a copy of
                     :data:`ENGINES`.
    """

    def __init__(self, registry=None):
        self.cache: t.Dict[t.Any, TemplateEntry] = {}
        self.engines: t.Dict[t.Any, t.Dict[str, t.Callable]] = {}
        self.registry = dict(ENGINES) if registry is None else registry

    def __repr__(self):
        return f"<Templates cards={list(self.cache)!r}>"

    def register(self, ext, engine):
        """Adds a fallback engine for templates ending in ``.ext``."""
        self.registry[ext] = engine

    def add(self, card, directory, *, engine=DEFAULT_TEMPLATE_EXTENSION):
        """Caches every ``*.{engine}`` file below ``directory`` under ``card``.

        Templates are addressable by their path relative to ``directory``,
        with or without the extension.

        :param card: The key responses use to select this entry.
        :param directory: The directory to scan.
        :param engine: The extension of the templates to cache, which also
                       selects the engine from the registry.
        """
        directory = Path(directory).resolve()
        templates = {}
        for root, _, files in os.walk(directory):
            for filename in sorted(files):
                if extension(filename) != engine:
                    continue
                path = Path(root) / filename
                name = path.relative_to(directory).as_posix()
                templates[name] = str(path)
                templates.setdefault(name[: -len(engine) - 1], str(path))

        entry = TemplateEntry(engine=engine, templates=templates)
        self.cache[card] = entry
        self.engines.setdefault(card, {})[engine] = self.registry.get(engine)

        logger.debug(f"Cached {len(templates)} template(s) from {directory} as {card!r}")
        return entry

    def resolve(self, template, card=None):
        """Resolves ``template`` to a ``(source, engine)`` pair.

        Either member is ``None`` when nothing matched.
        """
        source = engine = None

        entry = self.cache.get(card) if card is not None else None
        if entry is not None:
            source = entry.templates.get(template)
            engine = self.engines.get(card, {}).get(entry.engine)

        if not source:
            source = template
            engine = self.registry.get(extension(template) or "")
        else:
            logger.debug(f"Resolved {template!r} from the {card!r} template cache")

        return source, engine


def resolve(template, *, templates=None, card=None):
    """Resolves ``template`` against ``templates``, or the default engines when
    no template cache is configured."""
    if templates is not None:
        return templates.resolve(template, card=card)
    return template, ENGINES.get(extension(template) or "")
