import pytest

import courier


@pytest.fixture
def resp():
    return courier.Response()


@pytest.fixture
def template_dir(tmp_path):
    directory = tmp_path / "templates"
    (directory / "pages").mkdir(parents=True)
    (directory / "hello.html").write_text("Hello, {{ name }}!")
    (directory / "pages" / "about.html").write_text("<p>{{ about }}</p>")
    (directory / "notes.txt").write_text("not a template")
    yield directory.resolve()


@pytest.fixture
def templates(template_dir):
    templates = courier.Templates()
    templates.add("site", template_dir)
    return templates


@pytest.fixture
def api(templates):
    return courier.API(templates=templates, card="site", debug=False)


@pytest.fixture
def session(api):
    return api.requests
