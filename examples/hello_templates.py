# Example:
# Serve templates from ./templates, cached under a single card.
# Run with any ASGI server, e.g. `uvicorn hello_templates:api`.
from pathlib import Path

import courier

templates = courier.Templates()
templates.add("site", Path(__file__).parent / "templates")

api = courier.API(templates=templates, card="site")


@api.endpoint
async def hello(req, resp):
    if req.url.path == "/old":
        return resp.redirect("/", status_code=301)

    if req.url.path == "/data":
        return resp.json({"path": req.url.path, "params": dict(req.query_params)})

    await resp.render("hello", {"name": req.query_params.get("name", "world")})
