DEFAULT_ENCODING = "utf-8"
DEFAULT_MIMETYPE = "application/octet-stream"
DEFAULT_REDIRECT_STATUS = 302
DEFAULT_STATUS = 200
DEFAULT_TEMPLATE_EXTENSION = "html"

JINJA2_EXTENSIONS = ("html", "htm", "jinja", "jinja2", "j2")
