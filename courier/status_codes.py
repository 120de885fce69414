from http import HTTPStatus

# HTTP_200, HTTP_404, ... are generated from the standard library table.
for _status in HTTPStatus:
    globals()[f"HTTP_{_status.value}"] = _status.value

del _status


def phrase(status_code):
    """Returns the standard reason phrase for ``status_code``.

    Codes missing from the table are returned as their decimal string.
    """
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return str(status_code)
