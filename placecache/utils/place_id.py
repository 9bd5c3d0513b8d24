import re
from typing import Optional
from urllib.parse import parse_qs, unquote, urlparse

QUERY_KEYS = ("place_id", "query_place_id")
PLACE_ID_CHARS = r"[A-Za-z0-9_\-]+"
Q_PATTERN = re.compile(r"^place_id:(%s)$" % PLACE_ID_CHARS)
PATH_PATTERN = re.compile(r"/place_id[/:](%s)(?:/|$)" % PLACE_ID_CHARS)


def extract_place_id(url: str) -> Optional[str]:
    """
    Recover a place id from a shareable maps URL.
    Query parameters win over the path; anything unparseable gives None.
    """
    if not url or not isinstance(url, str):
        return None

    try:
        parsed = urlparse(url.strip())
        params = parse_qs(parsed.query)
    except ValueError:
        return None

    for key in QUERY_KEYS:
        values = params.get(key)
        if values and values[0].strip():
            return values[0].strip()

    for q in params.get("q", []):
        match = Q_PATTERN.match(q.strip())
        if match:
            return match.group(1)

    match = PATH_PATTERN.search(unquote(parsed.path))
    if match:
        return match.group(1)

    return None
