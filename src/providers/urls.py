# providers/urls.py
import re
from typing import List, Tuple
from urllib.parse import SplitResult, urlsplit, urlunsplit

# /v1 .. /v50, optionally followed by /chat/completions or a trailing slash
_VERSION_PATH_RE = re.compile(r"/v([1-9]|[1-4][0-9]|50)(/chat/completions|/)?$")
_CHAT_SUFFIX = "/chat/completions"

# (lower-case model prefix, default server url), first match wins
DEFAULT_URL_RULES: List[Tuple[str, str]] = [
    ("glm-", "https://open.bigmodel.cn/api/paas/v4/chat/completions"),
    ("deepseek-", "https://api.deepseek.com/v1"),
    ("yi-", "https://api.lingyiwanwu.com/v1/chat/completions"),
]


def _split_url(raw_url: str) -> SplitResult:
    parsed = urlsplit(raw_url)
    # urlsplit is lenient about ports, .port raises ValueError on garbage
    parsed.port
    return parsed


def _host(parsed: SplitResult) -> str:
    # host[:port] without any user:pass@ part
    return parsed.netloc.rpartition("@")[2]


def validate_and_format_url(raw_url: str) -> Tuple[str, bool]:
    """
    Check that `raw_url` carries an API version segment and reduce it to the
    root the openai client expects:
      - .../v4/chat/completions -> scheme://host/.../v4
      - .../v1 or .../v1/       -> unchanged
      - anything else           -> (raw_url, False)
    Unparsable urls return ("", False).
    """
    try:
        parsed = _split_url(raw_url)
    except ValueError:
        return "", False

    match = _VERSION_PATH_RE.search(parsed.path)
    if not match:
        return raw_url, False

    if match.group(2) == _CHAT_SUFFIX:
        root_path = parsed.path[:-len(_CHAT_SUFFIX)]
        return f"{parsed.scheme}://{_host(parsed)}{root_path}", True
    return raw_url, True


def format_azure_url(raw_url: str) -> str:
    """Keep only scheme://host. Raises ValueError if the url can't be parsed."""
    parsed = _split_url(raw_url)
    return urlunsplit((parsed.scheme, _host(parsed), "", "", ""))


def get_default_server_url(model: str) -> str:
    model = (model or "").lower()
    for prefix, url in DEFAULT_URL_RULES:
        if model.startswith(prefix):
            return url
    return ""
