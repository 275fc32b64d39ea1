"""URL 파싱/정규화 유틸리티"""
from typing import Optional
from urllib.parse import parse_qs, parse_qsl, urlencode, urlparse, urlunparse


# 결과 중복 판정에서 제외할 트래킹 파라미터
TRACKING_PARAMS = frozenset({
    "fbclid",
    "gclid",
    "dclid",
    "msclkid",
    "yclid",
    "mc_cid",
    "mc_eid",
    "ref_src",
    "_hsenc",
    "_hsmi",
    "igshid",
    "si",
})

_DEFAULT_PORTS = {"http": 80, "https": 443}


def _is_tracking_param(name: str) -> bool:
    lowered = name.lower()
    return lowered.startswith("utm_") or lowered in TRACKING_PARAMS


def normalize_href(href: str, base_url: str = "") -> str:
    """상대/프로토콜-상대 href를 절대 URL로 정규화합니다.

    - "//host/path" -> "https://host/path"
    - "/path" -> "{base_url}/path"
    - "http(s)://..." -> 그대로
    """
    if not href:
        return ""

    h = href.strip()
    if not h:
        return ""

    if h.startswith("//"):
        return f"https:{h}"

    if h.startswith("/") and base_url:
        return f"{base_url.rstrip('/')}{h}"

    return h


def canonicalize_url(url: str) -> Optional[str]:
    """중복 제거용 정규 URL 생성

    Examples:
        >>> canonicalize_url("HTTPS://Example.com:443/a/?utm_source=x&b=2&a=1#top")
        'https://example.com/a?a=1&b=2'
        >>> canonicalize_url("//example.com/")
        'https://example.com/'
        >>> canonicalize_url("javascript:void(0)")

    Args:
        url: 원본 URL (절대 또는 프로토콜-상대)

    Returns:
        정규 URL, http(s)가 아니거나 host가 없으면 None
    """
    url = normalize_href(url)
    if not url:
        return None

    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        return None

    host = (parsed.hostname or "").lower().rstrip(".")
    if not host:
        return None

    try:
        port = parsed.port
    except ValueError:
        return None

    netloc = host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{host}:{port}"

    path = parsed.path or "/"
    if len(path) > 1:
        path = path.rstrip("/") or "/"

    params = [
        (k, v)
        for k, v in parse_qsl(parsed.query, keep_blank_values=True)
        if not _is_tracking_param(k)
    ]
    params.sort()
    query = urlencode(params)

    return urlunparse((scheme, netloc, path, "", query, ""))


def get_host(url: str) -> Optional[str]:
    """URL에서 host 추출 (소문자)"""
    try:
        host = urlparse(normalize_href(url)).hostname
    except ValueError:
        return None
    return host.lower() if host else None


def unwrap_redirect(href: str, param: str = "uddg") -> str:
    """리다이렉트 래퍼 링크에서 실제 대상 URL 추출

    DuckDuckGo 등은 "/l/?uddg=<encoded>" 형태로 결과 링크를 감쌉니다.
    대상 파라미터가 없으면 원본을 그대로 반환합니다.
    """
    if not href:
        return ""
    try:
        parsed = urlparse(normalize_href(href))
    except ValueError:
        return href
    values = parse_qs(parsed.query).get(param)
    if values and values[0]:
        return values[0]
    return href
