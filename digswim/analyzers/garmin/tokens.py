"""从佳明 SSO / Connect 页面中提取令牌

页面结构随部署版本变化，单个正则不可靠，因此每类令牌都对应一组按顺序尝试的
提取策略（text -> Optional[str]），命中第一个即返回；全部未命中返回 None。

- SSO 登录页 `_csrf`：属性顺序 name/value、value/name、<input> 任意顺序、<meta csrf-token>
- Connect 首页令牌：优先 JS 赋值 `CSRF_TOKEN = "..."`，再退回上面四种
- service ticket：先看最终跳转 URL，再看 `response_url` 变量，最后全文扫描 `ticket=ST-...`
"""

import re
from typing import Callable, Optional, Sequence

TokenStrategy = Callable[[str], Optional[str]]

_Q = r"[\"']"
_VAL = r"[\"']([^\"']+)[\"']"

_NAME_THEN_VALUE = re.compile(rf"name={_Q}_csrf{_Q}\s+value={_VAL}")
_VALUE_THEN_NAME = re.compile(rf"value={_VAL}\s+name={_Q}_csrf{_Q}")
_INPUT_NAME_VALUE = re.compile(rf"<input[^>]*name={_Q}_csrf{_Q}[^>]*value={_VAL}", re.IGNORECASE)
_INPUT_VALUE_NAME = re.compile(rf"<input[^>]*value={_VAL}[^>]*name={_Q}_csrf{_Q}", re.IGNORECASE)
_META_CSRF = re.compile(rf"<meta[^>]*name={_Q}csrf-token{_Q}[^>]*content={_VAL}", re.IGNORECASE)
_JS_CSRF = re.compile(r"CSRF_TOKEN\s*=\s*[\"']([^\"']+)[\"']")

_URL_TICKET = re.compile(r"ticket=([^&#\s]+)")
_RESPONSE_URL_TICKET = re.compile(r"(?:var\s+)?response_url\s*=\s*[\"'][^\"']*ticket=(ST-[^\"'&\s]+)")
_BODY_TICKET = re.compile(r"ticket=(ST-[^\"'&\s;<]+)")


def _search(pattern: re.Pattern, text: str) -> Optional[str]:
    if not text:
        return None
    match = pattern.search(text)
    return match.group(1) if match else None


def csrf_name_then_value(html: str) -> Optional[str]:
    return _search(_NAME_THEN_VALUE, html)


def csrf_value_then_name(html: str) -> Optional[str]:
    return _search(_VALUE_THEN_NAME, html)


def csrf_input_tag(html: str) -> Optional[str]:
    """<input> 标签内同时有 name="_csrf" 与 value，顺序不限。"""
    return _search(_INPUT_NAME_VALUE, html) or _search(_INPUT_VALUE_NAME, html)


def csrf_meta_tag(html: str) -> Optional[str]:
    return _search(_META_CSRF, html)


def connect_token_js(html: str) -> Optional[str]:
    return _search(_JS_CSRF, html)


def ticket_response_url(body: str) -> Optional[str]:
    return _search(_RESPONSE_URL_TICKET, body)


def ticket_body_scan(body: str) -> Optional[str]:
    return _search(_BODY_TICKET, body)


CSRF_STRATEGIES: Sequence[TokenStrategy] = (
    csrf_name_then_value,
    csrf_value_then_name,
    csrf_input_tag,
    csrf_meta_tag,
)

CONNECT_TOKEN_STRATEGIES: Sequence[TokenStrategy] = (connect_token_js,) + tuple(CSRF_STRATEGIES)

TICKET_BODY_STRATEGIES: Sequence[TokenStrategy] = (
    ticket_response_url,
    ticket_body_scan,
)


def first_match(text: str, strategies: Sequence[TokenStrategy]) -> Optional[str]:
    """依次尝试策略，返回第一个非空结果。"""
    for strategy in strategies:
        token = strategy(text)
        if token:
            return token
    return None


def extract_csrf_token(html: str) -> Optional[str]:
    """SSO 登录页中的 `_csrf`。"""
    return first_match(html, CSRF_STRATEGIES)


def extract_connect_token(html: str) -> Optional[str]:
    """Connect 首页中的 connect-csrf-token。"""
    return first_match(html, CONNECT_TOKEN_STRATEGIES)


def ticket_from_url(url: Optional[str]) -> Optional[str]:
    """自动跟随跳转后，ticket 可能已出现在最终 URL 的查询串里。"""
    return _search(_URL_TICKET, url or "")


def extract_service_ticket(final_url: Optional[str], body: str) -> Optional[str]:
    """提取登录后的一次性 service ticket（ST-...）。"""
    return ticket_from_url(final_url) or first_match(body, TICKET_BODY_STRATEGIES)
