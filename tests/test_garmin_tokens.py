"""测试页面令牌提取策略链"""

from digswim.analyzers.garmin.tokens import (
    CSRF_STRATEGIES,
    csrf_input_tag,
    csrf_meta_tag,
    csrf_name_then_value,
    csrf_value_then_name,
    extract_connect_token,
    extract_csrf_token,
    extract_service_ticket,
    first_match,
    ticket_from_url,
)


def test_name_then_value():
    html = '<input type="hidden" name="_csrf" value="AAA111">'
    assert csrf_name_then_value(html) == "AAA111"
    assert extract_csrf_token(html) == "AAA111"


def test_value_then_name():
    html = "<input type='hidden' value='BBB222' name='_csrf'>"
    assert csrf_name_then_value(html) is None
    assert csrf_value_then_name(html) == "BBB222"
    assert extract_csrf_token(html) == "BBB222"


def test_input_tag_only_matches_third_strategy():
    """name 与 value 之间隔着其他属性时，前两种策略失败，第三种命中"""
    html = '<input name="_csrf" id="csrf" type="hidden" value="CCC333"/>'
    assert csrf_name_then_value(html) is None
    assert csrf_value_then_name(html) is None
    assert csrf_input_tag(html) == "CCC333"
    assert extract_csrf_token(html) == "CCC333"


def test_input_tag_value_before_name():
    html = '<INPUT value="DDD444" type="hidden" name="_csrf">'
    assert csrf_input_tag(html) == "DDD444"


def test_meta_tag_fallback():
    html = '<head><meta name="csrf-token" content="EEE555"></head><body></body>'
    assert first_match(html, CSRF_STRATEGIES[:3]) is None
    assert csrf_meta_tag(html) == "EEE555"
    assert extract_csrf_token(html) == "EEE555"


def test_first_strategy_wins_when_several_match():
    html = (
        '<meta name="csrf-token" content="from-meta">'
        '<input name="_csrf" value="from-input">'
    )
    assert extract_csrf_token(html) == "from-input"


def test_csrf_not_found():
    assert extract_csrf_token("<html><body>维护中</body></html>") is None
    assert extract_csrf_token("") is None


def test_connect_token_prefers_js_assignment():
    html = '<input name="_csrf" value="html-token"><script>CSRF_TOKEN = \'js-token\';</script>'
    assert extract_connect_token(html) == "js-token"


def test_connect_token_falls_back_to_html():
    html = '<meta name="csrf-token" content="meta-token">'
    assert extract_connect_token(html) == "meta-token"


def test_ticket_from_final_url():
    url = "https://connect.garmin.cn/modern?ticket=ST-1111-xyz&foo=bar"
    assert ticket_from_url(url) == "ST-1111-xyz"
    assert extract_service_ticket(url, "") == "ST-1111-xyz"


def test_ticket_from_response_url_variable():
    body = 'var response_url = "https://connect.garmin.cn/modern?ticket=ST-2222-abc";'
    assert extract_service_ticket("https://sso.garmin.cn/sso/signin", body) == "ST-2222-abc"


def test_ticket_response_url_preferred_over_body_scan():
    body = (
        '<a href="/x?ticket=ST-0000-old">old</a>'
        '<script>var response_url = "https://connect.garmin.cn/modern?ticket=ST-3333-new";</script>'
    )
    assert extract_service_ticket(None, body) == "ST-3333-new"


def test_ticket_generic_scan():
    body = "window.location.replace('https://connect.garmin.cn/modern?ticket=ST-4444-def');"
    assert extract_service_ticket(None, body) == "ST-4444-def"


def test_ticket_not_found():
    assert extract_service_ticket("https://sso.garmin.cn/sso/signin", "<html>密码错误</html>") is None
