import pytest
from starlette.requests import Request

from src.domain.entities.session import UserSession
from src.utils.client_info import extract_client_address, extract_device_info


def _request(headers=None, client=("10.0.0.9", 51234)):
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/v1/auth/signin",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


@pytest.mark.parametrize(
    "user_agent,expected",
    [
        ("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Mobile/15E148", "iPhone"),
        ("Mozilla/5.0 (Linux; Android 14; Pixel 8) Mobile Safari/537.36", "Android Mobile"),
        ("Opera/9.80 (J2ME/MIDP; Opera Mini) Mobile", "Mobile Device"),
        ("Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X)", "iPad"),
        ("Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0)", "Mac"),
        ("Mozilla/5.0 (Windows NT 10.0; Win64; x64)", "Windows PC"),
        ("Mozilla/5.0 (X11; Linux x86_64)", "Linux PC"),
        ("curl/8.4.0", "Desktop Browser"),
        ("", "Unknown Device"),
        (None, "Unknown Device"),
    ],
)
def test_extract_device_info(user_agent, expected):
    assert extract_device_info(user_agent) == expected


def test_android_tablet_is_linux_pc():
    # Android tablets omit the Mobile marker
    assert extract_device_info("Mozilla/5.0 (Linux; Android 14; SM-X710)") == "Linux PC"


def test_forwarded_for_wins():
    request = _request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "X-Real-IP": "198.51.100.2"})

    assert extract_client_address(request) == "203.0.113.7"


def test_peer_address_before_real_ip():
    request = _request({"X-Real-IP": "198.51.100.2"})

    assert extract_client_address(request) == "10.0.0.9"


def test_real_ip_when_no_peer():
    request = _request({"X-Real-IP": " 198.51.100.2 "}, client=None)

    assert extract_client_address(request) == "198.51.100.2"


def test_empty_forwarded_entry_falls_through():
    request = _request({"X-Forwarded-For": " , 10.0.0.1"})

    assert extract_client_address(request) == "10.0.0.9"


def test_no_address_at_all():
    assert extract_client_address(_request(client=None)) is None


def test_oversized_forwarded_header_falls_through():
    request = _request({"X-Forwarded-For": "x" * 200})

    address = extract_client_address(request)

    assert address == "10.0.0.9"
    assert len(address) <= UserSession.__table__.c.ip_address.type.length


@pytest.mark.parametrize("forwarded", ["unknown", "999.1.1.1", "<script>", "203.0.113.7:8080"])
def test_invalid_forwarded_entry_falls_through(forwarded):
    assert extract_client_address(_request({"X-Forwarded-For": forwarded})) == "10.0.0.9"


def test_invalid_real_ip_is_ignored():
    request = _request({"X-Real-IP": "not-an-ip"}, client=None)

    assert extract_client_address(request) is None


def test_ipv6_forwarded_address():
    request = _request({"X-Forwarded-For": "2001:db8::1"})

    assert extract_client_address(request) == "2001:db8::1"
