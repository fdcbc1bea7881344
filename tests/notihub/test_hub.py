"""Tests for NotificationHub send / schedule"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock
from urllib.parse import parse_qs

import pytest

from src.notihub.config import HubConfig
from src.notihub.credentials import HubCredentials, HubEndpoint
from src.notihub.errors import InvalidFormatError, TransportError
from src.notihub.formats import Notification, NotificationFormat
from src.notihub.hub import NotificationHub
from src.notihub.transport.base import HubTransport
from src.notihub.transport.requests_transport import RequestsTransport

BASE_URL = "https://testHost/testPath?queryParam=queryValue"
MSG_URL = "https://testHost/testPath/messages?queryParam=queryValue"
SCH_URL = "https://testHost/testPath/schedulednotifications?queryParam=queryValue"

CONNECTION_STRING = (
    "Endpoint=sb://testhub-ns.servicebus.windows.net/;"
    "SharedAccessKeyName=testAccessKeyName;"
    "SharedAccessKey=testAccessKey"
)

# unix time 123
EXPIRY = datetime(1970, 1, 1, 0, 2, 3, tzinfo=timezone.utc)
NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _sent_request(transport):
    transport.execute.assert_called_once()
    return transport.execute.call_args.args[0]


def _token_params(request) -> dict[str, str]:
    token = request.headers["Authorization"]
    prefix = "SharedAccessSignature "
    assert token.startswith(prefix)
    return {k: v[0] for k, v in parse_qs(token[len(prefix):], keep_blank_values=True).items()}


@pytest.fixture
def transport():
    mock = MagicMock(spec=HubTransport)
    mock.execute.return_value = b""
    return mock


@pytest.fixture
def hub(transport):
    return NotificationHub(
        endpoint=HubEndpoint(BASE_URL),
        credentials=HubCredentials("testKeyName", "testKeyValue"),
        transport=transport,
        expiry_time_func=lambda: EXPIRY,
        clock=lambda: NOW,
    )


class TestSend:
    """Tests for NotificationHub.send"""

    def test_send_fanout(self, hub, transport):
        notification = Notification(NotificationFormat.TEMPLATE, b"test payload")

        result = hub.send(notification)

        assert result == b""
        request = _sent_request(transport)
        assert request.url == MSG_URL
        assert request.method == "POST"
        assert request.body == b"test payload"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["ServiceBusNotification-Format"] == "template"
        assert "ServiceBusNotification-Tags" not in request.headers
        assert "X-Apns-Push-Type" not in request.headers

        params = _token_params(request)
        assert params["sr"] == "https://testhost"
        assert params["sig"] == "gbQ5tD5dkCLLu6FavSBKu4b7EAPeFqF7XEoDOada6ww="
        assert params["se"] == "123"
        assert params["skn"] == "testKeyName"

    def test_send_tags(self, hub, transport):
        notification = Notification(NotificationFormat.TEMPLATE, b"test_payload")

        hub.send(notification, ["tag1", "tag2"])

        request = _sent_request(transport)
        assert request.headers["ServiceBusNotification-Tags"] == "tag1 || tag2"
        assert request.url == MSG_URL

    def test_send_returns_transport_body(self, hub, transport):
        transport.execute.return_value = b'{"ok": true}'

        result = hub.send(Notification(NotificationFormat.ANDROID, b"{}"))

        assert result == b'{"ok": true}'

    def test_send_error(self, hub, transport):
        expected = Exception("test error")
        transport.execute.side_effect = expected

        with pytest.raises(TransportError, match="test error") as exc_info:
            hub.send(Notification(NotificationFormat.ANDROID, b"test payload"))

        assert exc_info.value.__cause__ is expected
        assert _sent_request(transport).url == MSG_URL

    def test_send_apple_background(self, hub, transport):
        payload = json.dumps({"aps": {"content-available": 1}}).encode()

        hub.send(Notification(NotificationFormat.APPLE, payload))

        request = _sent_request(transport)
        assert request.headers["X-Apns-Push-Type"] == "background"
        assert request.headers["X-Apns-Priority"] == "5"
        assert request.url == MSG_URL

    def test_send_apple_alert(self, hub, transport):
        hub.send(Notification(NotificationFormat.APPLE, b'{"aps":{"alert":1}}'))

        request = _sent_request(transport)
        assert request.headers["X-Apns-Push-Type"] == "alert"
        assert request.headers["X-Apns-Priority"] == "10"

    def test_send_xml_format(self, hub, transport):
        hub.send(Notification(NotificationFormat.WINDOWS, b"<toast/>"))

        request = _sent_request(transport)
        assert request.headers["Content-Type"] == "application/xml"
        assert request.headers["ServiceBusNotification-Format"] == "windows"

    def test_timeout_forwarded(self, hub, transport):
        hub.send(Notification(NotificationFormat.TEMPLATE, b"{}"), timeout=2.5)

        assert transport.execute.call_args.kwargs["timeout"] == 2.5

    def test_invalid_format_rejected(self, hub, transport):
        notification = object.__new__(Notification)
        object.__setattr__(notification, "format", "bogus")
        object.__setattr__(notification, "payload", b"{}")

        with pytest.raises(InvalidFormatError):
            hub.send(notification)

        transport.execute.assert_not_called()

    def test_fresh_expiry_per_call(self, transport):
        expiry_func = MagicMock(side_effect=[EXPIRY, EXPIRY + timedelta(seconds=1)])
        hub = NotificationHub(
            endpoint=HubEndpoint(BASE_URL),
            credentials=HubCredentials("testKeyName", "testKeyValue"),
            transport=transport,
            expiry_time_func=expiry_func,
        )
        notification = Notification(NotificationFormat.TEMPLATE, b"{}")

        hub.send(notification)
        hub.send(notification)

        tokens = [call.args[0].headers["Authorization"] for call in transport.execute.call_args_list]
        assert "se=123" in tokens[0]
        assert "se=124" in tokens[1]
        assert expiry_func.call_count == 2


class TestSchedule:
    """Tests for NotificationHub.schedule"""

    @pytest.fixture
    def notification(self):
        return Notification(NotificationFormat.TEMPLATE, b"test_payload")

    def test_schedule_future(self, hub, transport, notification):
        hub.schedule(notification, NOW + timedelta(minutes=1), ["tag1", "tag2"])

        request = _sent_request(transport)
        assert request.url == SCH_URL
        assert request.headers["ServiceBusNotification-ScheduleTime"] == "2024-01-01T12:01:00"
        assert request.headers["ServiceBusNotification-Tags"] == "tag1 || tag2"
        assert request.body == b"test_payload"

    def test_schedule_outdated(self, hub, transport, notification):
        hub.schedule(notification, NOW - timedelta(minutes=1), ["tag1", "tag2"])

        request = _sent_request(transport)
        assert request.url == MSG_URL
        assert "ServiceBusNotification-ScheduleTime" not in request.headers
        assert request.headers["ServiceBusNotification-Tags"] == "tag1 || tag2"

    def test_schedule_now_sends_immediately(self, hub, transport, notification):
        hub.schedule(notification, NOW)

        assert _sent_request(transport).url == MSG_URL

    def test_schedule_time_in_utc(self, hub, transport, notification):
        delivery = (NOW + timedelta(hours=2)).astimezone(timezone(timedelta(hours=8)))

        hub.schedule(notification, delivery)

        request = _sent_request(transport)
        assert request.headers["ServiceBusNotification-ScheduleTime"] == "2024-01-01T14:00:00"

    def test_naive_delivery_time_is_utc(self, hub, transport, notification):
        hub.schedule(notification, datetime(2024, 1, 1, 12, 0, 30))

        request = _sent_request(transport)
        assert request.url == SCH_URL
        assert request.headers["ServiceBusNotification-ScheduleTime"] == "2024-01-01T12:00:30"

    def test_schedule_with_system_clock(self, transport, notification):
        hub = NotificationHub(
            endpoint=HubEndpoint(BASE_URL),
            credentials=HubCredentials("testKeyName", "testKeyValue"),
            transport=transport,
        )

        hub.schedule(notification, datetime.now(timezone.utc) + timedelta(minutes=1))
        hub.schedule(notification, datetime.now(timezone.utc) - timedelta(minutes=1))

        urls = [call.args[0].url for call in transport.execute.call_args_list]
        assert urls == [SCH_URL, MSG_URL]

    def test_schedule_error(self, hub, transport):
        transport.execute.side_effect = Exception("test schedule error")

        with pytest.raises(TransportError, match="test schedule error"):
            hub.schedule(
                Notification(NotificationFormat.ANDROID, b"test payload"),
                NOW + timedelta(minutes=1),
            )

        assert _sent_request(transport).url == SCH_URL


class TestConstruction:
    """Tests for NotificationHub factories"""

    def test_from_connection_string(self, transport):
        hub = NotificationHub.from_connection_string(CONNECTION_STRING, "testhub", transport=transport)

        assert hub.endpoint.base_url == (
            "https://testhub-ns.servicebus.windows.net/testhub?api-version=2015-01"
        )
        assert hub.credentials == HubCredentials("testAccessKeyName", "testAccessKey")
        assert hub.transport is transport

    def test_from_malformed_connection_string(self, transport):
        hub = NotificationHub.from_connection_string("wrong_connection_string", "testhub", transport=transport)

        assert hub.credentials == HubCredentials("", "")
        assert hub.endpoint.host == ""
        assert hub.endpoint.base_url.endswith("/testhub?api-version=2015-01")

    def test_malformed_hub_still_sends(self, transport):
        hub = NotificationHub.from_connection_string("wrong_connection_string", "testhub", transport=transport)

        hub.send(Notification(NotificationFormat.TEMPLATE, b"{}"))

        params = _token_params(_sent_request(transport))
        assert params["skn"] == ""

    def test_default_transport(self):
        hub = NotificationHub.from_connection_string(CONNECTION_STRING, "testhub")

        assert isinstance(hub.transport, RequestsTransport)

    def test_from_config(self):
        config = HubConfig(connection_string=CONNECTION_STRING, hub_path="testhub", timeout=3.0)

        hub = NotificationHub.from_config(config)

        assert isinstance(hub.transport, RequestsTransport)
        assert hub.transport.timeout == 3.0
        assert hub.endpoint.url_for("messages").startswith(
            "https://testhub-ns.servicebus.windows.net/testhub/messages"
        )
