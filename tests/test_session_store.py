import json
from unittest.mock import MagicMock

from models import ErrorKind, OtpPurpose, PendingVerification, Role
from service_modules.api_client import ApiClient, TransportError, TransportResponse
from service_modules.route_guard import AuthStatus
from service_modules.session_service import SessionStore
from service_modules.token_storage import MemoryTokenStorage

from conftest import DEMO_CODE, MEMBER_CONTACT, OWNER_CONTACT


def test_fresh_store_is_unknown_until_restored(store):
    assert store.state.status == AuthStatus.UNKNOWN
    assert store.restore_session().status == AuthStatus.ANONYMOUS
    assert store.session is None


def test_member_sign_in_flow(store, storage):
    sent = store.request_code(MEMBER_CONTACT, OtpPurpose.LOGIN)
    assert sent.success
    assert sent.data["expiresIn"] == 300
    assert store.pending.contact == MEMBER_CONTACT

    wrong = store.verify_code(MEMBER_CONTACT, "000000")
    assert not wrong.success
    assert wrong.error == ErrorKind.INVALID_CODE
    assert store.session is None
    assert storage.get() is None
    assert store.pending is not None

    ok = store.verify_code(MEMBER_CONTACT, DEMO_CODE)
    assert ok.success
    session = ok.data
    assert session.role == Role.MEMBER
    assert session.contact == MEMBER_CONTACT
    assert session.token
    assert storage.get() == session.token
    assert store.pending is None
    assert store.state.status == AuthStatus.AUTHENTICATED
    assert store.state.role == Role.MEMBER


def test_owner_sentinel_and_explicit_role(store):
    assert store.verify_code(OWNER_CONTACT, DEMO_CODE).data.role == Role.OWNER

    other = SessionStore(store.api, MemoryTokenStorage())
    assert other.verify_code(OWNER_CONTACT, DEMO_CODE, role=Role.MEMBER).data.role == Role.MEMBER


def test_invalid_input_never_reaches_transport(storage):
    transport = MagicMock()
    store = SessionStore(ApiClient(transport, storage), storage)

    assert store.request_code("123").error == ErrorKind.VALIDATION_ERROR
    assert store.verify_code(MEMBER_CONTACT, "12ab56").error == ErrorKind.VALIDATION_ERROR
    assert store.verify_code(MEMBER_CONTACT, "12345").error == ErrorKind.VALIDATION_ERROR
    transport.send.assert_not_called()


def test_restore_with_valid_token(store):
    token = store.verify_code(MEMBER_CONTACT, DEMO_CODE).data.token

    storage = MemoryTokenStorage(token=token)
    restored = SessionStore(ApiClient(store.api.transport, storage), storage)
    state = restored.restore_session()

    assert state.status == AuthStatus.AUTHENTICATED
    assert state.role == Role.MEMBER
    assert restored.session.token == token
    assert restored.session.contact == MEMBER_CONTACT


def test_restore_with_corrupt_token_clears_it(transport):
    storage = MemoryTokenStorage(token="not-a-jwt")
    transport.send = MagicMock(wraps=transport.send)
    store = SessionStore(ApiClient(transport, storage), storage)

    assert store.restore_session().status == AuthStatus.ANONYMOUS
    assert storage.get() is None

    # restoring again is a no-op
    assert store.restore_session().status == AuthStatus.ANONYMOUS
    assert transport.send.call_count == 1


def test_restore_clears_token_on_network_failure(storage):
    storage.set("some-token")
    transport = MagicMock()
    transport.send.side_effect = TransportError("connection refused")
    store = SessionStore(ApiClient(transport, storage), storage)

    assert store.restore_session().status == AuthStatus.ANONYMOUS
    assert storage.get() is None


def test_end_session_clears_state_even_when_logout_fails(member_store, storage):
    failing = MagicMock()
    failing.send.side_effect = TransportError("connection refused")
    member_store.api.transport = failing

    state = member_store.end_session()

    assert state.status == AuthStatus.ANONYMOUS
    assert member_store.session is None
    assert storage.get() is None
    failing.send.assert_called_once()


def test_end_session_without_token_skips_logout(storage):
    transport = MagicMock()
    store = SessionStore(ApiClient(transport, storage), storage)

    assert store.end_session().status == AuthStatus.ANONYMOUS
    transport.send.assert_not_called()


def test_resend_cooldown(api, storage):
    now = [1000.0]
    store = SessionStore(api, storage, clock=lambda: now[0])

    assert store.request_code(MEMBER_CONTACT).success
    now[0] += 10
    assert store.resend_available_in(MEMBER_CONTACT) == 20

    again = store.request_code(MEMBER_CONTACT)
    assert again.error == ErrorKind.VALIDATION_ERROR
    assert "20s" in again.message

    assert store.request_code("8888888888").success

    now[0] += 21
    assert store.resend_available_in(MEMBER_CONTACT) == 0
    assert store.request_code(MEMBER_CONTACT).success


def test_pending_verification_records_expiry(api, storage):
    store = SessionStore(api, storage, clock=lambda: 500.0)
    store.request_code(MEMBER_CONTACT, OtpPurpose.SIGNUP)

    assert store.pending.purpose == OtpPurpose.SIGNUP
    assert store.pending.requested_at == 500.0
    assert store.pending.expires_at == 800.0


def test_malformed_verify_response_installs_nothing(storage):
    transport = MagicMock()
    transport.send.return_value = TransportResponse(200, {"success": True, "data": {"user": {}}})
    store = SessionStore(ApiClient(transport, storage), storage)

    result = store.verify_code(MEMBER_CONTACT, DEMO_CODE)

    assert result.error == ErrorKind.NETWORK_ERROR
    assert store.session is None
    assert storage.get() is None


def test_end_session_is_unconditional_when_storage_fails(member_store, storage):
    storage.clear = MagicMock(side_effect=RuntimeError("db down"))

    state = member_store.end_session()

    assert state.status == AuthStatus.ANONYMOUS
    assert member_store.session is None
    assert member_store.pending is None


def test_verify_reports_storage_failure_without_signing_in(store, storage):
    storage.set = MagicMock(side_effect=RuntimeError("disk full"))

    result = store.verify_code(MEMBER_CONTACT, DEMO_CODE)

    assert not result.success
    assert result.error == ErrorKind.NETWORK_ERROR
    assert store.session is None


def test_verify_sends_explicit_or_pending_purpose(storage):
    transport = MagicMock()
    transport.send.return_value = TransportResponse(400, {"success": False, "message": "Invalid OTP",
                                                          "errorCode": "INVALID_CODE"})
    store = SessionStore(ApiClient(transport, storage), storage)

    store.verify_code(MEMBER_CONTACT, DEMO_CODE, purpose=OtpPurpose.RESET)
    assert json.loads(transport.send.call_args[0][0].data)["type"] == "RESET"

    store.resume_pending(PendingVerification(contact=MEMBER_CONTACT, purpose=OtpPurpose.SIGNUP,
                                             requested_at=0.0, expires_at=300.0))
    store.verify_code(MEMBER_CONTACT, DEMO_CODE)
    assert json.loads(transport.send.call_args[0][0].data)["type"] == "SIGNUP"


def test_resumed_request_keeps_its_cooldown(api, storage):
    store = SessionStore(api, storage, clock=lambda: 1010.0)
    store.resume_pending(PendingVerification(contact=MEMBER_CONTACT, purpose=OtpPurpose.LOGIN,
                                             requested_at=1000.0, expires_at=1300.0))

    assert store.resend_available_in(MEMBER_CONTACT) == 20
    assert store.request_code(MEMBER_CONTACT).error == ErrorKind.VALIDATION_ERROR
    assert store.pending.requested_at == 1000.0
