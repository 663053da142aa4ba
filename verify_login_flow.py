"""
Smoke-test the OTP sign-in flow against the configured backend.

Uses the headless SessionStore, so the token is kept in the client_storage
table between runs. Pass --logout to end the stored session.
"""
import sys

from models import OtpPurpose
from service_modules.session_service import open_local_session

CONTACT = "9999999999"
DEMO_CODE = "123456"


def test_login_flow():
    store = open_local_session()
    print(f"Restored state: {store.state.status.value}")

    if "--logout" in sys.argv:
        store.end_session()
        print(f"After logout: {store.state.status.value}")
        return

    if store.is_authenticated:
        print(f"PASS: Already signed in as {store.session.display_name} ({store.session.role.value})")
        return

    result = store.request_code(CONTACT, OtpPurpose.LOGIN)
    if not result.success:
        print(f"FAIL: send-otp returned {result.error.value}: {result.message}")
        return
    print(f"PASS: Code requested, expires in {result.data.get('expiresIn')}s")

    result = store.verify_code(CONTACT, "000000")
    if result.success:
        print("FAIL: Wrong code was accepted")
        return
    print(f"PASS: Wrong code rejected with {result.error.value}")

    result = store.verify_code(CONTACT, DEMO_CODE)
    if not result.success:
        print(f"FAIL: verify-otp returned {result.error.value}: {result.message}")
        return
    print(f"PASS: Signed in as {result.data.display_name} ({result.data.role.value})")


if __name__ == "__main__":
    test_login_flow()
