import json
from unittest.mock import MagicMock

import pytest

from models import ErrorKind
from service_modules.api_client import ApiClient, TransportResponse
from service_modules.attendance_service import AttendanceService
from service_modules.expense_service import MAX_RECEIPT_SIZE, ExpenseService
from service_modules.gym_service import GymService
from service_modules.membership_service import MembershipService
from service_modules.review_service import ReviewService
from service_modules.token_storage import MemoryTokenStorage
from service_modules.trainer_service import TrainerService

EXPENSE = {"date": "2024-01-20", "amount": 250, "category": "SUPPLIES",
           "paymentMethod": "CASH", "paidById": "1"}


@pytest.fixture
def mock_transport():
    transport = MagicMock()
    transport.send.return_value = TransportResponse(200, {"success": True, "data": {}})
    return transport


@pytest.fixture
def mock_api(mock_transport):
    return ApiClient(mock_transport, MemoryTokenStorage(token="tok"))


def last_request(transport):
    return transport.send.call_args[0][0]


@pytest.mark.parametrize("call", [
    lambda api: GymService(api).create_gym({"name": "X", "address": "1 Road", "phone": "12", "fees": {"monthlyFee": 10}}),
    lambda api: GymService(api).update_gym(1, {"fees": {"monthlyFee": -5}}),
    lambda api: MembershipService(api).create([], 3, "2024-02-01"),
    lambda api: MembershipService(api).create([1], 2, "2024-02-01"),
    lambda api: MembershipService(api).reject(2, 1, ""),
    lambda api: AttendanceService(api).check_in(0),
    lambda api: AttendanceService(api).check_out("1"),
    lambda api: TrainerService(api).create({"firstName": "A", "lastName": "B", "phone": "abc"}),
    lambda api: TrainerService(api).set_status("t1", "retired"),
    lambda api: ExpenseService(api).create(dict(EXPENSE, amount=0)),
    lambda api: ExpenseService(api).create(dict(EXPENSE, date="2024-01-01garbage")),
    lambda api: ExpenseService(api).update("e1", {"date": "2024-01-01T00:00"}),
    lambda api: ExpenseService(api).list({"category": "FOOD"}),
    lambda api: ExpenseService(api).create(EXPENSE, receipt=("notes.txt", b"hi", "text/plain")),
    lambda api: ExpenseService(api).create(EXPENSE, receipt=("big.pdf", b"0" * (MAX_RECEIPT_SIZE + 1), "application/pdf")),
    lambda api: ReviewService(api).list(rating=6),
    lambda api: ReviewService(api).reply("1", "   "),
])
def test_invalid_input_never_dispatched(call, mock_api, mock_transport):
    result = call(mock_api)
    assert not result.success
    assert result.error == ErrorKind.VALIDATION_ERROR
    mock_transport.send.assert_not_called()


def test_update_sends_only_changed_fields(mock_api, mock_transport):
    TrainerService(mock_api).update("t1", {"notes": "Morning shifts"})
    outgoing = last_request(mock_transport)
    assert outgoing.method == "PUT"
    assert outgoing.endpoint == "/trainers/t1"
    assert json.loads(outgoing.data) == {"notes": "Morning shifts"}


def test_expense_filters_drop_all_category(mock_api, mock_transport):
    ExpenseService(mock_api).list({"category": "all", "search": "rent"})
    assert last_request(mock_transport).params == {"search": "rent"}


def test_expense_receipt_goes_multipart(mock_api, mock_transport):
    receipt = ("bill.jpg", b"jpeg-bytes", "image/jpeg")
    ExpenseService(mock_api).create(EXPENSE, receipt=receipt)

    outgoing = last_request(mock_transport)
    assert outgoing.files == {"receipt": receipt}
    assert outgoing.data["amount"] == "250.0"
    assert outgoing.data["category"] == "SUPPLIES"


def test_trainer_list_coerces_empty_success(mock_api):
    result = TrainerService(mock_api).list()
    assert result.success
    assert result.data == []


def test_services_against_fixture_backend(owner_store):
    api = owner_store.api

    gyms = GymService(api).list_gyms()
    assert gyms.data["totalElements"] == 2

    created = GymService(api).create_gym({
        "name": "Core Club", "address": "9 Main Street", "phone": "+919812345678",
        "fees": {"monthlyFee": 799},
    })
    assert created.success
    assert created.data["ownerId"] == 1

    assert TrainerService(api).set_status("t3", "active").data["status"] == "active"
    assert ReviewService(api).reply("1", "Thank you!").data["responded"] is True
    assert MembershipService(api).approve(2, 1).data["status"] == "APPROVED"

    expenses = ExpenseService(api).list({"startDate": "2024-01-06"})
    assert [e["id"] for e in expenses.data] == ["e4", "e3"]


def test_member_services_against_fixture_backend(member_store):
    api = member_store.api

    membership = MembershipService(api).create([1], 6, "2024-03-01")
    assert membership.data["totalAmount"] == round(999.99 * 6, 2)

    visit = AttendanceService(api).check_in(1)
    assert visit.data["status"] == "CHECKED_IN"
    assert AttendanceService(api).check_out(1).data["status"] == "CHECKED_OUT"

    history = AttendanceService(api).my_attendance(size=2)
    assert len(history.data["content"]) == 2
    assert history.data["totalElements"] == 3

    forbidden = ExpenseService(api).list()
    assert forbidden.error == ErrorKind.UNAUTHORIZED
    assert forbidden.status_code == 403
