from conftest import DEMO_CODE


def sign_in(client, phone):
    response = client.post("/api/v1/auth/verify-otp", json={"phone": phone, "otp": DEMO_CODE})
    assert response.status_code == 200
    return response.json()["data"]["token"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "backend_mode": "fixture"}


def test_send_otp_envelope(client):
    response = client.post("/api/v1/auth/send-otp", json={"phone": "9999999999", "type": "LOGIN"})
    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["message"] == "OTP sent successfully"
    assert body["data"]["expiresIn"] == 300
    assert body["timestamp"].endswith("Z")


def test_wrong_code_error_envelope(client):
    response = client.post("/api/v1/auth/verify-otp", json={"phone": "9999999999", "otp": "111111"})
    assert response.status_code == 400
    assert response.json()["errorCode"] == "INVALID_CODE"
    assert response.json()["success"] is False


def test_malformed_json_is_422(client):
    response = client.post("/api/v1/auth/send-otp", content=b"{not json",
                           headers={"Content-Type": "application/json"})
    assert response.status_code == 422
    assert response.json()["errorCode"] == "VALIDATION_ERROR"


def test_profile_with_bearer_token(client):
    token = sign_in(client, "owner9999999999")
    response = client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "OWNER"


def test_profile_with_corrupt_token_is_401(client):
    response = client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer corrupted"})
    assert response.status_code == 401
    assert response.json()["errorCode"] == "UNAUTHORIZED"


def test_profile_without_token_is_401(client):
    assert client.get("/api/v1/auth/profile").status_code == 401


def test_unknown_path_is_404(client):
    assert client.get("/api/v1/no/such/thing").status_code == 404


def test_path_and_query_params(client):
    token = sign_in(client, "owner9999999999")
    headers = {"Authorization": f"Bearer {token}"}

    members = client.get("/api/v1/gyms/1/members", params={"status": "INACTIVE"}, headers=headers).json()
    assert [m["name"] for m in members["data"]["content"]] == ["Emily Davis"]

    status = client.patch("/api/v1/trainers/t3/status", json={"status": "active"}, headers=headers)
    assert status.json()["data"]["status"] == "active"


def test_multipart_receipt_upload(client):
    token = sign_in(client, "owner9999999999")
    response = client.post(
        "/api/v1/expenses",
        data={"date": "2024-01-20", "amount": "99", "category": "SUPPLIES",
              "paymentMethod": "UPI", "paidById": "1"},
        files={"receipt": ("receipt.pdf", b"%PDF-1.4", "application/pdf")},
        headers={"Authorization": f"Bearer {token}"},
    )
    data = response.json()["data"]
    assert response.status_code == 200
    assert data["amount"] == 99.0
    assert data["receiptUrl"] == "/uploads/receipts/receipt.pdf"


def test_member_cannot_list_expenses(client):
    token = sign_in(client, "9999999999")
    response = client.get("/api/v1/expenses", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
    assert response.json()["errorCode"] == "UNAUTHORIZED"
