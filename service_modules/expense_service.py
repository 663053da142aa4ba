"""
Expense Service - the owner's expense ledger, with optional receipt uploads.

Receipts travel as multipart form data next to the expense fields; the file
content is handed to the transport as-is.
"""
import os
from typing import Any, Dict, Optional, Tuple

from models import (
    ApiErr, ApiResult, ErrorKind, ExpenseCategory, ExpenseFilters, ExpenseInput,
    ExpenseUpdate, PaymentMethod,
)
from .base import ApiService, payload, validate_input

ALLOWED_RECEIPT_EXTENSIONS = {'pdf', 'png', 'jpg', 'jpeg', 'webp'}
MAX_RECEIPT_SIZE = 10 * 1024 * 1024    # 10MB

CATEGORIES = [{"value": c.value, "label": c.value.replace("_", " ").title()} for c in ExpenseCategory]
PAYMENT_METHODS = [
    {"value": PaymentMethod.CASH.value, "label": "Cash"},
    {"value": PaymentMethod.CARD.value, "label": "Card"},
    {"value": PaymentMethod.UPI.value, "label": "UPI"},
    {"value": PaymentMethod.BANK_TRANSFER.value, "label": "Bank Transfer"},
    {"value": PaymentMethod.WALLET.value, "label": "Wallet"},
]


def _receipt_error(message: str) -> ApiErr:
    return ApiErr(error=ErrorKind.VALIDATION_ERROR, message=f"receipt: {message}")


def check_receipt(receipt: Tuple[str, Any, str]) -> Optional[ApiErr]:
    """receipt is a (filename, content, content_type) triple."""
    filename, content, _ = receipt
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    if ext not in ALLOWED_RECEIPT_EXTENSIONS:
        return _receipt_error(f"Invalid file type. Allowed: {', '.join(sorted(ALLOWED_RECEIPT_EXTENSIONS))}")
    size = len(content) if isinstance(content, (bytes, bytearray)) else None
    if size is None and hasattr(content, "seek") and hasattr(content, "tell"):
        pos = content.tell()
        content.seek(0, os.SEEK_END)
        size = content.tell() - pos
        content.seek(pos)
    if size is not None and size > MAX_RECEIPT_SIZE:
        return _receipt_error(f"File too large. Maximum: {MAX_RECEIPT_SIZE // (1024*1024)}MB")
    return None


def _form_fields(fields: Dict[str, Any]) -> Dict[str, str]:
    return {k: str(v) for k, v in fields.items() if v is not None}


class ExpenseService(ApiService):

    def list(self, filters=None) -> ApiResult:
        query, err = validate_input(ExpenseFilters, filters or {})
        if err:
            return err
        params = payload(query)
        if params.get("category") == "all":
            params.pop("category")
        return self._call("/expenses", params=params)

    def get(self, expense_id: str) -> ApiResult:
        return self._call(f"/expenses/{expense_id}")

    def create(self, data, receipt: Optional[Tuple[str, Any, str]] = None) -> ApiResult:
        expense, err = validate_input(ExpenseInput, data)
        if err:
            return err
        return self._send("/expenses", "POST", payload(expense), receipt)

    def update(self, expense_id: str, data, receipt: Optional[Tuple[str, Any, str]] = None) -> ApiResult:
        changes, err = validate_input(ExpenseUpdate, data)
        if err:
            return err
        return self._send(f"/expenses/{expense_id}", "PUT", payload(changes, partial=True), receipt)

    def delete(self, expense_id: str) -> ApiResult:
        return self._call(f"/expenses/{expense_id}", "DELETE")

    def _send(self, endpoint: str, method: str, fields: Dict[str, Any], receipt) -> ApiResult:
        if receipt is None:
            return self._call(endpoint, method, body=fields)
        err = check_receipt(receipt)
        if err:
            return err
        return self._call(endpoint, method, body=_form_fields(fields), files={"receipt": receipt})
