# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Record coercion and columnar views for the arrears calculations.

Stores hand back either validated models or raw documents (camelCase keys,
string or datetime dates, extra bookkeeping fields). Everything entering the
engine passes through ``coerce_transactions`` / ``coerce_tenancies`` first, so
a malformed record fails loudly with ``DataIntegrityError`` rather than being
skipped.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Type, TypeVar, Union

import pandas as pd
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import DataIntegrityError
from ..core.primitives import enum_to_string
from ..models import RevenueTransaction, Tenancy

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

TransactionLike = Union[RevenueTransaction, Mapping[str, Any]]
TenancyLike = Union[Tenancy, Mapping[str, Any]]

# Document keys as written by the web application, mapped to model fields
DOCUMENT_FIELD_ALIASES: Dict[str, str] = {
    "ownerId": "owner_id",
    "tenancyId": "tenancy_id",
    "propertyId": "property_id",
    "tenantId": "tenant_id",
    "tenantName": "tenant_name",
    "startDate": "start_date",
    "endDate": "end_date",
    "rentAmount": "rent_amount",
    "depositAmount": "deposit_amount",
    "serviceChargeAmount": "service_charge_amount",
    "paymentFrequency": "payment_frequency",
    "dueDate": "due_date",
    "date": "due_date",
    "paymentDate": "payment_date",
    "amountPaid": "amount_paid",
    "invoiceNumber": "invoice_number",
}

TRANSACTION_COLUMNS = [
    "id",
    "tenancy_id",
    "property_id",
    "tenant_id",
    "type",
    "status",
    "amount",
    "amount_paid",
    "outstanding",
    "due_date",
    "payment_date",
]


def _normalise_document(document: Mapping[str, Any], model: Type[BaseModel]) -> Dict[str, Any]:
    """Rename document keys to model fields and drop bookkeeping keys the model does not know."""
    fields = model.model_fields
    data: Dict[str, Any] = {}
    for key, value in document.items():
        name = DOCUMENT_FIELD_ALIASES.get(key, key)
        if name not in fields:
            continue
        # An explicit snake_case key wins over its camelCase alias
        if name in data and key != name:
            continue
        data[name] = value
    return data


def _coerce(records: Iterable[Any], model: Type[RecordT], kind: str) -> List[RecordT]:
    coerced: List[RecordT] = []
    for index, record in enumerate(records):
        if isinstance(record, model):
            coerced.append(record)
            continue
        if not isinstance(record, Mapping):
            raise DataIntegrityError(
                f"unsupported {kind} record type {type(record).__name__} at position {index}"
            )
        record_id = record.get("id")
        try:
            coerced.append(model.model_validate(_normalise_document(record, model)))
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or kind}: {err['msg']}"
                for err in e.errors()
            )
            logger.error(f"Malformed {kind} record {record_id!r}: {problems}")
            raise DataIntegrityError(
                f"malformed {kind}: {problems}", record_id=record_id
            ) from e
    return coerced


def coerce_transactions(records: Iterable[TransactionLike]) -> List[RevenueTransaction]:
    """
    Validate transactions, accepting models or raw documents.

    Raises:
        DataIntegrityError: If any record is malformed (for example an
            unparseable or missing due date). No record is skipped.
    """
    return _coerce(records, RevenueTransaction, "transaction")


def coerce_tenancies(records: Iterable[TenancyLike]) -> List[Tenancy]:
    """Validate tenancies, accepting models or raw documents."""
    return _coerce(records, Tenancy, "tenancy")


def transactions_frame(transactions: Iterable[TransactionLike]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per transaction.

    Dates are ``datetime64`` columns and enums are stored as their string
    values, following the ledger conventions used across the codebase.

    Returns:
        DataFrame with ``TRANSACTION_COLUMNS`` (empty but typed if there are
        no transactions)
    """
    rows = [
        {
            "id": tx.id,
            "tenancy_id": tx.tenancy_id,
            "property_id": tx.property_id,
            "tenant_id": tx.tenant_id,
            "type": enum_to_string(tx.type),
            "status": enum_to_string(tx.status),
            "amount": float(tx.amount),
            "amount_paid": float(tx.amount_paid),
            "outstanding": float(tx.outstanding),
            "due_date": tx.due_date,
            "payment_date": tx.payment_date,
        }
        for tx in coerce_transactions(transactions)
    ]
    frame = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    frame["due_date"] = pd.to_datetime(frame["due_date"])
    frame["payment_date"] = pd.to_datetime(frame["payment_date"])
    for column in ("amount", "amount_paid", "outstanding"):
        frame[column] = frame[column].astype("float64")
    return frame
