"""YNAB API client - the mutating and reading calls the history layer relies on."""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import BaseModel

from budget_undo.config import settings
from budget_undo.core.exceptions import YNABAPIError
from budget_undo.schemas.ynab import (
    Account,
    AccountCreate,
    Category,
    Payee,
    ScheduledTransaction,
    ScheduledTransactionCreate,
    ScheduledTransactionUpdate,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)
from budget_undo.utils.currency import to_milliunits, to_unit


logger = logging.getLogger(__name__)

TRANSACTION_AMOUNTS = ("amount",)
ACCOUNT_AMOUNTS = ("balance", "cleared_balance", "uncleared_balance")
CATEGORY_AMOUNTS = ("budgeted", "activity", "balance")

ModelT = TypeVar("ModelT", bound=BaseModel)


class BudgetAPI(Protocol):
    """Calls the tracked client and the undo resolver depend on."""

    async def create_transaction(self, budget_id: str, data: TransactionCreate) -> Transaction: ...

    async def update_transaction(
        self, budget_id: str, transaction_id: str, data: TransactionUpdate
    ) -> Transaction: ...

    async def delete_transaction(self, budget_id: str, transaction_id: str) -> Transaction: ...

    async def get_transaction(self, budget_id: str, transaction_id: str) -> Transaction: ...

    async def create_scheduled_transaction(
        self, budget_id: str, data: ScheduledTransactionCreate
    ) -> ScheduledTransaction: ...

    async def update_scheduled_transaction(
        self, budget_id: str, scheduled_transaction_id: str, data: ScheduledTransactionUpdate
    ) -> ScheduledTransaction: ...

    async def delete_scheduled_transaction(
        self, budget_id: str, scheduled_transaction_id: str
    ) -> ScheduledTransaction: ...

    async def get_scheduled_transaction(
        self, budget_id: str, scheduled_transaction_id: str
    ) -> ScheduledTransaction: ...

    async def create_account(self, budget_id: str, data: AccountCreate) -> Account: ...

    async def update_category_budget(
        self, budget_id: str, month: date, category_id: str, budgeted: Decimal
    ) -> Category: ...

    async def get_category(
        self, budget_id: str, category_id: str, month: date | None = None
    ) -> Category: ...

    async def update_payee(self, budget_id: str, payee_id: str, name: str) -> Payee: ...

    async def list_payees(self, budget_id: str) -> list[Payee]: ...


def _to_units(data: dict[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    converted = dict(data)
    for field in fields:
        if converted.get(field) is not None:
            converted[field] = to_unit(converted[field])
    return converted


def _payload(data: BaseModel, fields: tuple[str, ...] = TRANSACTION_AMOUNTS) -> dict[str, Any]:
    """Serialize explicitly set fields, amounts as milliunits."""
    payload = data.model_dump(mode="json", exclude_unset=True)
    for field in fields:
        if payload.get(field) is not None:
            payload[field] = to_milliunits(getattr(data, field))
    return payload


def _parse(
    model: type[ModelT],
    result: dict[str, Any],
    key: str,
    fields: tuple[str, ...] = (),
) -> ModelT:
    """
    Validate one resource out of a response envelope.

    A missing key or a resource that does not fit the model is reported as
    YNABAPIError, like any other unusable response.
    """
    try:
        return model.model_validate(_to_units(result[key], fields))
    except (KeyError, TypeError, ValueError, ArithmeticError) as e:
        raise YNABAPIError(None, f"Unexpected {key} in response: {e}") from e


class YNABClient:
    """Async client for the YNAB REST API."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token if token is not None else settings.YNAB_API_TOKEN
        self._base_url = (base_url or settings.YNAB_BASE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.YNAB_TIMEOUT_SECONDS
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the ``data`` envelope."""
        try:
            response = await self._get_client().request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("YNAB request %s %s failed: %s", method, path, e)
            raise YNABAPIError(None, str(e)) from e

        if response.is_error:
            error = self._error_from_response(response)
            logger.warning("YNAB request %s %s rejected: %s", method, path, error)
            raise error

        try:
            body = response.json()
        except ValueError as e:
            raise YNABAPIError(response.status_code, "Malformed response body") from e
        if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
            raise YNABAPIError(response.status_code, "Malformed response body")
        return body["data"]

    @staticmethod
    def _error_from_response(response: httpx.Response) -> YNABAPIError:
        try:
            body = response.json()
        except ValueError:
            return YNABAPIError(response.status_code, response.text)
        error = (body.get("error") if isinstance(body, dict) else None) or {}
        detail = error.get("detail") or error.get("name") or response.reason_phrase
        return YNABAPIError(response.status_code, detail, error_id=error.get("id"))

    # Transactions

    async def create_transaction(self, budget_id: str, data: TransactionCreate) -> Transaction:
        result = await self._request(
            "POST",
            f"/budgets/{budget_id}/transactions",
            json={"transaction": _payload(data)},
        )
        return _parse(Transaction, result, "transaction", TRANSACTION_AMOUNTS)

    async def update_transaction(
        self,
        budget_id: str,
        transaction_id: str,
        data: TransactionUpdate,
    ) -> Transaction:
        result = await self._request(
            "PUT",
            f"/budgets/{budget_id}/transactions/{transaction_id}",
            json={"transaction": _payload(data)},
        )
        return _parse(Transaction, result, "transaction", TRANSACTION_AMOUNTS)

    async def delete_transaction(self, budget_id: str, transaction_id: str) -> Transaction:
        result = await self._request("DELETE", f"/budgets/{budget_id}/transactions/{transaction_id}")
        return _parse(Transaction, result, "transaction", TRANSACTION_AMOUNTS)

    async def get_transaction(self, budget_id: str, transaction_id: str) -> Transaction:
        result = await self._request("GET", f"/budgets/{budget_id}/transactions/{transaction_id}")
        return _parse(Transaction, result, "transaction", TRANSACTION_AMOUNTS)

    # Scheduled transactions

    async def create_scheduled_transaction(
        self,
        budget_id: str,
        data: ScheduledTransactionCreate,
    ) -> ScheduledTransaction:
        result = await self._request(
            "POST",
            f"/budgets/{budget_id}/scheduled_transactions",
            json={"scheduled_transaction": _payload(data)},
        )
        return _parse(ScheduledTransaction, result, "scheduled_transaction", TRANSACTION_AMOUNTS)

    async def update_scheduled_transaction(
        self,
        budget_id: str,
        scheduled_transaction_id: str,
        data: ScheduledTransactionUpdate,
    ) -> ScheduledTransaction:
        result = await self._request(
            "PUT",
            f"/budgets/{budget_id}/scheduled_transactions/{scheduled_transaction_id}",
            json={"scheduled_transaction": _payload(data)},
        )
        return _parse(ScheduledTransaction, result, "scheduled_transaction", TRANSACTION_AMOUNTS)

    async def delete_scheduled_transaction(
        self,
        budget_id: str,
        scheduled_transaction_id: str,
    ) -> ScheduledTransaction:
        result = await self._request(
            "DELETE",
            f"/budgets/{budget_id}/scheduled_transactions/{scheduled_transaction_id}",
        )
        return _parse(ScheduledTransaction, result, "scheduled_transaction", TRANSACTION_AMOUNTS)

    async def get_scheduled_transaction(
        self,
        budget_id: str,
        scheduled_transaction_id: str,
    ) -> ScheduledTransaction:
        result = await self._request(
            "GET",
            f"/budgets/{budget_id}/scheduled_transactions/{scheduled_transaction_id}",
        )
        return _parse(ScheduledTransaction, result, "scheduled_transaction", TRANSACTION_AMOUNTS)

    # Accounts

    async def create_account(self, budget_id: str, data: AccountCreate) -> Account:
        result = await self._request(
            "POST",
            f"/budgets/{budget_id}/accounts",
            json={"account": _payload(data, ("balance",))},
        )
        return _parse(Account, result, "account", ACCOUNT_AMOUNTS)

    # Categories

    async def update_category_budget(
        self,
        budget_id: str,
        month: date,
        category_id: str,
        budgeted: Decimal,
    ) -> Category:
        result = await self._request(
            "PATCH",
            f"/budgets/{budget_id}/months/{month.isoformat()}/categories/{category_id}",
            json={"category": {"budgeted": to_milliunits(budgeted)}},
        )
        return _parse(Category, result, "category", CATEGORY_AMOUNTS)

    async def get_category(
        self,
        budget_id: str,
        category_id: str,
        month: date | None = None,
    ) -> Category:
        """Get a category; with ``month``, the amounts are that month's."""
        if month is None:
            path = f"/budgets/{budget_id}/categories/{category_id}"
        else:
            path = f"/budgets/{budget_id}/months/{month.isoformat()}/categories/{category_id}"
        result = await self._request("GET", path)
        return _parse(Category, result, "category", CATEGORY_AMOUNTS)

    # Payees

    async def update_payee(self, budget_id: str, payee_id: str, name: str) -> Payee:
        result = await self._request(
            "PATCH",
            f"/budgets/{budget_id}/payees/{payee_id}",
            json={"payee": {"name": name}},
        )
        return _parse(Payee, result, "payee")

    async def list_payees(self, budget_id: str) -> list[Payee]:
        """List all payees of a budget."""
        result = await self._request("GET", f"/budgets/{budget_id}/payees")
        try:
            return [Payee.model_validate(p) for p in result["payees"]]
        except (KeyError, TypeError, ValueError) as e:
            raise YNABAPIError(None, f"Unexpected payees in response: {e}") from e

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
