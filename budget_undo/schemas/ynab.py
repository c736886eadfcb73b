"""Schemas for the remote budgeting API.

Amounts are currency units (``Decimal``); the HTTP client converts them
to and from the milliunits used on the wire.
"""
from datetime import date as Date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class ClearedStatus(str, Enum):
    """Transaction cleared status"""
    CLEARED = "cleared"
    UNCLEARED = "uncleared"
    RECONCILED = "reconciled"


class FlagColor(str, Enum):
    """Transaction flag color"""
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"


class AccountType(str, Enum):
    """Account type"""
    CHECKING = "checking"
    SAVINGS = "savings"
    CASH = "cash"
    CREDIT_CARD = "creditCard"
    LINE_OF_CREDIT = "lineOfCredit"
    OTHER_ASSET = "otherAsset"
    OTHER_LIABILITY = "otherLiability"
    MORTGAGE = "mortgage"
    AUTO_LOAN = "autoLoan"
    STUDENT_LOAN = "studentLoan"
    PERSONAL_LOAN = "personalLoan"
    MEDICAL_DEBT = "medicalDebt"
    OTHER_DEBT = "otherDebt"


class ScheduledFrequency(str, Enum):
    """Recurrence of a scheduled transaction"""
    NEVER = "never"
    DAILY = "daily"
    WEEKLY = "weekly"
    EVERY_OTHER_WEEK = "everyOtherWeek"
    TWICE_A_MONTH = "twiceAMonth"
    EVERY_4_WEEKS = "every4Weeks"
    MONTHLY = "monthly"
    EVERY_OTHER_MONTH = "everyOtherMonth"
    EVERY_3_MONTHS = "every3Months"
    EVERY_4_MONTHS = "every4Months"
    TWICE_A_YEAR = "twiceAYear"
    YEARLY = "yearly"
    EVERY_OTHER_YEAR = "everyOtherYear"


# Inputs

class TransactionCreate(BaseModel):
    """Schema for creating a transaction"""
    account_id: str
    date: Date
    amount: Decimal = Field(..., description="Negative for expenses, positive for income")
    payee_id: str | None = None
    payee_name: str | None = Field(None, max_length=200)
    category_id: str | None = None
    memo: str | None = Field(None, max_length=500)
    cleared: ClearedStatus | None = None
    approved: bool | None = None
    flag_color: FlagColor | None = None


class TransactionUpdate(BaseModel):
    """Schema for updating a transaction.

    Only fields that were explicitly set are sent; a field set to ``None``
    is sent as ``null`` and clears the value remotely.
    """
    account_id: str | None = None
    date: Date | None = None
    amount: Decimal | None = None
    payee_id: str | None = None
    payee_name: str | None = Field(None, max_length=200)
    category_id: str | None = None
    memo: str | None = Field(None, max_length=500)
    cleared: ClearedStatus | None = None
    approved: bool | None = None
    flag_color: FlagColor | None = None


class ScheduledTransactionCreate(BaseModel):
    """Schema for creating a scheduled transaction"""
    account_id: str
    date: Date = Field(..., description="First occurrence, in the future")
    amount: Decimal
    payee_id: str | None = None
    payee_name: str | None = Field(None, max_length=200)
    category_id: str | None = None
    memo: str | None = Field(None, max_length=500)
    flag_color: FlagColor | None = None
    frequency: ScheduledFrequency | None = None


class ScheduledTransactionUpdate(BaseModel):
    """Schema for updating a scheduled transaction"""
    account_id: str | None = None
    date: Date | None = None
    amount: Decimal | None = None
    payee_id: str | None = None
    payee_name: str | None = Field(None, max_length=200)
    category_id: str | None = None
    memo: str | None = Field(None, max_length=500)
    flag_color: FlagColor | None = None
    frequency: ScheduledFrequency | None = None


class AccountCreate(BaseModel):
    """Schema for creating an account"""
    name: str = Field(..., min_length=1)
    type: AccountType
    balance: Decimal


class CategoryBudgetUpdate(BaseModel):
    """Schema for setting a category's budgeted amount"""
    budgeted: Decimal


class PayeeUpdate(BaseModel):
    """Schema for renaming a payee"""
    name: str = Field(..., min_length=1, max_length=500)


# Resources

class Transaction(BaseModel):
    """Transaction as returned by the API"""
    id: str
    date: Date
    amount: Decimal
    account_id: str
    account_name: str | None = None
    payee_id: str | None = None
    payee_name: str | None = None
    category_id: str | None = None
    category_name: str | None = None
    memo: str | None = None
    cleared: ClearedStatus | None = None
    approved: bool | None = None
    flag_color: FlagColor | None = None
    transfer_account_id: str | None = None
    deleted: bool = False


class ScheduledTransaction(BaseModel):
    """Scheduled transaction as returned by the API"""
    id: str
    date_first: Date | None = None
    date_next: Date
    frequency: ScheduledFrequency | None = None
    amount: Decimal
    account_id: str
    payee_id: str | None = None
    payee_name: str | None = None
    category_id: str | None = None
    memo: str | None = None
    flag_color: FlagColor | None = None
    deleted: bool = False


class Account(BaseModel):
    """Account as returned by the API"""
    id: str
    name: str
    type: AccountType
    on_budget: bool = True
    closed: bool = False
    note: str | None = None
    balance: Decimal
    cleared_balance: Decimal | None = None
    uncleared_balance: Decimal | None = None
    transfer_payee_id: str | None = None
    deleted: bool = False


class Category(BaseModel):
    """Category as returned by the API"""
    id: str
    category_group_id: str | None = None
    name: str
    hidden: bool = False
    budgeted: Decimal
    activity: Decimal | None = None
    balance: Decimal | None = None
    deleted: bool = False


class Payee(BaseModel):
    """Payee as returned by the API"""
    id: str
    name: str
    transfer_account_id: str | None = None
    deleted: bool = False
