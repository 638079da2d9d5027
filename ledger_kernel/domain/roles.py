"""
Well-known account roles.

The event poster never refers to accounts by display name.  It asks for a
role; the RoleResolver binds each role to one account id at startup.
DEFAULT_ROLE_NAMES records the display name each role is seeded under.
"""

from enum import Enum


class AccountRole(str, Enum):
    """Accounts the event poster needs to exist."""

    CASH = "cash"
    INVENTORY = "inventory"
    ACCOUNTS_RECEIVABLE = "accounts_receivable"
    ACCOUNTS_PAYABLE = "accounts_payable"
    SALES_REVENUE = "sales_revenue"
    SALES_TAX_PAYABLE = "sales_tax_payable"
    COST_OF_GOODS_SOLD = "cost_of_goods_sold"


DEFAULT_ROLE_NAMES: dict[AccountRole, str] = {
    AccountRole.CASH: "Cash",
    AccountRole.INVENTORY: "Inventory",
    AccountRole.ACCOUNTS_RECEIVABLE: "Accounts Receivable",
    AccountRole.ACCOUNTS_PAYABLE: "Accounts Payable",
    AccountRole.SALES_REVENUE: "Sales Revenue",
    AccountRole.SALES_TAX_PAYABLE: "Sales Tax Payable",
    AccountRole.COST_OF_GOODS_SOLD: "Cost of Goods Sold",
}
