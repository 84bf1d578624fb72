"""Error codes returned in ``Error.code`` by use cases and services"""


class ErrorCode:
    # Catalog lookups
    UNKNOWN_ACTIVITY_KIND = "UNKNOWN_ACTIVITY_KIND"
    UNKNOWN_PLAN_LEVEL = "UNKNOWN_PLAN_LEVEL"

    # Malformed input
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_ACCOUNT_ID = "INVALID_ACCOUNT_ID"

    # Business rules
    INSUFFICIENT_CREDIT = "INSUFFICIENT_CREDIT"
    NO_ACTIVE_PLAN = "NO_ACTIVE_PLAN"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"

    # Unexpected failures, one per operation
    CONSUME_ACTIVITY_FAILED = "CONSUME_ACTIVITY_FAILED"
    ADD_CREDIT_FAILED = "ADD_CREDIT_FAILED"
    DEDUCT_CREDIT_FAILED = "DEDUCT_CREDIT_FAILED"
    PURCHASE_PLAN_FAILED = "PURCHASE_PLAN_FAILED"
    EXPIRE_PLANS_FAILED = "EXPIRE_PLANS_FAILED"
    GET_BALANCE_FAILED = "GET_BALANCE_FAILED"
    LIST_TRANSACTIONS_FAILED = "LIST_TRANSACTIONS_FAILED"
    GET_PLAN_STATUS_FAILED = "GET_PLAN_STATUS_FAILED"
    RECONCILIATION_FAILED = "RECONCILIATION_FAILED"
