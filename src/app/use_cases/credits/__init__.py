"""Credit ledger and activity consumption use cases"""
from .resolve_activity_price import ResolveActivityPrice
from .list_activity_prices import ListActivityPrices
from .consume_activity import ConsumeActivity
from .add_credit import AddCredit
from .deduct_credit import DeductCredit
from .get_balance import GetBalance
from .list_transactions import ListTransactions
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    PriceQuoteDTO,
    ActivityPriceDTO,
    TransactionDTO,
    ConsumeActivityCommandDTO,
    ConsumptionReceiptDTO,
    AddCreditCommandDTO,
    DeductCreditCommandDTO,
    LedgerMutationResponseDTO,
    BalanceResponseDTO,
    ListTransactionsResponseDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "ResolveActivityPrice",
    "ListActivityPrices",
    "ConsumeActivity",
    "AddCredit",
    "DeductCredit",
    "GetBalance",
    "ListTransactions",
    "ReconcileLedger",
    "PriceQuoteDTO",
    "ActivityPriceDTO",
    "TransactionDTO",
    "ConsumeActivityCommandDTO",
    "ConsumptionReceiptDTO",
    "AddCreditCommandDTO",
    "DeductCreditCommandDTO",
    "LedgerMutationResponseDTO",
    "BalanceResponseDTO",
    "ListTransactionsResponseDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
]
