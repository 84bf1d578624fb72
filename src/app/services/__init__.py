from .unit_of_work import UnitOfWork
from .activity_price_catalog import ActivityPriceCatalog, CatalogConfigError
from .plan_catalog import PlanCatalog
from .credit_ledger import CreditLedger
from .plan_activation import PlanActivator

__all__ = [
    "UnitOfWork",
    "ActivityPriceCatalog",
    "CatalogConfigError",
    "PlanCatalog",
    "CreditLedger",
    "PlanActivator",
]
