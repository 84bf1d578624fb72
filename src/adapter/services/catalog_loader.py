"""Catalog Loader

Reads activity price rules and plans from a YAML file once at startup.
"""

import logging
from typing import Any, Dict, Tuple
import yaml
from pydantic import ValidationError
from src.app.services.activity_price_catalog import ActivityPriceCatalog, CatalogConfigError
from src.app.services.plan_catalog import PlanCatalog
from src.domain.activity_price import ActivityPriceRule
from src.domain.plan import Plan

logger = logging.getLogger(__name__)


def build_catalogs(data: Dict[str, Any]) -> Tuple[ActivityPriceCatalog, PlanCatalog]:
    """
    Build both catalogs from parsed configuration

    Args:
        data: Mapping with ``activities`` and ``plans`` lists

    Raises:
        CatalogConfigError: On malformed entries or duplicate keys
    """
    if not isinstance(data, dict):
        raise CatalogConfigError("Catalog must be a mapping with 'activities' and 'plans'")

    activities = data.get("activities") or []
    plans = data.get("plans") or []
    if not isinstance(activities, list) or not isinstance(plans, list):
        raise CatalogConfigError("'activities' and 'plans' must be lists")

    try:
        rules = [ActivityPriceRule(**entry) for entry in activities]
        plan_models = [Plan(**entry) for entry in plans]
    except (ValidationError, TypeError) as e:
        raise CatalogConfigError(f"Invalid catalog entry: {e}") from e

    return ActivityPriceCatalog(rules), PlanCatalog(plan_models)


def load_catalogs(path: str) -> Tuple[ActivityPriceCatalog, PlanCatalog]:
    """
    Load and validate the catalog file

    Args:
        path: Path to the YAML catalog

    Returns:
        Tuple of (ActivityPriceCatalog, PlanCatalog)

    Raises:
        CatalogConfigError: If the file is missing or invalid
    """
    try:
        with open(path, "r") as r_file:
            data = yaml.safe_load(r_file)
    except (OSError, yaml.YAMLError) as e:
        raise CatalogConfigError(f"Cannot read catalog {path}: {e}") from e

    activity_catalog, plan_catalog = build_catalogs(data)
    logger.info(
        f"Loaded catalog from {path}: {len(activity_catalog)} activities, "
        f"{len(plan_catalog)} plans"
    )
    return activity_catalog, plan_catalog
