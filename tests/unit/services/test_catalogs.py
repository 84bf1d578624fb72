"""Unit tests for catalog construction and loading"""

import pytest
import yaml
from src.adapter.services.catalog_loader import build_catalogs, load_catalogs
from src.app.services.activity_price_catalog import ActivityPriceCatalog, CatalogConfigError
from src.app.services.plan_catalog import PlanCatalog
from src.domain.activity_price import ActivityPriceRule
from src.domain.plan import Plan


def _plan(level, status="ACTIVE"):
    return Plan(
        level=level, name=f"Level {level}", price=level * 1000, credit_amount=level * 1000,
        bonus_credit=0, total_credit=level * 1000, expiry_days=30, status=status,
    )


class TestActivityPriceCatalog:

    def test_duplicate_activity_key_fails_fast(self):
        rule = ActivityPriceRule(activity_key="PRODUCT_BOOST", price_type="FIXED", base_price=30000)

        with pytest.raises(CatalogConfigError, match="PRODUCT_BOOST"):
            ActivityPriceCatalog([rule, rule])

    def test_lookup(self):
        catalog = ActivityPriceCatalog(
            [ActivityPriceRule(activity_key="VIDEO_UPLOAD", price_type="FIXED", base_price=15000)]
        )

        assert catalog.get("VIDEO_UPLOAD").base_price == 15000
        assert catalog.get("MISSING") is None
        assert "VIDEO_UPLOAD" in catalog
        assert len(catalog) == 1


class TestPlanCatalog:

    def test_duplicate_level_fails_fast(self):
        with pytest.raises(CatalogConfigError):
            PlanCatalog([_plan(1), _plan(1)])

    def test_active_plans_sorted_by_level(self):
        catalog = PlanCatalog([_plan(3), _plan(1), _plan(2, status="INACTIVE")])

        assert [p.level for p in catalog.active_plans()] == [1, 3]

    def test_inactive_plan_not_purchasable(self):
        catalog = PlanCatalog([_plan(2, status="INACTIVE")])

        assert catalog.get(2) is not None
        assert catalog.get_purchasable(2) is None


class TestCatalogLoader:

    def test_seed_catalog(self, activity_catalog, plan_catalog):
        """
        Given: The shipped catalog.yaml
        When: It is loaded
        Then: Five activities and six plans with the seed prices are available
        """
        assert len(activity_catalog) == 5
        assert activity_catalog.get("PRODUCT_BOOST").base_price == 30000
        assert activity_catalog.get("SEND_BROADCAST").unit_name == "message"

        assert [p.level for p in plan_catalog.active_plans()] == [1, 2, 3, 4, 5, 6]
        level_1 = plan_catalog.get(1)
        assert (level_1.credit_amount, level_1.bonus_credit, level_1.total_credit) == (0, 200000, 200000)
        assert level_1.expiry_days == 60
        assert plan_catalog.get(2).is_popular

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump({
            "activities": [
                {"activity_key": "PRODUCT_BOOST", "price_type": "FIXED", "base_price": 30000,
                 "requires_active_plan": False},
            ],
            "plans": [
                {"level": 1, "name": "Free", "price": 0, "credit_amount": 0, "bonus_credit": 100,
                 "total_credit": 100, "expiry_days": 10},
            ],
        }))

        activity_catalog, plan_catalog = load_catalogs(str(path))

        assert activity_catalog.get("PRODUCT_BOOST").requires_active_plan is False
        assert plan_catalog.get(1).total_credit == 100

    def test_duplicate_keys_in_file_fail(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        entry = {"activity_key": "PRODUCT_BOOST", "price_type": "FIXED", "base_price": 30000}
        path.write_text(yaml.safe_dump({"activities": [entry, entry], "plans": []}))

        with pytest.raises(CatalogConfigError):
            load_catalogs(str(path))

    def test_bad_total_credit_fails(self):
        data = {
            "activities": [],
            "plans": [{"level": 1, "name": "Bad", "price": 0, "credit_amount": 10, "bonus_credit": 10,
                       "total_credit": 25, "expiry_days": 10}],
        }

        with pytest.raises(CatalogConfigError):
            build_catalogs(data)

    def test_missing_file_fails(self, tmp_path):
        with pytest.raises(CatalogConfigError):
            load_catalogs(str(tmp_path / "missing.yaml"))

    def test_non_mapping_fails(self):
        with pytest.raises(CatalogConfigError):
            build_catalogs(["not", "a", "mapping"])
