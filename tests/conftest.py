import os
import pytest
from config import ROOT_PATH
from src.adapter.services.catalog_loader import load_catalogs

SEED_CATALOG_PATH = os.path.join(ROOT_PATH, "catalog.yaml")


@pytest.fixture(scope="session")
def seed_catalogs():
    """Activity and plan catalogs from the shipped catalog.yaml"""
    return load_catalogs(SEED_CATALOG_PATH)


@pytest.fixture
def activity_catalog(seed_catalogs):
    return seed_catalogs[0]


@pytest.fixture
def plan_catalog(seed_catalogs):
    return seed_catalogs[1]
