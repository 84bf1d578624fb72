from .unit_of_work import SqlAlchemyUnitOfWork
from .catalog_loader import build_catalogs, load_catalogs
from .database import serialize_sqlite_writers

__all__ = [
    "SqlAlchemyUnitOfWork",
    "build_catalogs",
    "load_catalogs",
    "serialize_sqlite_writers",
]
