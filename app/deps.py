"""Process-wide service objects shared by the routers.

Built lazily on first use so importing the app never touches the store.
Tests swap them through ``app.dependency_overrides``.
"""
import logging
from typing import Optional

from partnerhub.companies import PartnerBook
from partnerhub.oracle_client import OracleClient
from partnerhub.prospector import ProspectingSession
from partnerhub.storage import CompanyRepository, KeyValueStore, MapViewStore, RecentSearches, build_store

logger = logging.getLogger(__name__)

_store: Optional[KeyValueStore] = None
_book: Optional[PartnerBook] = None
_session: Optional[ProspectingSession] = None


def get_store() -> KeyValueStore:
    global _store
    if _store is None:
        _store = build_store()
        logger.info("store ready backend=%s", type(_store).__name__)
    return _store


def get_book() -> PartnerBook:
    global _book
    if _book is None:
        _book = PartnerBook.bootstrap(CompanyRepository(get_store()))
    return _book


def get_recent() -> RecentSearches:
    return RecentSearches(get_store())


def get_map_view() -> MapViewStore:
    return MapViewStore(get_store())


def get_session() -> ProspectingSession:
    global _session
    if _session is None:
        _session = ProspectingSession(OracleClient(), recent=get_recent())
    return _session
