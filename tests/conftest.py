import copy
import datetime as dt
import os
import sys

import pytest


def _ensure_repo_on_path() -> None:
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if root not in sys.path:
        sys.path.append(root)


_ensure_repo_on_path()
os.environ.setdefault("OPENAI_API_KEY", "test")
# Keep structured event logs on stdout only
os.environ.setdefault("ENVIRONMENT", "test")


class MemoryStore:
    """Dict-backed key-value store; values are deep-copied like a real serializer would."""

    def __init__(self):
        self.data = {}
        self.writes = 0

    def get(self, key):
        return copy.deepcopy(self.data.get(key))

    def set(self, key, value):
        self.writes += 1
        self.data[key] = copy.deepcopy(value)

    def delete(self, key):
        self.data.pop(key, None)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def make_company():
    from schemas.company import CnpjDocument, Company, Status

    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        base = dict(
            id=f"c{counter['n']}",
            name=f"Imobiliária {counter['n']}",
            document=CnpjDocument(cnpj="12.345.678/0001-99"),
            phone="(11) 98888-7777",
            registration_date=dt.date(2024, 1, 10),
            status=Status.ACTIVE,
            hiring_manager="Ricardo Mendes",
            partnership_manager="Ana Paula Santos",
        )
        base.update(overrides)
        return Company(**base)

    return _make


@pytest.fixture
def book(memory_store):
    from partnerhub.companies import PartnerBook
    from partnerhub.storage import CompanyRepository

    return PartnerBook.bootstrap(CompanyRepository(memory_store), seed_demo=False)
