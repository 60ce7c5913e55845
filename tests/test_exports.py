import datetime as dt
import json

import pytest

from partnerhub import exports
from partnerhub.errors import ExportError, RestoreError
from schemas.company import (
    Broker,
    CnpjDocument,
    ContactHistoryEntry,
    ContactType,
    CpfDocument,
    CreciDocument,
    Status,
)


def test_csv_quotes_and_doubles_inner_quotes(make_company):
    out = exports.export_csv([make_company(name='Imóveis "Premium"', broker_count=7)])
    assert out.startswith("\ufeff")
    header, row = out.lstrip("\ufeff").splitlines()
    assert header == "Nome da Empresa,CNPJ/CPF,Telefone,Status,Gestor da Parceria,CRECI,UF CRECI,Último Contato,Data Registro,Equipe"
    assert row.startswith('"Imóveis ""Premium""",')
    assert row.endswith(",7")
    assert '"2024-01-10"' in row


def test_csv_carries_creci_columns(make_company):
    company = make_company(document=CnpjDocument(cnpj="1", creci="J-123", creci_uf="SP"))
    row = exports.export_csv([company]).splitlines()[1]
    assert '"J-123","SP"' in row


def test_csv_of_empty_collection_is_header_only():
    assert exports.export_csv([]).count("\n") == 1


def test_txt_ledger_is_fixed_width_and_pipe_free(make_company):
    companies = [make_company(name="Alfa"), make_company(name="Beta", partnership_manager="")]
    out = exports.export_txt(companies, now=dt.datetime(2024, 5, 1, 9, 30))
    lines = out.splitlines()
    assert lines[0] == "LISTA DE PARCEIROS - PORTAL PARTNERHUB"
    assert lines[1] == "Exportado em: 01/05/2024, 09:30:00"
    assert lines[2] == "-" * 100
    assert "|" not in out
    assert lines[5].startswith("Alfa".ljust(30) + "  ")
    assert lines[6].endswith("N/A")


def test_txt_refuses_empty_book():
    with pytest.raises(ExportError):
        exports.export_txt([])


def test_json_backup_is_two_space_indented(make_company):
    out = exports.export_json([make_company()])
    assert out.startswith("[\n  {\n    ")


def test_json_round_trip(make_company):
    companies = [
        make_company(
            contact_history=[
                ContactHistoryEntry(
                    id="h1",
                    date=dt.date(2024, 3, 20),
                    type=ContactType.MEETING,
                    summary="Metas",
                    next_contact_date=dt.date(2024, 4, 1),
                )
            ],
            brokers=[Broker(id="b1", name="Juliana", creci="998877", creci_uf="SP")],
        ),
        make_company(document=CpfDocument(cpf="123.456.789-00"), status=Status.INACTIVE),
        make_company(document=CreciDocument(creci="555", legacy_number="555")),
    ]
    assert exports.parse_backup(exports.export_json(companies)) == companies


def test_json_round_trip_of_empty_collection():
    assert exports.parse_backup(exports.export_json([])) == []


def test_legacy_flat_backup_is_accepted():
    legacy = [
        {
            "id": "1",
            "name": "Horizonte",
            "cnpj": "12.345.678/0001-99",
            "docType": "CNPJ",
            "creci": "J-1",
            "creciUF": "SP",
            "registrationDate": "2023-10-15",
            "brokerCount": 5,
            "commissionRate": 5,
            "status": "Ativo",
            "hiringManager": "Ricardo",
            "location": {"lat": -23.5, "lng": -46.6},
            "contactHistory": [],
            "brokers": [{"id": "b1", "name": "Juliana", "creci": "1", "creciUF": "SP"}],
        }
    ]
    [company] = exports.parse_backup(json.dumps(legacy))
    assert company.document == CnpjDocument(cnpj="12.345.678/0001-99", creci="J-1", creci_uf="SP")
    assert company.broker_count == 5
    assert company.brokers[0].creci_uf == "SP"


@pytest.mark.parametrize("missing", ["id", "name"])
def test_restore_rejects_record_missing_required_field(book, make_company, missing):
    book.restore([make_company(name="Existente")])
    before = book.list()
    records = json.loads(exports.export_json([make_company(), make_company()]))
    del records[0][missing]
    with pytest.raises(RestoreError):
        exports.restore_from_json(book, json.dumps(records), confirmed=True)
    assert book.list() == before


@pytest.mark.parametrize("content", ["{not json", '{"id": "1"}', "42"])
def test_restore_rejects_malformed_files(book, content):
    with pytest.raises(RestoreError):
        exports.restore_from_json(book, content, confirmed=True)
    assert book.list() == []


def test_restore_requires_confirmation(book, make_company):
    backup = exports.export_json([make_company(name="Nova")])
    with pytest.raises(RestoreError):
        exports.restore_from_json(book, backup, confirmed=False)
    assert book.list() == []

    restored = exports.restore_from_json(book, backup.encode("utf-8"), confirmed=True)
    assert [c.name for c in restored] == ["Nova"]
    assert [c.name for c in book.list()] == ["Nova"]
