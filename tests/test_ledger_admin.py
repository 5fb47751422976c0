from click.testing import CliRunner

import ledger_admin
from db_engine import init_db
from services import TransactionService
from tests.conftest import OWNER


def test_init_creates_tables():
    runner = CliRunner()
    res = runner.invoke(ledger_admin.main, ['init'])
    assert res.exit_code == 0, res.output

    res = runner.invoke(ledger_admin.main, ['list', OWNER])
    assert res.exit_code == 0, res.output
    assert "0 transaction(s)" in res.output


def test_list_prints_ledger():
    init_db()
    service = TransactionService()
    service.create(OWNER, {"amount": "-50", "date": "2024-01-10", "description": "groceries"})
    service.create(OWNER, {"amount": "100", "date": "2024-01-05", "description": "refund"})

    res = CliRunner().invoke(ledger_admin.main, ['list', OWNER])
    assert res.exit_code == 0, res.output
    out = res.output.splitlines()
    assert out[0].startswith("2024-01-10")
    assert "-50.00" in out[0]
    assert "groceries" in out[0]
    assert out[1].startswith("2024-01-05")
    assert out[-1] == "2 transaction(s)"


def test_list_reports_store_failure():
    res = CliRunner().invoke(ledger_admin.main, ['list', OWNER])
    assert res.exit_code == 1
    assert "Could not list transactions" in res.output


def test_list_requires_owner():
    res = CliRunner().invoke(ledger_admin.main, ['list'])
    assert res.exit_code == 2
