"""End-to-end tests for the divvy CLI."""

from datetime import date, datetime
from pathlib import Path

import pytest
from typer.testing import CliRunner

from divvy.cli import app
from divvy.config import get_config_path
from divvy.domain.assignment import LedgerEntry
from divvy.domain.models import Description
from divvy.domain.transactions import Transaction
from divvy.store import LedgerFile, load_ledger, load_ledger_file

runner = CliRunner()

ROWS = [
    '"Date","Description","Original Description","Amount","Transaction Type","Category","Account Name","Labels","Notes"\n',
    '"1/01/2023","Coffee","COFFEE SHOP","10.00","debit","Coffee Shops","Checking","",""\n',
    '"1/02/2023","Rent","RENT PAYMENT","20.00","debit","Rent","Checking","",""\n',
]


@pytest.fixture
def transactions_csv(tmp_path: Path) -> Path:
    path = tmp_path / "transactions.csv"
    path.write_text("".join(ROWS), encoding="utf-8")
    return path


def flat(output: str) -> str:
    """Collapse console line wrapping so long messages can be matched."""
    return " ".join(output.split())


def run_assign(ledger_dir: Path, transactions_csv: Path, keys: str, *extra: str):
    return runner.invoke(
        app,
        [
            "assign",
            "--ledger",
            str(ledger_dir),
            "--transactions",
            str(transactions_csv),
            "--settlement-period",
            "0",
            *extra,
        ],
        input=keys,
    )


class TestAssignCommand:
    """Tests for `divvy assign`."""

    def test_assigns_and_reports_totals(self, ledger_dir: Path, transactions_csv: Path) -> None:
        """Should write one entry per decision and print totals."""
        result = run_assign(ledger_dir, transactions_csv, "2\n3\n")

        assert result.exit_code == 0, result.stdout
        entries = load_ledger(ledger_dir)
        assert [e.assignment for e in entries] == [{"Mark": -10.0}, {"Anne": -10.0, "Mark": -10.0}]
        assert "Mark" in result.stdout
        assert "-$20.00" in result.stdout

    def test_second_run_only_offers_new_transactions(self, ledger_dir: Path, transactions_csv: Path) -> None:
        """Should not offer a transaction that already has a ledger entry."""
        first = run_assign(ledger_dir, transactions_csv, "2\nq\n")
        assert first.exit_code == 0, first.stdout
        (only_file,) = list(ledger_dir.iterdir())
        only_file.rename(ledger_dir / "2023-01-01-00-00-00")

        second = run_assign(ledger_dir, transactions_csv, "4\n")

        assert second.exit_code == 0, second.stdout
        assert "Coffee" not in second.stdout
        assert "Rent" in second.stdout
        entries = load_ledger(ledger_dir)
        assert [(e.transaction.description, e.assignment) for e in entries] == [
            ("Coffee", {"Mark": -10.0}),
            ("Rent", {}),
        ]

    def test_nothing_to_do_removes_empty_file(self, ledger_dir: Path, transactions_csv: Path) -> None:
        """Should delete the ledger file created by a run with no new entries."""
        with LedgerFile.create(ledger_dir, datetime(2023, 1, 1)) as ledger_file:
            for txn_date, description in ((date(2023, 1, 1), "Coffee"), (date(2023, 1, 2), "Rent")):
                txn = Transaction(txn_date, Description(description), "", -10.0 if description == "Coffee" else -20.0)
                ledger_file.write(LedgerEntry(txn, {}))

        result = run_assign(ledger_dir, transactions_csv, "")

        assert result.exit_code == 0, result.stdout
        assert "No new transactions found" in flat(result.stdout)
        assert [p.name for p in ledger_dir.iterdir()] == ["2023-01-01-00-00-00"]

    def test_quit_immediately_leaves_no_file(self, ledger_dir: Path, transactions_csv: Path) -> None:
        result = run_assign(ledger_dir, transactions_csv, "q\n")

        assert result.exit_code == 0, result.stdout
        assert list(ledger_dir.iterdir()) == []

    def test_rejects_unknown_choice(self, ledger_dir: Path, transactions_csv: Path) -> None:
        """Should re-prompt until a valid key is given."""
        result = run_assign(ledger_dir, transactions_csv, "x\n1\nq\n")

        assert result.exit_code == 0, result.stdout
        assert "choice 'x' not found" in result.stdout
        assert [e.assignment for e in load_ledger(ledger_dir)] == [{"Anne": -10.0}]

    def test_continue_appends_to_latest(self, ledger_dir: Path, transactions_csv: Path) -> None:
        """Should add entries to the newest existing ledger file."""
        (ledger_dir / "2023-01-01-00-00-00").touch()

        result = run_assign(ledger_dir, transactions_csv, "1\n1\n", "--continue")

        assert result.exit_code == 0, result.stdout
        assert [p.name for p in ledger_dir.iterdir()] == ["2023-01-01-00-00-00"]
        assert len(load_ledger_file(ledger_dir / "2023-01-01-00-00-00")) == 2

    def test_continue_without_files_fails(self, ledger_dir: Path, transactions_csv: Path) -> None:
        result = run_assign(ledger_dir, transactions_csv, "", "--continue")

        assert result.exit_code == 1

    def test_missing_transactions_file(self, ledger_dir: Path, tmp_path: Path) -> None:
        result = run_assign(ledger_dir, tmp_path / "missing.csv", "")

        assert result.exit_code == 1
        assert "does not exist" in flat(result.stdout)

    def test_creates_missing_ledger_dir(self, tmp_path: Path, transactions_csv: Path) -> None:
        ledger_dir = tmp_path / "new-history"

        result = run_assign(ledger_dir, transactions_csv, "q\n")

        assert result.exit_code == 0, result.stdout
        assert ledger_dir.is_dir()

    def test_ledger_path_is_a_file(self, tmp_path: Path, transactions_csv: Path) -> None:
        not_a_dir = tmp_path / "history"
        not_a_dir.write_text("", encoding="utf-8")

        result = run_assign(not_a_dir, transactions_csv, "")

        assert result.exit_code == 1
        assert "is not a directory" in flat(result.stdout)

    def test_negative_settlement_period(self, ledger_dir: Path, transactions_csv: Path) -> None:
        result = runner.invoke(
            app,
            ["assign", "--ledger", str(ledger_dir), "--transactions", str(transactions_csv), "--settlement-period=-1h"],
        )

        assert result.exit_code == 1
        assert "cannot be negative" in flat(result.stdout)

    def test_malformed_source_is_fatal(self, ledger_dir: Path, tmp_path: Path) -> None:
        bad = tmp_path / "bad.csv"
        bad.write_text("1/1/2023,Coffee,10\n", encoding="utf-8")

        result = run_assign(ledger_dir, bad, "")

        assert result.exit_code == 1
        assert list(ledger_dir.iterdir()) == []


class TestCheckCommand:
    """Tests for `divvy check`."""

    def test_reports_unassigned_and_orphans(self, ledger_dir: Path, transactions_csv: Path) -> None:
        """Should list new transactions and entries edited upstream."""
        with LedgerFile.create(ledger_dir, datetime(2023, 1, 1)) as ledger_file:
            ledger_file.write(LedgerEntry(Transaction(date(2023, 1, 1), Description("Coffee"), "", -10.0), {"Mark": -10.0}))
            ledger_file.write(LedgerEntry(Transaction(date(2022, 5, 1), Description("Gym"), "", -30.0), {"Anne": -30.0}))
            ledger_file.write(LedgerEntry(Transaction(date(2022, 5, 2), Description("Fee"), "", -1.0), {}))

        result = runner.invoke(
            app,
            ["check", "--ledger", str(ledger_dir), "--transactions", str(transactions_csv), "--settlement-period", "0"],
        )

        assert result.exit_code == 0, result.stdout
        assert "Rent" in result.stdout
        assert "Gym" in result.stdout
        assert "Fee" not in result.stdout
        assert "1 orphaned entries hidden" in flat(result.stdout)

        shown = runner.invoke(
            app,
            [
                "check",
                "--ledger",
                str(ledger_dir),
                "--transactions",
                str(transactions_csv),
                "--settlement-period",
                "0",
                "--all",
            ],
        )
        assert "Fee" in shown.stdout

    def test_huge_settlement_period_is_rejected(self, ledger_dir: Path, transactions_csv: Path) -> None:
        result = runner.invoke(
            app,
            ["check", "--ledger", str(ledger_dir), "--transactions", str(transactions_csv), "--settlement-period", "200000w"],
        )

        assert result.exit_code == 1
        assert "cannot exceed" in flat(result.stdout)

    def test_check_never_writes(self, ledger_dir: Path, transactions_csv: Path) -> None:
        result = runner.invoke(
            app,
            ["check", "--ledger", str(ledger_dir), "--transactions", str(transactions_csv), "--settlement-period", "0"],
        )

        assert result.exit_code == 0, result.stdout
        assert list(ledger_dir.iterdir()) == []


class TestSumCommand:
    """Tests for `divvy sum` and `divvy ledgers`."""

    @pytest.fixture
    def ledger_file(self, ledger_dir: Path) -> Path:
        with LedgerFile.create(ledger_dir, datetime(2023, 1, 1)) as ledger_file:
            ledger_file.write(LedgerEntry(Transaction(date(2023, 1, 1), Description("a"), "", -10.0), {"Mark": -10.0}))
            ledger_file.write(
                LedgerEntry(Transaction(date(2023, 1, 2), Description("b"), "", -5.0), {"Anne": -2.5, "Mark": -2.5})
            )
        return ledger_file.path

    def test_sums_one_file(self, ledger_file: Path) -> None:
        result = runner.invoke(app, ["sum", str(ledger_file)])

        assert result.exit_code == 0, result.stdout
        assert "-$12.50" in result.stdout
        assert "-$2.50" in result.stdout

    def test_sums_whole_ledger(self, ledger_dir: Path, ledger_file: Path) -> None:
        result = runner.invoke(app, ["sum", "--all", "--ledger", str(ledger_dir)])

        assert result.exit_code == 0, result.stdout
        assert "-$12.50" in result.stdout

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["sum", str(tmp_path / "missing")])

        assert result.exit_code == 1

    def test_undecodable_file_is_reported(self, ledger_dir: Path, ledger_file: Path) -> None:
        """Should exit with a diagnostic when a ledger file is not text."""
        (ledger_dir / "2023-02-01-00-00-00").write_bytes(b"\xff\xfe\x00garbage")

        result = runner.invoke(app, ["sum", "--all", "--ledger", str(ledger_dir)])

        assert result.exit_code == 1
        assert "not UTF-8" in flat(result.stdout)

    def test_requires_a_target(self) -> None:
        result = runner.invoke(app, ["sum"])

        assert result.exit_code == 1

    def test_lists_ledgers(self, ledger_dir: Path, ledger_file: Path) -> None:
        result = runner.invoke(app, ["ledgers", "--ledger", str(ledger_dir)])

        assert result.exit_code == 0, result.stdout
        assert ledger_file.name in result.stdout


class TestInitCommand:
    """Tests for `divvy init`."""

    def test_creates_config_and_ledger_dir(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0, result.stdout
        assert get_config_path().exists()
        assert (tmp_path / "data" / "divvy" / "history").is_dir()

    def test_refuses_to_overwrite(self) -> None:
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "--force" in result.stdout

    def test_force_overwrites(self) -> None:
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0, result.stdout
