import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from main import format_decimal, main


class TestFormatDecimal:
    def test_pads_to_four_places(self):
        assert format_decimal(Decimal("1.5")) == "1.5000"
        assert format_decimal(Decimal("0")) == "0.0000"
        assert format_decimal(Decimal("12.3456")) == "12.3456"

    def test_large_value_keeps_every_digit(self):
        assert format_decimal(Decimal("158456325028528675187087900670")) == "158456325028528675187087900670.0000"


class TestMain:
    def test_writes_accounts_csv_to_stdout(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("PAYMENTS_REPORT_STATS", "false")
        csv_file = tmp_path / "input.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 2, 1, 2.0",
            "deposit, 1, 2, 1.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "dispute, 2, 1,",
            "chargeback, 2, 1,",
        ]))

        exit_code = main([str(csv_file)])

        assert exit_code == 0
        assert capsys.readouterr().out.splitlines() == [
            "client,available,held,total,locked",
            "1,1.5000,0.0000,1.5000,false",
            "2,0.0000,0.0000,0.0000,true",
        ]

    def test_wrong_arity_prints_usage(self, capsys):
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_missing_file_exits_nonzero(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.csv")]) == 1
        assert capsys.readouterr().out == ""
