"""
Tests for the console front-end.
"""

import json
from decimal import Decimal

import pytest

from cryptofill.cli import ConsoleApp, create_parser, main


def scripted_input(*answers):
    """Input function replaying answers, then signalling end of input."""
    remaining = list(answers)

    def read(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return read


@pytest.fixture
def exchange_files(tmp_path):
    documents = [
        {
            "Id": "exchange-a",
            "AvailableFunds": {"Crypto": 1, "Euro": 100000},
            "OrderBook": {
                "Bids": [{"Order": {"Amount": 1, "Price": 2900}}],
                "Asks": [
                    {"Order": {"Amount": 7, "Price": 3000}},
                    {"Order": {"Amount": 4, "Price": 3300}},
                ],
            },
        },
        {
            "Id": "exchange-b",
            "AvailableFunds": {"Crypto": 50, "Euro": 100000},
            "OrderBook": {
                "Asks": [
                    {"Order": {"Amount": 7, "Price": 3000}},
                    {"Order": {"Amount": 4, "Price": 3300}},
                ],
            },
        },
    ]
    paths = []
    for document in documents:
        path = tmp_path / f"{document['Id']}.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        paths.append(str(path))
    return ",".join(paths)


def run_cli(exchange_files, *answers):
    output = []
    code = main(["--exchange-files", exchange_files], scripted_input(*answers), output.append)
    return code, output


class TestConsoleApp:
    """Menu driven order entry."""

    def test_prints_exchange_summary_and_exits(self, exchange_files):
        code, output = run_cli(exchange_files, "3")

        assert code == 0
        assert "Exchange data 'exchange-a' loaded" in output
        assert "Exchange data funds: 100000 Euro, 1 Crypto" in output
        assert "Lowest asking price: 3000" in output
        assert "Highest bidding price: none" in output
        assert output[-1] == "3: Exit"

    def test_buy_order(self, exchange_files):
        code, output = run_cli(exchange_files, "Buy", "9", "100000", "3")

        assert code == 0
        assert "Order to buy: 9 for 100000" in output
        assert "Transaction: 9 crypto for 27300 eur, unfulfilled: 0" in output
        assert len([line for line in output if line.startswith("Order: ")]) == 3
        assert "Finished" in output

    def test_sell_order_partially_filled(self, exchange_files):
        code, output = run_cli(exchange_files, "sell", "2", "2800", "3")

        assert "Transaction: 1 crypto for 2900 eur, unfulfilled: 1" in output
        assert "Unfulfilled amount: 1 of requested amount 2, filled 1" in output

    def test_unfillable_order(self, exchange_files):
        code, output = run_cli(exchange_files, "Buy", "1", "1", "3")

        assert "Unable to fill any order" in output

    def test_invalid_menu_choice(self, exchange_files):
        code, output = run_cli(exchange_files, "hold", "3")

        assert "Invalid input" in output
        assert code == 0

    def test_invalid_amount_is_asked_again(self, exchange_files):
        code, output = run_cli(exchange_files, "Buy", "abc", "-1", "1", "3000", "3")

        assert output.count("Invalid input") == 2
        assert "Order to buy: 1 for 3000" in output

    def test_end_of_input_exits(self, exchange_files):
        code, output = run_cli(exchange_files, "Buy", "1")

        assert code == 0
        assert "Input price per unit" in output

    def test_rejected_order(self, exchange_files):
        code, output = run_cli(exchange_files, "Buy", "99999999", "1", "3")

        assert any(line.startswith("Order rejected:") for line in output)

    def test_missing_exchange_file(self, tmp_path):
        output = []

        code = main(["-e", str(tmp_path / "missing.json")], scripted_input(), output.append)

        assert code == 1
        assert output[0].startswith("Error:")


class TestTransactionReport:
    """Fill report formatting."""

    def test_print_transaction_without_fills(self):
        output = []
        app = ConsoleApp(order_service=None, input_func=scripted_input(), output_func=output.append)
        transaction = type("Empty", (), {
            "filled_quantity": Decimal("0"),
            "total_cost": Decimal("0"),
            "unfulfilled_quantity": Decimal("0"),
            "fills": [],
        })()

        app.print_transaction(transaction, Decimal("0"))

        assert output[-2:] == ["Unable to fill any order", "Finished"]


class TestParser:
    """Argument parsing."""

    def test_defaults(self):
        args = create_parser().parse_args([])

        assert "exchange-01.json" in args.exchange_files
        assert args.log_level == "WARNING"
