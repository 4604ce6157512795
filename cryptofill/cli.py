"""
Console front-end.

Interactive menu that loads the exchange snapshots, asks for an order and
prints the resulting fill report.

USAGE
    python -m cryptofill.cli
    python -m cryptofill.cli --exchange-files exchanges/exchange-01.json,exchanges/exchange-02.json
"""

import argparse
import sys
from decimal import Decimal
from typing import Callable, List, Optional

from cryptofill.config import LOG_LEVELS, get_settings
from cryptofill.core.fulfillment_engine import FulfillmentEngine
from cryptofill.core.order import OrderSide
from cryptofill.core.transaction import Transaction
from cryptofill.services.exchange_registry import ExchangeRegistry
from cryptofill.services.order_service import OrderService
from cryptofill.utils.exceptions import (
    BaseFulfillmentException,
    ExchangeDataException,
    InvalidOrderSideException,
)
from cryptofill.utils.logger import get_logger
from cryptofill.utils.validators import sanitize_decimal

EXIT_CODE = "3"

InputFunc = Callable[[str], str]
OutputFunc = Callable[[str], None]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="cryptofill",
        description="Fill buy and sell orders against several exchanges",
    )
    parser.add_argument(
        "--exchange-files", "-e",
        type=str,
        default=settings.exchange_data_paths,
        help="Comma separated exchange snapshot files",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Log level for engine events (default: WARNING)",
    )
    return parser


class ConsoleApp:
    """Menu loop around an OrderService."""

    def __init__(
        self,
        order_service: OrderService,
        input_func: InputFunc = input,
        output_func: OutputFunc = print,
    ):
        self.order_service = order_service
        self.input = input_func
        self.output = output_func

    def print_exchanges(self) -> None:
        for exchange in self.order_service.registry.get_exchanges():
            self.output(f"Exchange data '{exchange.exchange_id}' loaded")
            self.output(
                f"Exchange data funds: {exchange.fiat_balance} Euro, "
                f"{exchange.crypto_balance} Crypto"
            )
            self.output(f"Lowest asking price: {_or_none(exchange.best_ask)}")
            self.output(f"Highest bidding price: {_or_none(exchange.best_bid)}")
            self.output("")

    def print_menu(self) -> None:
        self.output("Choose an option:")
        self.output("Buy: Buy")
        self.output("Sell: Sell")
        self.output(f"{EXIT_CODE}: Exit")

    def run(self) -> None:
        self.print_exchanges()

        while True:
            self.print_menu()
            choice = self._read()
            if choice is None or choice == EXIT_CODE:
                break

            try:
                side = OrderSide.parse(choice)
            except InvalidOrderSideException:
                self.output("Invalid input")
                continue

            quantity = self._prompt_positive(f"Input amount of crypto to {side.value.lower()}")
            if quantity is None:
                break
            price = self._prompt_positive("Input price per unit")
            if price is None:
                break

            self.run_order(side, quantity, price)

    def run_order(self, side: OrderSide, quantity: Decimal, price: Decimal) -> Optional[Transaction]:
        self.output(f"Order to {side.value.lower()}: {quantity} for {price}")
        self.output("")

        try:
            transaction = self.order_service.submit_order(side, quantity, price)
        except BaseFulfillmentException as e:
            self.output(f"Order rejected: {e.message}")
            return None

        self.print_transaction(transaction, quantity)
        return transaction

    def print_transaction(self, transaction: Transaction, requested: Decimal) -> None:
        self.output(
            f"Transaction: {transaction.filled_quantity} crypto for {transaction.total_cost} eur, "
            f"unfulfilled: {transaction.unfulfilled_quantity}"
        )
        for fill in transaction.fills:
            self.output(
                f"Order: {fill.standing_order_id}, amount: {fill.quantity}, "
                f"remaining: {fill.standing_order_remaining} / {fill.standing_order_quantity}, "
                f"total price {fill.cost}, price per unit {fill.price}, "
                f"Exchange: {fill.exchange_id}"
            )

        self.output("")
        if not transaction.fills:
            self.output("Unable to fill any order")

        if transaction.unfulfilled_quantity > 0:
            self.output(
                f"Unfulfilled amount: {transaction.unfulfilled_quantity} of requested amount "
                f"{requested}, filled {requested - transaction.unfulfilled_quantity}"
            )

        self.output("Finished")

    def _read(self, prompt: str = "") -> Optional[str]:
        try:
            return self.input(prompt).strip()
        except EOFError:
            return None

    def _prompt_positive(self, message: str) -> Optional[Decimal]:
        """Ask until a positive decimal is entered; None on end of input."""
        while True:
            self.output(message)
            raw = self._read()
            if raw is None:
                return None
            try:
                value = sanitize_decimal(raw)
            except BaseFulfillmentException:
                value = None
            if value is not None and value > 0:
                return value
            self.output("Invalid input")


def _or_none(value: Optional[Decimal]) -> str:
    return str(value) if value is not None else "none"


def main(
    argv: Optional[List[str]] = None,
    input_func: InputFunc = input,
    output_func: OutputFunc = print,
) -> int:
    """Main CLI entry point."""
    args = create_parser().parse_args(argv)

    registry = ExchangeRegistry()
    paths = [path.strip() for path in args.exchange_files.split(",") if path.strip()]
    try:
        registry.load_from_files(paths)
    except ExchangeDataException as e:
        output_func(f"Error: {e.message}")
        return 1

    engine = FulfillmentEngine(get_logger(log_level=args.log_level))
    app = ConsoleApp(OrderService(registry, engine), input_func, output_func)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
