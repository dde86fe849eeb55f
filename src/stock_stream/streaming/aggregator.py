"""Pure fold of orders into an OrderSummary."""
from collections.abc import Iterable

from stock_stream.schemas import Order, OrderSummary


class OrderAggregator:
    """Folds orders into a running OrderSummary, one order at a time.

    Every well-formed order counts as a success; there is no rejection path.
    total_amount is plain float addition in arrival order, so replaying the
    same orders in the same order gives a bit-identical summary.
    """

    @staticmethod
    def empty() -> OrderSummary:
        return OrderSummary()

    @staticmethod
    def apply(summary: OrderSummary, order: Order) -> OrderSummary:
        return OrderSummary(
            total_orders=summary.total_orders + 1,
            success_count=summary.success_count + 1,
            total_amount=summary.total_amount + order.price * order.quantity,
        )

    def fold(self, orders: Iterable[Order], initial: OrderSummary | None = None) -> OrderSummary:
        summary = initial if initial is not None else self.empty()
        for order in orders:
            summary = self.apply(summary, order)
        return summary
