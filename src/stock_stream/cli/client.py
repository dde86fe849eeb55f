"""Demo client for the stock trading stream service.

Usage:
  stock-client quote AAPL
  stock-client subscribe AAPL
  stock-client bulk-order                          # three sample orders
  stock-client bulk-order 1:AAPL:BUY:150.5:10 2:GOOGL:SELL:2700:5
"""
import argparse
import asyncio
import json
import sys

import httpx
import websockets
from websockets.exceptions import ConnectionClosed

from stock_stream.db import OrderSide
from stock_stream.schemas import Order, OrderSummary, PriceResponse

SAMPLE_ORDERS = (
    "1:AAPL:BUY:150.5:10",
    "2:GOOGL:SELL:2700.0:5",
    "3:TSLA:BUY:700.0:8",
)


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def parse_order(raw: str) -> Order:
    """Parse ORDER_ID:SYMBOL:SIDE:PRICE:QTY into an Order."""
    parts = raw.split(":")
    if len(parts) != 5:
        raise argparse.ArgumentTypeError(
            f"Expected ORDER_ID:SYMBOL:SIDE:PRICE:QTY, got {raw!r}"
        )
    order_id, symbol, side, price, quantity = parts
    try:
        return Order(
            order_id=order_id,
            symbol=symbol.upper(),
            side=OrderSide(side.upper()),
            price=float(price),
            quantity=int(quantity),
        )
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid order {raw!r}: {e}") from e


def _ws_url(base_url: str, path: str) -> str:
    if base_url.startswith("https://"):
        return "wss://" + base_url[len("https://"):] + path
    if base_url.startswith("http://"):
        return "ws://" + base_url[len("http://"):] + path
    return base_url + path


def cmd_quote(args: argparse.Namespace) -> int:
    with httpx.Client(base_url=args.base_url, timeout=args.timeout) as client:
        r = client.get(f"/stocks/{args.symbol}")
        r.raise_for_status()
    print_json(r.json())
    return 0


async def subscribe(base_url: str, symbol: str) -> int:
    """Print every price update until the server completes the stream."""
    url = _ws_url(base_url, f"/stocks/stream?symbol={symbol}")
    async with websockets.connect(url) as ws:
        try:
            async for raw in ws:
                tick = PriceResponse.model_validate_json(raw)
                print(f"Stock Price Update: {tick.symbol} Price: {tick.price} Time: {tick.timestamp}")
        except ConnectionClosed as e:
            print(f"Error: {e.rcvd.reason if e.rcvd else e}", file=sys.stderr)
            return 1
        if ws.close_code not in (None, 1000):
            print(f"Error: {ws.close_reason}", file=sys.stderr)
            return 1
    print("Stock price streaming completed.")
    return 0


async def send_bulk_orders(base_url: str, orders: list[Order]) -> OrderSummary | None:
    """Send orders, signal completion, and wait for the single summary."""
    async with websockets.connect(_ws_url(base_url, "/orders/bulk")) as ws:
        for order in orders:
            await ws.send(json.dumps({"type": "order", **order.model_dump(mode="json")}))
        await ws.send(json.dumps({"type": "complete"}))
        try:
            raw = await ws.recv()
        except ConnectionClosed as e:
            print(f"Error receiving summary from server: {e}", file=sys.stderr)
            return None
    return OrderSummary.model_validate_json(raw)


def cmd_subscribe(args: argparse.Namespace) -> int:
    return asyncio.run(subscribe(args.base_url, args.symbol))


def cmd_bulk_order(args: argparse.Namespace) -> int:
    orders = args.orders or [parse_order(o) for o in SAMPLE_ORDERS]
    summary = asyncio.run(send_bulk_orders(args.base_url, orders))
    if summary is None:
        return 1
    print("Order Summary Received from Server:")
    print(f"Total Orders: {summary.total_orders}")
    print(f"Successful Orders: {summary.success_count}")
    print(f"Total Amount: ${summary.total_amount}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Demo client for the stock trading stream service.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    p = subparsers.add_parser("quote", help="GET /stocks/{symbol}")
    p.add_argument("symbol", help="Ticker (e.g. AAPL)")
    p.set_defaults(handler=cmd_quote)

    p = subparsers.add_parser("subscribe", help="WS /stocks/stream?symbol=...")
    p.add_argument("symbol", help="Ticker (e.g. AAPL)")
    p.set_defaults(handler=cmd_subscribe)

    p = subparsers.add_parser("bulk-order", help="WS /orders/bulk")
    p.add_argument(
        "orders",
        nargs="*",
        type=parse_order,
        metavar="ORDER",
        help="ORDER_ID:SYMBOL:SIDE:PRICE:QTY (default: three sample orders)",
    )
    p.set_defaults(handler=cmd_bulk_order)

    args = parser.parse_args()
    args.base_url = args.base_url.rstrip("/")

    try:
        return args.handler(args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except (httpx.RequestError, OSError) as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nStopped by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
