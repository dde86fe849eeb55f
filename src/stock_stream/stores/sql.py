"""SQL stock store backed by the SQLModel Stock table."""
from collections.abc import Iterable

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from stock_stream.db.models import Stock
from stock_stream.db.sessions import get_session, init_db
from stock_stream.schemas import PriceRecord
from stock_stream.stores.stock_store_abc import StockStoreABC


class SqlStockStore(StockStoreABC):
    """Stock store reading the stock table through a SQLModel engine."""

    def __init__(self, engine: Engine, *, create_tables: bool = True) -> None:
        self._engine = engine
        if create_tables:
            init_db(engine)

    def get(self, symbol: str) -> PriceRecord | None:
        with Session(self._engine) as session:
            stock = session.exec(select(Stock).where(Stock.stock_symbol == symbol)).first()
        if stock is None:
            return None
        return PriceRecord(
            symbol=stock.stock_symbol,
            price=stock.price,
            last_updated=stock.last_updated,
        )

    def seed(self, records: Iterable[PriceRecord]) -> int:
        """Insert or update records. Returns the number of rows written."""
        count = 0
        with get_session(self._engine) as session:
            for record in records:
                stock = session.exec(
                    select(Stock).where(Stock.stock_symbol == record.symbol)
                ).first()
                if stock is None:
                    stock = Stock(stock_symbol=record.symbol, price=record.price)
                stock.price = record.price
                stock.last_updated = record.last_updated
                session.add(stock)
                count += 1
        return count

    def close(self) -> None:
        self._engine.dispose()
