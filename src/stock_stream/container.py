"""DI container. Build via init_container(); route dependencies resolve from app.state.container."""
from dependency_injector import containers, providers

from stock_stream.config import Settings, get_settings
from stock_stream.services.factory import (create_stock_store,
                                           create_streaming_service)
from stock_stream.stores import StockStoreABC


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(get_settings)

    stock_store = providers.Singleton(create_stock_store, settings)

    streaming_service = providers.Singleton(
        create_streaming_service,
        settings,
        stock_store,
    )


def init_container(
    settings: Settings | None = None,
    store: StockStoreABC | None = None,
) -> Container:
    """Create the container, optionally pinning settings and the stock store."""
    container = Container()
    if settings is not None:
        container.settings.override(providers.Object(settings))
    if store is not None:
        container.stock_store.override(providers.Object(store))
    return container
