from inventory_desk.core.config import Settings
from inventory_desk.data.service import DataService, Filter, Order, PolicyDenied, ServiceError, TransportError


def build_data_service(settings: Settings) -> DataService:
    if settings.BACKEND == "remote":
        from inventory_desk.data.remote import RemoteDataService

        return RemoteDataService.from_settings(settings)

    from inventory_desk.data.local.service import LocalDataService

    return LocalDataService.from_settings(settings)


__all__ = [
    "DataService",
    "Filter",
    "Order",
    "PolicyDenied",
    "ServiceError",
    "TransportError",
    "build_data_service",
]
