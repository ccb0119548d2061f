from .domain import (
    CatalogEntry, ListingRow, PalletInstance, StackedUnit, PlacedUnit,
    PlacementResult, VehicleVolume, LoadingStats, ValidationResult, PlanningOptions
)
from .enums import EstadoPallet, Orientacion, PoliticaSKU, ModeloAltura
from .exceptions import DataError, UnknownSKUError
from .api import PlanRequest, PlanResponse

__all__ = [
    "CatalogEntry", "ListingRow", "PalletInstance", "StackedUnit", "PlacedUnit",
    "PlacementResult", "VehicleVolume", "LoadingStats", "ValidationResult", "PlanningOptions",
    "EstadoPallet", "Orientacion", "PoliticaSKU", "ModeloAltura",
    "DataError", "UnknownSKUError",
    "PlanRequest", "PlanResponse"
]
