from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional

from .enums import ModeloAltura, Orientacion, PoliticaSKU


class CatalogEntryIn(BaseModel):
    sku: str
    qty_per_pallet: Optional[float] = None
    weight_net: Optional[float] = None
    weight_gross: Optional[float] = None
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    layer_height: Optional[float] = None
    layer_count: Optional[int] = None
    stackable: bool = False
    max_stack_weight: Optional[float] = None
    description: Optional[str] = None


class ListingRowIn(BaseModel):
    sscc: str
    sku: str
    quantity: float


class VehicleIn(BaseModel):
    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    name: Optional[str] = None


class PlanRequest(BaseModel):
    catalog: List[CatalogEntryIn] = Field(default_factory=list)
    listing: List[ListingRowIn] = Field(default_factory=list)
    vehicle: Optional[VehicleIn] = None
    vehicle_name: Optional[str] = None

    # Overrides de planificación (None → valor del vehículo)
    orientacion: Optional[Orientacion] = None
    politica_sku: Optional[PoliticaSKU] = None
    modelo_altura: Optional[ModeloAltura] = None
    permitir_apilamiento: Optional[bool] = None
    factor_peso: Optional[float] = Field(default=None, gt=0)
    omitir_desconocidos: Optional[bool] = None


class PlanResponse(BaseModel):
    vehicle: Dict[str, Any]
    opciones: Dict[str, Any]
    unidades: List[Dict[str, Any]]
    ubicacion: Dict[str, Any]
    estadisticas: Dict[str, Any]
    validaciones: Dict[str, Dict[str, Any]]
    reporte: str
    errores: List[str] = Field(default_factory=list)
    fases_ejecutadas: List[str] = Field(default_factory=list)
    tiempo_total_ms: float = 0.0
