from __future__ import annotations
from dataclasses import dataclass, field
from .enums import EstadoPallet, Orientacion, PoliticaSKU, ModeloAltura
from services.constants import FACTOR_PESO_APILAMIENTO
from typing import List, Dict, Any, Optional, Tuple
import math


# Alias aceptados al construir desde diccionarios (nombres del maestro original)
_ALIAS_CATALOGO = {
    "poids_brut": "weight_gross",
    "poids_net": "weight_net",
    "longueur": "length",
    "largeur": "width",
    "hauteur": "height",
    "hauteur_couche": "layer_height",
    "nb_couches": "layer_count",
}

_VALORES_VERDADEROS = {"true", "1", "si", "sí", "yes", "y", "oui", "x"}


def _coerce_float(value) -> Optional[float]:
    """Convierte a float; None, vacío, NaN o texto inválido → None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(parsed):
        return None
    return parsed


def _coerce_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return not math.isnan(value) and value != 0
    return str(value).strip().lower() in _VALORES_VERDADEROS


# Floats por encima de 2**53 ya no representan enteros exactos
_MAX_ENTERO_EXACTO = 2 ** 53


def _coerce_identificador(value, campo: str) -> str:
    """
    Normaliza SSCC/SKU a texto.

    pandas convierte una columna de enteros con celdas vacías a float64, así
    que 12345.0 vuelve a ser "12345". Si el float supera 2**53 el
    identificador ya perdió dígitos y no se puede recuperar.
    """
    if value is None or isinstance(value, bool):
        return "" if value is None else str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            if abs(value) > _MAX_ENTERO_EXACTO:
                raise ValueError(
                    f"{campo} {value!r} perdió precisión al leerse como número; "
                    f"cargar la columna '{campo}' con dtype=str"
                )
            return str(int(value))
    return str(value).strip()


@dataclass(frozen=True)
class CatalogEntry:
    """
    Ficha física de un SKU (dato maestro, solo lectura).
    Pesos y dimensiones corresponden al pallet a capacidad completa.

    No rechaza datos inválidos al construirse: el validador de catálogo
    es quien los reporta.
    """
    sku: str
    qty_per_pallet: Optional[float]
    weight_gross: Optional[float]
    length: Optional[float]
    width: Optional[float]
    height: Optional[float]

    weight_net: Optional[float] = None
    layer_height: Optional[float] = None
    layer_count: Optional[int] = None

    # Apilabilidad
    stackable: bool = False
    max_stack_weight: Optional[float] = None

    description: Optional[str] = None

    @property
    def has_footprint(self) -> bool:
        return bool(self.length and self.width and self.length > 0 and self.width > 0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CatalogEntry:
        """Constructor desde diccionario (registro de maestro)"""
        datos = {_ALIAS_CATALOGO.get(k, k): v for k, v in data.items()}
        layer_count = _coerce_float(datos.get("layer_count"))
        description = datos.get("description")
        return cls(
            sku=_coerce_identificador(datos.get("sku"), "sku"),
            qty_per_pallet=_coerce_float(datos.get("qty_per_pallet")),
            weight_gross=_coerce_float(datos.get("weight_gross")),
            length=_coerce_float(datos.get("length")),
            width=_coerce_float(datos.get("width")),
            height=_coerce_float(datos.get("height")),
            weight_net=_coerce_float(datos.get("weight_net")),
            layer_height=_coerce_float(datos.get("layer_height")),
            layer_count=int(layer_count) if layer_count is not None else None,
            stackable=_coerce_bool(datos.get("stackable")),
            max_stack_weight=_coerce_float(datos.get("max_stack_weight")),
            description=str(description) if isinstance(description, str) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sku": self.sku,
            "qty_per_pallet": self.qty_per_pallet,
            "weight_net": self.weight_net,
            "weight_gross": self.weight_gross,
            "length": self.length,
            "width": self.width,
            "height": self.height,
            "layer_height": self.layer_height,
            "layer_count": self.layer_count,
            "stackable": self.stackable,
            "max_stack_weight": self.max_stack_weight,
            "description": self.description,
        }


@dataclass(frozen=True)
class ListingRow:
    """Fila cruda del listado de pallets a despachar"""
    sscc: str
    sku: str
    quantity: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ListingRow:
        sscc = data.get("sscc", data.get("identifier"))
        quantity = data.get("quantity", data.get("qty"))
        return cls(
            sscc=_coerce_identificador(sscc, "sscc"),
            sku=_coerce_identificador(data.get("sku"), "sku"),
            quantity=_coerce_float(quantity) or 0.0,
        )


@dataclass(frozen=True)
class PalletInstance:
    """
    Pallet físico reconstruido desde una fila del listado.
    Altura y peso escalan linealmente con la fracción de llenado.
    """
    sscc: str
    sku: str
    quantity: float
    status: EstadoPallet
    fill_ratio: float
    height_actual: float
    weight_actual: float

    @property
    def is_full(self) -> bool:
        return self.status == EstadoPallet.FULL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sscc": self.sscc,
            "sku": self.sku,
            "quantity": self.quantity,
            "status": self.status.value,
            "fill_ratio": round(self.fill_ratio, 3),
            "height": round(self.height_actual, 3),
            "weight": round(self.weight_actual, 1),
        }


@dataclass(frozen=True)
class StackedUnit:
    """
    Unidad de carga: pallet base más los pallets gerbados encima.
    La huella (largo × ancho) es la del pallet base; None si su SKU
    no tiene ficha en el catálogo.
    """
    base_pallet: PalletInstance
    stacked_pallets: Tuple[PalletInstance, ...] = ()
    length: Optional[float] = None
    width: Optional[float] = None

    @property
    def total_height(self) -> float:
        """Altura acumulada, sumada desde la base hacia arriba"""
        total = self.base_pallet.height_actual
        for pallet in self.stacked_pallets:
            total += pallet.height_actual
        return total

    @property
    def total_weight(self) -> float:
        total = self.base_pallet.weight_actual
        for pallet in self.stacked_pallets:
            total += pallet.weight_actual
        return total

    @property
    def dimensions(self) -> Tuple[Optional[float], Optional[float], float]:
        """(largo, ancho, alto)"""
        return self.length, self.width, self.total_height

    @property
    def has_footprint(self) -> bool:
        return self.length is not None and self.width is not None

    @property
    def floor_area(self) -> float:
        return self.length * self.width if self.has_footprint else 0.0

    @property
    def volume(self) -> float:
        return self.floor_area * self.total_height

    @property
    def members(self) -> Tuple[PalletInstance, ...]:
        """Todos los pallets de la unidad, base primero"""
        return (self.base_pallet,) + tuple(self.stacked_pallets)

    @property
    def pallet_count(self) -> int:
        return 1 + len(self.stacked_pallets)

    @property
    def is_stacked(self) -> bool:
        return len(self.stacked_pallets) > 0

    @property
    def skus(self) -> set:
        return {p.sku for p in self.members}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_pallet": self.base_pallet.to_dict(),
            "stacked_pallets": [p.to_dict() for p in self.stacked_pallets],
            "total_height": round(self.total_height, 3),
            "total_weight": round(self.total_weight, 1),
            "dimensions": {
                "l": self.length,
                "w": self.width,
                "h": round(self.total_height, 3),
            },
        }


@dataclass(frozen=True)
class PlacedUnit:
    """Unidad ubicada: coordenadas del centro dentro del volumen del vehículo"""
    unit: StackedUnit
    x: float
    y: float
    z: float
    length: float  # huella usada (tras la orientación)
    width: float
    row: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sscc": self.unit.base_pallet.sscc,
            "row": self.row,
            "x": round(self.x, 3),
            "y": round(self.y, 3),
            "z": round(self.z, 3),
            "length": self.length,
            "width": self.width,
            "unit": self.unit.to_dict(),
        }


@dataclass(frozen=True)
class PlacementResult:
    """Unidades ubicadas y unidades que no cupieron en el vehículo"""
    placed: Tuple[PlacedUnit, ...] = ()
    unplaced: Tuple[StackedUnit, ...] = ()
    orientation: Orientacion = Orientacion.LONG

    @property
    def all_placed(self) -> bool:
        return len(self.unplaced) == 0

    @property
    def placed_units(self) -> List[StackedUnit]:
        return [p.unit for p in self.placed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orientation": self.orientation.value,
            "placed": [p.to_dict() for p in self.placed],
            "unplaced": [u.to_dict() for u in self.unplaced],
        }


@dataclass(frozen=True)
class VehicleVolume:
    """
    Espacio de carga útil del vehículo.
    Inmutable durante la planificación.
    """
    length: float
    width: float
    height: float
    name: Optional[str] = None

    def __post_init__(self):
        for campo in ("length", "width", "height"):
            valor = getattr(self, campo)
            if valor is None or valor <= 0:
                raise ValueError(
                    f"Dimensión {campo} del vehículo debe ser > 0, got {valor}"
                )

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    @property
    def floor_area(self) -> float:
        return self.length * self.width

    @classmethod
    def from_config(cls, config_dict: Dict[str, Any], name: Optional[str] = None) -> VehicleVolume:
        """Constructor desde diccionario de dimensiones"""
        return cls(
            length=float(config_dict["length"]),
            width=float(config_dict["width"]),
            height=float(config_dict["height"]),
            name=name or config_dict.get("name"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "length": self.length,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class LoadingStats:
    """Resumen numérico de la carga"""
    total_pallets: int
    total_units: int
    total_weight: float
    total_volume: float
    volume_utilization: float
    floor_utilization: float
    total_floor_area: float
    vehicle_floor_area: float
    vehicle_volume: float
    stacked_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_pallets": self.total_pallets,
            "total_units": self.total_units,
            "total_weight": round(self.total_weight, 1),
            "total_volume": round(self.total_volume, 3),
            "volume_utilization": round(self.volume_utilization, 1),
            "floor_utilization": round(self.floor_utilization, 1),
            "total_floor_area": round(self.total_floor_area, 3),
            "vehicle_floor_area": round(self.vehicle_floor_area, 3),
            "vehicle_volume": round(self.vehicle_volume, 3),
            "stacked_count": self.stacked_count,
        }


@dataclass
class ValidationResult:
    """Resultado de un chequeo: errores bloquean el plan, advertencias no"""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class PlanningOptions:
    """
    Opciones de una corrida de planificación.
    Por defecto reproduce el comportamiento histórico (apilamiento permisivo).
    """
    orientacion: Orientacion = Orientacion.LONG
    politica_sku: PoliticaSKU = PoliticaSKU.PERMISIVA
    modelo_altura: ModeloAltura = ModeloAltura.LINEAL
    permitir_apilamiento: bool = True
    factor_peso: float = FACTOR_PESO_APILAMIENTO
    omitir_desconocidos: bool = False  # True: filas con SKU desconocido se omiten y reportan

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orientacion": self.orientacion.value,
            "politica_sku": self.politica_sku.value,
            "modelo_altura": self.modelo_altura.value,
            "permitir_apilamiento": self.permitir_apilamiento,
            "factor_peso": self.factor_peso,
            "omitir_desconocidos": self.omitir_desconocidos,
        }
