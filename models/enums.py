from enum import Enum

class EstadoPallet(str, Enum):
    """Estado de llenado de un pallet respecto a su capacidad de catálogo"""
    FULL = "full"
    PARTIAL = "partial"


class Orientacion(str, Enum):
    """Orientación de los pallets en el piso del vehículo"""
    LONG = "long"
    WIDE = "wide"

    @property
    def intercambia_dimensiones(self) -> bool:
        """Indica si largo y ancho se intercambian antes de ubicar"""
        return self == Orientacion.WIDE


class PoliticaSKU(str, Enum):
    """
    Política de mezcla de SKUs al apilar pallets parciales.

    PERMISIVA reproduce el apilamiento sin restricción de SKU (el validador
    reporta luego las mezclas como error). MISMO_SKU solo apila sobre una base
    del mismo SKU.
    """
    PERMISIVA = "permisiva"
    MISMO_SKU = "mismo_sku"


class ModeloAltura(str, Enum):
    """Modelo para reconstruir la altura real de un pallet parcial"""
    LINEAL = "lineal"
    CAPAS = "capas"
