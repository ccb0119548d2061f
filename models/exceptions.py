"""
Errores de datos del planificador de carga.
"""

from typing import Optional


class DataError(ValueError):
    """Datos de entrada que impiden reconstruir la carga"""


class UnknownSKUError(DataError):
    """El SKU de una fila del listado no existe en el catálogo"""

    def __init__(self, sku: str, sscc: Optional[str] = None):
        self.sku = sku
        self.sscc = sscc
        detalle = f" (pallet {sscc})" if sscc else ""
        super().__init__(f"SKU {sku} no encontrado en el catálogo{detalle}")
