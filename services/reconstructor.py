# services/reconstructor.py
"""
Reconstrucción de pallets físicos desde el listado de despacho.

Cada fila (sscc, sku, cantidad) se convierte en un PalletInstance con altura
y peso reales. El modelo es de llenado proporcional: un pallet a medio llenar
ocupa la mitad de la altura y pesa la mitad que uno completo. La fracción de
llenado NO se limita a 1.0 (pallets sobrellenados se aceptan tal cual; el
validador de listado avisa sobre 150%).
"""

from __future__ import annotations

import math
from typing import Iterable, List, Mapping

from models.domain import CatalogEntry, ListingRow, PalletInstance
from models.enums import EstadoPallet, ModeloAltura
from models.exceptions import DataError, UnknownSKUError


def _altura_por_capas(entry: CatalogEntry, fill_ratio: float) -> float:
    """Capas ocupadas (redondeadas hacia arriba) × altura de capa"""
    capas = math.ceil(fill_ratio * entry.layer_count)
    return capas * entry.layer_height


def reconstruct_pallet(
    row: ListingRow,
    catalog: Mapping[str, CatalogEntry],
    modelo_altura: ModeloAltura = ModeloAltura.LINEAL
) -> PalletInstance:
    """
    Reconstruye un pallet desde una fila del listado.

    Args:
        row: Fila cruda del listado
        catalog: Índice SKU → ficha física
        modelo_altura: LINEAL (fracción × altura) o CAPAS (capas enteras,
            solo si la ficha tiene altura y número de capas)

    Returns:
        PalletInstance inmutable

    Raises:
        UnknownSKUError: Si el SKU no está en el catálogo
        DataError: Si la ficha no permite calcular altura/peso
    """
    entry = catalog.get(row.sku)
    if entry is None:
        raise UnknownSKUError(row.sku, row.sscc)

    if not entry.qty_per_pallet or entry.qty_per_pallet <= 0:
        raise DataError(f"SKU {row.sku}: qty_per_pallet inválido ({entry.qty_per_pallet})")
    if entry.height is None or entry.weight_gross is None:
        raise DataError(f"SKU {row.sku}: ficha sin altura o peso bruto")

    fill_ratio = row.quantity / entry.qty_per_pallet

    usa_capas = (
        modelo_altura == ModeloAltura.CAPAS
        and entry.layer_count and entry.layer_count > 0
        and entry.layer_height and entry.layer_height > 0
    )
    if usa_capas:
        height_actual = _altura_por_capas(entry, fill_ratio)
    else:
        height_actual = fill_ratio * entry.height

    status = EstadoPallet.FULL if row.quantity >= entry.qty_per_pallet else EstadoPallet.PARTIAL

    return PalletInstance(
        sscc=row.sscc,
        sku=row.sku,
        quantity=row.quantity,
        status=status,
        fill_ratio=fill_ratio,
        height_actual=height_actual,
        weight_actual=fill_ratio * entry.weight_gross,
    )


def reconstruct_pallets(
    listing: Iterable[ListingRow],
    catalog: Mapping[str, CatalogEntry],
    modelo_altura: ModeloAltura = ModeloAltura.LINEAL
) -> List[PalletInstance]:
    """Reconstruye todo el listado en orden; el primer SKU desconocido aborta el lote."""
    return [reconstruct_pallet(row, catalog, modelo_altura) for row in listing]
