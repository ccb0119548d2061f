# services/validator.py
"""
Validación del plan de carga.

Re-chequea de forma independiente catálogo, listado y resultado de
apilamiento contra las mismas reglas físicas que usa el motor.

NIVELES:
--------
- errors: el plan viola una restricción (altura, peso, SKU mezclado,
  SSCC duplicado...) y no debe aceptarse
- warnings: datos inusuales que el operador debe revisar, no bloquean
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from models.domain import (
    CatalogEntry,
    ListingRow,
    PlacementResult,
    StackedUnit,
    ValidationResult,
    VehicleVolume,
)
from services.constants import (
    ALTURA_MAXIMA_SOSPECHOSA,
    DIMENSION_MAXIMA_SOSPECHOSA,
    FACTOR_PESO_APILAMIENTO,
    MAX_PALLETS_GERBADOS_AVISO,
    UMBRAL_ALTURA_CERCANA,
    UMBRAL_SOBRELLENADO,
)
from services.stacking import stack_weight_ceiling

# Campos físicos obligatorios de la ficha
_CAMPOS_OBLIGATORIOS = ("qty_per_pallet", "weight_gross", "length", "width", "height")
# Opcionales, pero > 0 si vienen
_CAMPOS_OPCIONALES = ("weight_net", "layer_height", "layer_count", "max_stack_weight")


def validate_catalog(catalog: Mapping[str, CatalogEntry]) -> ValidationResult:
    """Valida las fichas físicas del catálogo"""
    result = ValidationResult()

    if len(catalog) == 0:
        result.errors.append("Catálogo vacío")
        return result

    for sku, entry in catalog.items():
        if not entry.sku or entry.sku != sku:
            result.errors.append(f"SKU inválido: {sku}")

        for campo in _CAMPOS_OBLIGATORIOS:
            valor = getattr(entry, campo)
            if valor is None or valor <= 0:
                result.errors.append(f"{sku}: {campo} debe ser > 0")

        for campo in _CAMPOS_OPCIONALES:
            valor = getattr(entry, campo)
            if valor is not None and valor <= 0:
                result.errors.append(f"{sku}: {campo} debe ser > 0 si se informa")

        if entry.stackable and not entry.max_stack_weight:
            result.warnings.append(
                f"{sku}: stackable=true sin max_stack_weight "
                f"(se usa {FACTOR_PESO_APILAMIENTO:g}×weight_gross)"
            )
        if entry.height and entry.height > ALTURA_MAXIMA_SOSPECHOSA:
            result.warnings.append(f"{sku}: altura > {ALTURA_MAXIMA_SOSPECHOSA:g}m (verificar unidad de medida)")
        if (entry.length and entry.length > DIMENSION_MAXIMA_SOSPECHOSA) or \
                (entry.width and entry.width > DIMENSION_MAXIMA_SOSPECHOSA):
            result.warnings.append(f"{sku}: dimensiones > {DIMENSION_MAXIMA_SOSPECHOSA:g}m (verificar dimensiones del pallet)")

    return result


def validate_listing(
    listing: Sequence[ListingRow],
    catalog: Mapping[str, CatalogEntry]
) -> ValidationResult:
    """Valida el listado de pallets (filas numeradas desde 1)"""
    result = ValidationResult()

    if len(listing) == 0:
        result.errors.append("Listado de pallets vacío")
        return result

    vistos = set()

    for idx, row in enumerate(listing, start=1):
        sscc = (row.sscc or "").strip()
        if not sscc:
            result.errors.append(f"Fila {idx}: SSCC faltante")
        elif sscc in vistos:
            result.errors.append(f"Fila {idx}: SSCC {sscc} duplicado")
        else:
            vistos.add(sscc)

        entry = catalog.get(row.sku) if row.sku else None
        if entry is None:
            result.errors.append(f"Fila {idx}: SKU {row.sku} no encontrado en el catálogo")

        if not row.quantity or row.quantity <= 0:
            result.errors.append(f"Fila {idx}: cantidad debe ser > 0")

        if entry is not None and entry.qty_per_pallet and row.quantity and \
                row.quantity > entry.qty_per_pallet * UMBRAL_SOBRELLENADO:
            result.warnings.append(
                f"Fila {idx}: cantidad {row.quantity:g} > {UMBRAL_SOBRELLENADO:.0%} "
                f"de la capacidad del pallet ({entry.qty_per_pallet:g})"
            )

    return result


def validate_stacking(
    units: Sequence[StackedUnit],
    vehicle: VehicleVolume,
    catalog: Mapping[str, CatalogEntry],
    factor_peso: float = FACTOR_PESO_APILAMIENTO
) -> ValidationResult:
    """
    Re-chequea cada unidad apilada (no confía en el motor de apilamiento).
    """
    result = ValidationResult()

    for idx, unit in enumerate(units, start=1):
        base = unit.base_pallet
        entry = catalog.get(base.sku)
        if entry is None:
            result.errors.append(f"Unidad {idx}: SKU {base.sku} no encontrado en el catálogo")
            continue

        if unit.total_height > vehicle.height:
            result.errors.append(
                f"Unidad {idx}: altura {unit.total_height:.2f}m > vehículo {vehicle.height:g}m"
            )

        techo = stack_weight_ceiling(entry, factor_peso)
        if unit.total_weight > techo:
            result.errors.append(
                f"Unidad {idx}: peso {unit.total_weight:.1f}kg > máximo {techo:g}kg"
            )

        for pallet in unit.stacked_pallets:
            if pallet.sku != base.sku:
                result.errors.append(
                    f"Unidad {idx}: SKU gerbado {pallet.sku} ≠ base {base.sku} (pallet {pallet.sscc})"
                )

        if len(unit.stacked_pallets) > MAX_PALLETS_GERBADOS_AVISO:
            result.warnings.append(
                f"Unidad {idx}: {len(unit.stacked_pallets)} pallets gerbados "
                f"(>{MAX_PALLETS_GERBADOS_AVISO})"
            )

        if unit.total_height > vehicle.height * UMBRAL_ALTURA_CERCANA:
            result.warnings.append(
                f"Unidad {idx}: altura {unit.total_height:.2f}m cercana al límite"
            )

    return result


def validate_placement(placement: PlacementResult, total_units: int) -> ValidationResult:
    """Toda unidad que quedó fuera del vehículo es un error"""
    result = ValidationResult()

    ubicadas = len(placement.placed)
    if ubicadas + len(placement.unplaced) != total_units:
        result.errors.append(
            f"Ubicación inconsistente: {ubicadas} ubicadas + {len(placement.unplaced)} "
            f"fuera ≠ {total_units} unidades"
        )

    for unit in placement.unplaced:
        result.errors.append(
            f"Unidad {unit.base_pallet.sscc} ({unit.pallet_count} pallets) no cabe en el vehículo"
        )

    return result


# ============================================================================
# REPORTE
# ============================================================================

def _seccion(titulo: str, result: ValidationResult, resumen: str) -> List[str]:
    lineas = [
        titulo,
        f"   Estado: {'✓ OK' if result.valid else '✗ ERROR'}",
        f"   {resumen}",
    ]
    if result.errors:
        lineas.append("   Errores:")
        lineas.extend(f"     - {e}" for e in result.errors)
    if result.warnings:
        lineas.append("   Advertencias:")
        lineas.extend(f"     - {w}" for w in result.warnings)
    lineas.append("")
    return lineas


def generate_validation_report(
    catalog: Mapping[str, CatalogEntry],
    listing: Sequence[ListingRow],
    units: Sequence[StackedUnit],
    vehicle: VehicleVolume,
    placement: Optional[PlacementResult] = None,
    factor_peso: float = FACTOR_PESO_APILAMIENTO
) -> str:
    """
    Genera el reporte de validación completo para revisión del operador.

    Secciones: catálogo, listado, apilamiento y (si se entrega) ubicación.
    """
    v_catalogo = validate_catalog(catalog)
    v_listado = validate_listing(listing, catalog)
    v_apilamiento = validate_stacking(units, vehicle, catalog, factor_peso)

    lineas = ["=== REPORTE DE VALIDACIÓN ===", ""]
    lineas += _seccion("1. CATÁLOGO", v_catalogo, f"{len(catalog)} SKUs cargados")
    lineas += _seccion("2. LISTADO DE PALLETS", v_listado, f"{len(listing)} pallets")
    lineas += _seccion("3. RESULTADO DE APILAMIENTO", v_apilamiento,
                       f"{len(units)} unidades de carga")

    resultados = [v_catalogo, v_listado, v_apilamiento]
    if placement is not None:
        v_ubicacion = validate_placement(placement, len(units))
        lineas += _seccion("4. UBICACIÓN EN VEHÍCULO", v_ubicacion,
                           f"{len(placement.placed)}/{len(units)} unidades ubicadas")
        resultados.append(v_ubicacion)

    lineas.append("=== RESUMEN ===")
    if all(r.valid for r in resultados):
        lineas.append("✓ VALIDACIÓN EXITOSA - Listo para cargar")
    else:
        lineas.append("✗ VALIDACIÓN FALLIDA - Se requieren correcciones")

    return "\n".join(lineas) + "\n"
