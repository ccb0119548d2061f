# services/planner.py
"""
API pública del planificador de carga.
Orquesta el flujo completo: reconstrucción → apilamiento → ubicación →
estadísticas → validación.

Cada corrida es pura y no comparte estado: varias corridas (distintos
vehículos o días) pueden ejecutarse en paralelo.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from models.api import PlanRequest, PlanResponse
from models.domain import (
    CatalogEntry,
    ListingRow,
    LoadingStats,
    PalletInstance,
    PlacementResult,
    PlanningOptions,
    StackedUnit,
    ValidationResult,
    VehicleVolume,
)
from models.exceptions import DataError
from core.config import get_vehicle_config, get_vehicle_volume
from services.catalog import CatalogIndex
from services.constants import DEBUG_PLANIFICACION, PLAN_MAX_WORKERS
from services.placement import PlacementEngine
from services.reconstructor import reconstruct_pallet
from services.stacking import StackingEngine
from services.stats import compute_loading_stats
from services.validator import (
    generate_validation_report,
    validate_catalog,
    validate_listing,
    validate_placement,
    validate_stacking,
)
from utils.config_helpers import build_planning_options


@dataclass
class PlanResult:
    """
    Resultado de una corrida de planificación.
    """
    vehicle: VehicleVolume
    opciones: PlanningOptions
    pallets: List[PalletInstance] = field(default_factory=list)
    unidades: List[StackedUnit] = field(default_factory=list)
    ubicacion: PlacementResult = field(default_factory=PlacementResult)
    estadisticas: Optional[LoadingStats] = None
    validaciones: Dict[str, ValidationResult] = field(default_factory=dict)
    reporte: str = ""

    # Metadata del proceso
    errores: List[str] = field(default_factory=list)
    fases_ejecutadas: List[str] = field(default_factory=list)
    tiempo_total_ms: float = 0.0

    @property
    def plan_valido(self) -> bool:
        """El plan es aceptable si ninguna validación tiene errores"""
        return all(v.valid for v in self.validaciones.values()) and not self.errores

    @property
    def total_fuera(self) -> int:
        return len(self.ubicacion.unplaced)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vehicle": self.vehicle.to_dict(),
            "opciones": self.opciones.to_dict(),
            "unidades": [u.to_dict() for u in self.unidades],
            "ubicacion": self.ubicacion.to_dict(),
            "estadisticas": self.estadisticas.to_dict() if self.estadisticas else {},
            "validaciones": {k: v.to_dict() for k, v in self.validaciones.items()},
            "reporte": self.reporte,
            "errores": list(self.errores),
            "fases_ejecutadas": list(self.fases_ejecutadas),
            "tiempo_total_ms": round(self.tiempo_total_ms, 2),
        }


def _ejecutar_fase(resultado: PlanResult, nombre: str, fn: Callable[[], Any]) -> Any:
    """Ejecuta una fase registrando su nombre y duración."""
    t0 = time.perf_counter()
    salida = fn()
    elapsed_ms = (time.perf_counter() - t0) * 1000
    resultado.fases_ejecutadas.append(nombre)
    resultado.tiempo_total_ms += elapsed_ms
    if DEBUG_PLANIFICACION:
        print(f"[TIMING] {nombre}: {elapsed_ms:.2f}ms")
    return salida


def _reconstruir(
    listing: Sequence[ListingRow],
    catalog: Mapping[str, CatalogEntry],
    opciones: PlanningOptions,
    errores: List[str]
) -> List[PalletInstance]:
    """
    Reconstruye los pallets. Sin omitir_desconocidos el primer error de datos
    aborta la corrida; con él, la fila se omite y se reporta.
    """
    pallets = []
    for idx, row in enumerate(listing, start=1):
        try:
            pallets.append(reconstruct_pallet(row, catalog, opciones.modelo_altura))
        except DataError as e:
            if not opciones.omitir_desconocidos:
                raise
            mensaje = f"Fila {idx} omitida: {e}"
            print(f"[RECONSTRUCCION] ⚠️ {mensaje}")
            errores.append(mensaje)
    return pallets


def planificar_carga(
    catalog: Mapping[str, CatalogEntry],
    listing: Sequence[Union[ListingRow, Dict[str, Any]]],
    vehicle: VehicleVolume,
    opciones: Optional[PlanningOptions] = None
) -> PlanResult:
    """
    Ejecuta la planificación completa para un vehículo.

    Args:
        catalog: Índice SKU → ficha física
        listing: Filas del listado (ListingRow o dicts)
        vehicle: Volumen útil del vehículo
        opciones: Opciones de planificación (None → por defecto)

    Returns:
        PlanResult con unidades, ubicación, estadísticas y reporte

    Raises:
        UnknownSKUError: SKU desconocido y opciones.omitir_desconocidos=False
    """
    opciones = opciones or PlanningOptions()
    filas = [r if isinstance(r, ListingRow) else ListingRow.from_dict(r) for r in listing]
    resultado = PlanResult(vehicle=vehicle, opciones=opciones)

    stacking = StackingEngine(
        politica_sku=opciones.politica_sku,
        factor_peso=opciones.factor_peso,
        permitir_apilamiento=opciones.permitir_apilamiento,
    )
    placement = PlacementEngine(opciones.orientacion)

    # 1. Reconstrucción
    resultado.pallets = _ejecutar_fase(
        resultado, "reconstruccion",
        lambda: _reconstruir(filas, catalog, opciones, resultado.errores)
    )

    # 2. Apilamiento
    resultado.unidades = _ejecutar_fase(
        resultado, "apilamiento",
        lambda: stacking.stack(resultado.pallets, catalog, vehicle.height)
    )

    # 3. Ubicación
    resultado.ubicacion = _ejecutar_fase(
        resultado, "ubicacion",
        lambda: placement.place(resultado.unidades, vehicle)
    )

    # 4. Estadísticas sobre lo que efectivamente va en el vehículo
    resultado.estadisticas = _ejecutar_fase(
        resultado, "estadisticas",
        lambda: compute_loading_stats(resultado.ubicacion.placed, vehicle)
    )

    # 5. Validación
    def _validar():
        resultado.validaciones = {
            "catalogo": validate_catalog(catalog),
            "listado": validate_listing(filas, catalog),
            "apilamiento": validate_stacking(resultado.unidades, vehicle, catalog, opciones.factor_peso),
            "ubicacion": validate_placement(resultado.ubicacion, len(resultado.unidades)),
        }
        return generate_validation_report(
            catalog, filas, resultado.unidades, vehicle,
            placement=resultado.ubicacion,
            factor_peso=opciones.factor_peso,
        )

    resultado.reporte = _ejecutar_fase(resultado, "validacion", _validar)

    if DEBUG_PLANIFICACION:
        print(f"\n[PLAN] Resultado ({vehicle.name or 'vehículo'}):")
        print(f"  - Pallets: {len(resultado.pallets)}")
        print(f"  - Unidades: {len(resultado.unidades)}")
        print(f"  - Fuera del vehículo: {resultado.total_fuera}")
        print(f"  - Tiempo: {resultado.tiempo_total_ms:.0f}ms")

    if resultado.ubicacion.unplaced:
        print(f"[PLAN] ⚠️ {resultado.total_fuera} de {len(resultado.unidades)} unidades "
              f"no caben en {vehicle.name or 'el vehículo'}")

    return resultado


# ============================================================================
# API DE DICCIONARIOS
# ============================================================================

def _resolver_vehiculo(request: PlanRequest, vehicle_name: Optional[str]):
    """Retorna (VehicleVolume, config_vehiculo o None)"""
    nombre = vehicle_name or request.vehicle_name
    config = get_vehicle_config(nombre) if nombre else None

    if request.vehicle is not None:
        v = request.vehicle
        return VehicleVolume(v.length, v.width, v.height, name=v.name or nombre), config
    if config is not None:
        return get_vehicle_volume(nombre), config

    raise ValueError("Debe indicarse 'vehicle' (dimensiones) o 'vehicle_name'")


def procesar(payload: Dict[str, Any], vehicle_name: Optional[str] = None) -> Dict[str, Any]:
    """
    API principal: dict de entrada → dict de salida.

    Args:
        payload: Catálogo, listado, vehículo y overrides (ver PlanRequest)
        vehicle_name: Vehículo registrado (prevalece sobre payload['vehicle_name'])

    Returns:
        Dict con el plan (PlanResponse) o {"error": {...}}
    """
    try:
        request = PlanRequest.model_validate(payload)
        vehicle, vehicle_config = _resolver_vehiculo(request, vehicle_name)

        opciones = build_planning_options(
            vehicle_config,
            orientacion=request.orientacion,
            politica_sku=request.politica_sku,
            modelo_altura=request.modelo_altura,
            permitir_apilamiento=request.permitir_apilamiento,
            factor_peso=request.factor_peso,
            omitir_desconocidos=request.omitir_desconocidos,
        )

        catalog = CatalogIndex.from_records(e.model_dump() for e in request.catalog)
        listing = [ListingRow(r.sscc, r.sku, r.quantity) for r in request.listing]

        resultado = planificar_carga(catalog, listing, vehicle, opciones)
        return PlanResponse(**resultado.to_dict()).model_dump()

    except Exception as e:
        import traceback as _tb
        return {
            "error": {
                "message": str(e),
                "traceback": _tb.format_exc()[:5000]
            }
        }


def planificar_en_paralelo(
    trabajos: Sequence[Dict[str, Any]],
    max_workers: int = PLAN_MAX_WORKERS
) -> List[Dict[str, Any]]:
    """
    Ejecuta varias corridas independientes en paralelo.

    Args:
        trabajos: Payloads para `procesar` (cada uno con su vehículo)
        max_workers: Máximo de hilos

    Returns:
        Resultados en el mismo orden que `trabajos`
    """
    if not trabajos:
        return []

    resultados: List[Optional[Dict[str, Any]]] = [None] * len(trabajos)
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(trabajos)))) as pool:
        futures = {pool.submit(procesar, trabajo): idx for idx, trabajo in enumerate(trabajos)}
        for fut in as_completed(futures):
            resultados[futures[fut]] = fut.result()

    return resultados
