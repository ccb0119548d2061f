# services/stats.py
"""Estadísticas de la carga (agregación pura)"""

from __future__ import annotations

from typing import Sequence, Union

from models.domain import LoadingStats, PlacedUnit, StackedUnit, VehicleVolume


def compute_loading_stats(
    units: Sequence[Union[StackedUnit, PlacedUnit]],
    vehicle: VehicleVolume
) -> LoadingStats:
    """
    Calcula pallets, peso, volumen y aprovechamiento del vehículo.

    Args:
        units: Unidades apiladas o ya ubicadas
        vehicle: Volumen útil del vehículo

    Returns:
        LoadingStats con utilizaciones en porcentaje (0-100)
    """
    unidades = [u.unit if isinstance(u, PlacedUnit) else u for u in units]

    total_pallets = sum(u.pallet_count for u in unidades)
    total_weight = sum(u.total_weight for u in unidades)
    total_volume = sum(u.volume for u in unidades)
    total_floor_area = sum(u.floor_area for u in unidades)

    return LoadingStats(
        total_pallets=total_pallets,
        total_units=len(unidades),
        total_weight=total_weight,
        total_volume=total_volume,
        volume_utilization=total_volume / vehicle.volume * 100,
        floor_utilization=total_floor_area / vehicle.floor_area * 100,
        total_floor_area=total_floor_area,
        vehicle_floor_area=vehicle.floor_area,
        vehicle_volume=vehicle.volume,
        stacked_count=sum(1 for u in unidades if u.is_stacked),
    )
