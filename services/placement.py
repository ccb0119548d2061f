# services/placement.py
"""
Ubicación de unidades apiladas en el piso del vehículo.

Empaquetado greedy por filas (shelf first-fit):
- Las unidades se recorren en el orden recibido.
- Se llenan a lo ancho (eje z); cuando la siguiente no cabe se abre una fila
  nueva avanzando x en el largo máximo de la fila actual.
- Si la unidad excede el largo del vehículo queda fuera de la carga: se
  devuelve en `unplaced` y se imprime un aviso.

Coordenadas: centro de la unidad (x a lo largo, y en altura, z a lo ancho).
"""

from __future__ import annotations

from typing import List, Sequence

from models.domain import PlacedUnit, PlacementResult, StackedUnit, VehicleVolume
from models.enums import Orientacion
from services.constants import DEBUG_PLANIFICACION, TOLERANCIA_GEOMETRICA


class PlacementEngine:
    """Ubica unidades fila por fila; nunca rota ni reubica una unidad rechazada."""

    def __init__(self, orientacion: Orientacion = Orientacion.LONG):
        self.orientacion = Orientacion(orientacion)

    def place(
        self,
        units: Sequence[StackedUnit],
        vehicle: VehicleVolume
    ) -> PlacementResult:
        placed: List[PlacedUnit] = []
        unplaced: List[StackedUnit] = []

        cursor_x = 0.0
        cursor_z = 0.0
        row_max_length = 0.0
        fila = 0

        for unit in units:
            if not unit.has_footprint:
                print(f"[PLACEMENT] ⚠️ Unidad {unit.base_pallet.sscc} sin dimensiones "
                      f"de catálogo (SKU {unit.base_pallet.sku}), no se ubica")
                unplaced.append(unit)
                continue

            l, w = unit.length, unit.width
            if self.orientacion.intercambia_dimensiones:
                l, w = w, l

            if w > vehicle.width + TOLERANCIA_GEOMETRICA:
                print(f"[PLACEMENT] ⚠️ Unidad {unit.base_pallet.sscc} más ancha que el "
                      f"vehículo ({w:.2f}m > {vehicle.width:.2f}m)")
                unplaced.append(unit)
                continue

            # Nueva fila
            if cursor_z + w > vehicle.width + TOLERANCIA_GEOMETRICA:
                cursor_x += row_max_length
                cursor_z = 0.0
                row_max_length = 0.0
                fila += 1

            if cursor_x + l > vehicle.length + TOLERANCIA_GEOMETRICA:
                print(f"[PLACEMENT] ⚠️ Unidad {unit.base_pallet.sscc} no cabe: "
                      f"x={cursor_x:.2f}m + {l:.2f}m > largo {vehicle.length:.2f}m")
                unplaced.append(unit)
                continue

            placed.append(PlacedUnit(
                unit=unit,
                x=cursor_x + l / 2,
                y=unit.total_height / 2,
                z=cursor_z + w / 2,
                length=l,
                width=w,
                row=fila,
            ))

            cursor_z += w
            row_max_length = max(row_max_length, l)

        if DEBUG_PLANIFICACION:
            print(f"[PLACEMENT] {len(placed)}/{len(units)} unidades ubicadas "
                  f"({self.orientacion.value}), {len(unplaced)} fuera")

        return PlacementResult(
            placed=tuple(placed),
            unplaced=tuple(unplaced),
            orientation=self.orientacion,
        )


def place_units(
    units: Sequence[StackedUnit],
    vehicle: VehicleVolume,
    orientacion: Orientacion = Orientacion.LONG
) -> PlacementResult:
    """Atajo funcional sobre PlacementEngine.place"""
    return PlacementEngine(orientacion).place(units, vehicle)
