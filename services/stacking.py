# services/stacking.py
"""
Motor de apilamiento (gerbage) de pallets.

ALGORITMO (una pasada greedy, sin backtracking):
------------------------------------------------
1. FASE PALLETS COMPLETOS: cada pallet FULL forma su propia unidad, sin
   nada encima.
2. FASE PALLETS PARCIALES: los parciales se ordenan por altura descendente
   (orden estable: empates mantienen el orden del listado). Cada parcial
   libre pasa a ser base y, recorriendo la misma lista ordenada, se le
   agregan los primeros candidatos libres que respeten:
   - altura total ≤ altura máxima del vehículo
   - peso total ≤ techo de peso de la base (max_stack_weight del catálogo,
     o FACTOR_PESO_APILAMIENTO × peso bruto si no está definido)

Una base sin ficha en catálogo, no apilable o más alta que el vehículo queda
como unidad individual. Un candidato sin ficha o no apilable nunca va encima
de otro pallet.

La asignación se lleva en un arreglo de flags local a cada llamada a stack()
(índice = posición en la lista de entrada), sin estado compartido entre
ejecuciones.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from models.domain import CatalogEntry, PalletInstance, StackedUnit
from models.enums import EstadoPallet, PoliticaSKU
from services.constants import FACTOR_PESO_APILAMIENTO, DEBUG_PLANIFICACION


def stack_weight_ceiling(
    entry: CatalogEntry,
    factor_peso: float = FACTOR_PESO_APILAMIENTO
) -> float:
    """Peso máximo admitido por una unidad cuya base es de este SKU"""
    if entry.max_stack_weight:
        return entry.max_stack_weight
    return factor_peso * (entry.weight_gross or 0.0)


def _unidad_individual(pallet: PalletInstance, entry: Optional[CatalogEntry]) -> StackedUnit:
    return StackedUnit(
        base_pallet=pallet,
        stacked_pallets=(),
        length=entry.length if entry else None,
        width=entry.width if entry else None,
    )


class StackingEngine:
    """
    Agrupa pallets en unidades apiladas respetando altura y peso.
    """

    def __init__(
        self,
        politica_sku: PoliticaSKU = PoliticaSKU.PERMISIVA,
        factor_peso: float = FACTOR_PESO_APILAMIENTO,
        permitir_apilamiento: bool = True
    ):
        """
        Args:
            politica_sku: PERMISIVA mezcla SKUs; MISMO_SKU exige el SKU de la base
            factor_peso: Multiplicador del peso bruto cuando no hay max_stack_weight
            permitir_apilamiento: False → una unidad por pallet
        """
        self.politica_sku = politica_sku
        self.factor_peso = factor_peso
        self.permitir_apilamiento = permitir_apilamiento

    def stack(
        self,
        pallets: Sequence[PalletInstance],
        catalog: Mapping[str, CatalogEntry],
        vehicle_max_height: float
    ) -> List[StackedUnit]:
        """
        Construye las unidades apiladas.

        Nunca falla: lo que no se puede apilar queda como unidad individual.
        El resultado particiona exactamente la entrada.
        """
        if not self.permitir_apilamiento:
            return [_unidad_individual(p, catalog.get(p.sku)) for p in pallets]

        asignado = [False] * len(pallets)
        unidades: List[StackedUnit] = []

        # 1. Pallets completos: unidad propia, sin gerbage
        for i, pallet in enumerate(pallets):
            if pallet.status != EstadoPallet.FULL:
                continue
            asignado[i] = True
            unidades.append(_unidad_individual(pallet, catalog.get(pallet.sku)))

        # 2. Parciales: los más altos primero (sorted es estable)
        parciales = sorted(
            (i for i, p in enumerate(pallets) if p.status != EstadoPallet.FULL),
            key=lambda i: -pallets[i].height_actual
        )

        for i_base in parciales:
            if asignado[i_base]:
                continue
            base = pallets[i_base]
            asignado[i_base] = True
            entry = catalog.get(base.sku)

            if not self._puede_ser_base(base, entry, vehicle_max_height):
                unidades.append(_unidad_individual(base, entry))
                continue

            techo_peso = stack_weight_ceiling(entry, self.factor_peso)
            altura = base.height_actual
            peso = base.weight_actual
            encima: List[PalletInstance] = []

            for i_cand in parciales:
                if asignado[i_cand]:
                    continue
                candidato = pallets[i_cand]
                if not self._puede_ir_encima(base, candidato, catalog):
                    continue

                nueva_altura = altura + candidato.height_actual
                nuevo_peso = peso + candidato.weight_actual
                if nueva_altura <= vehicle_max_height and nuevo_peso <= techo_peso:
                    encima.append(candidato)
                    altura = nueva_altura
                    peso = nuevo_peso
                    asignado[i_cand] = True

            unidades.append(StackedUnit(
                base_pallet=base,
                stacked_pallets=tuple(encima),
                length=entry.length,
                width=entry.width,
            ))

        if DEBUG_PLANIFICACION:
            n_gerbadas = sum(1 for u in unidades if u.is_stacked)
            print(f"[APILAMIENTO] {len(pallets)} pallets → {len(unidades)} unidades "
                  f"({n_gerbadas} con gerbage)")

        return unidades

    @staticmethod
    def _puede_ser_base(
        base: PalletInstance,
        entry: Optional[CatalogEntry],
        vehicle_max_height: float
    ) -> bool:
        if entry is None or not entry.stackable:
            return False
        return base.height_actual <= vehicle_max_height

    def _puede_ir_encima(
        self,
        base: PalletInstance,
        candidato: PalletInstance,
        catalog: Mapping[str, CatalogEntry]
    ) -> bool:
        entry_cand = catalog.get(candidato.sku)
        if entry_cand is None or not entry_cand.stackable:
            return False
        if self.politica_sku == PoliticaSKU.MISMO_SKU and candidato.sku != base.sku:
            return False
        return True


def compute_stacking(
    pallets: Sequence[PalletInstance],
    catalog: Mapping[str, CatalogEntry],
    vehicle_max_height: float,
    politica_sku: PoliticaSKU = PoliticaSKU.PERMISIVA,
    factor_peso: float = FACTOR_PESO_APILAMIENTO
) -> List[StackedUnit]:
    """Atajo funcional sobre StackingEngine.stack"""
    engine = StackingEngine(politica_sku=politica_sku, factor_peso=factor_peso)
    return engine.stack(pallets, catalog, vehicle_max_height)
