# services/catalog.py
"""
Índice de catálogo: SKU → ficha física (CatalogEntry).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Any, Optional

import pandas as pd

from models.domain import CatalogEntry, ListingRow
from models.exceptions import UnknownSKUError


def _fila_sin_nulos(fila: Dict[str, Any]) -> Dict[str, Any]:
    """Reemplaza NaN/NA de pandas por None"""
    return {k: (None if pd.isna(v) else v) for k, v in fila.items()}


class CatalogIndex(Mapping):
    """
    Catálogo de SKUs en modo solo lectura.
    Se comporta como un Mapping[str, CatalogEntry].
    """

    def __init__(self, entries: Optional[Dict[str, CatalogEntry]] = None):
        self._entries: Dict[str, CatalogEntry] = dict(entries or {})

    def __getitem__(self, sku: str) -> CatalogEntry:
        return self._entries[sku]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CatalogIndex({len(self)} SKUs)"

    def get_required(self, sku: str, sscc: Optional[str] = None) -> CatalogEntry:
        """Obtiene la ficha o levanta UnknownSKUError"""
        entry = self._entries.get(sku)
        if entry is None:
            raise UnknownSKUError(sku, sscc)
        return entry

    @classmethod
    def from_entries(cls, entries: Iterable[CatalogEntry]) -> CatalogIndex:
        return cls({e.sku: e for e in entries})

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> CatalogIndex:
        """
        Construye el índice desde una lista de diccionarios.
        Si un SKU se repite, el último registro prevalece.
        """
        return cls.from_entries(CatalogEntry.from_dict(r) for r in records)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> CatalogIndex:
        """
        Construye el índice desde un DataFrame con columnas canónicas
        (sku, qty_per_pallet, weight_gross, length, width, height, ...).
        Filas sin SKU se descartan.
        """
        if "sku" not in df.columns:
            raise ValueError("DataFrame de catálogo sin columna 'sku'")

        df = df.dropna(subset=["sku"])
        records = [_fila_sin_nulos(fila) for fila in df.to_dict(orient="records")]
        return cls.from_records(records)


def listing_from_dataframe(df: pd.DataFrame) -> List[ListingRow]:
    """
    Convierte un DataFrame (sscc, sku, quantity) en filas de listado.
    Mantiene el orden de las filas.

    Raises:
        ValueError: Columnas faltantes, o SSCC numéricos que perdieron
            precisión al leerse como float (cargarlos con dtype=str)
    """
    if "sku" not in df.columns or not ({"sscc", "identifier"} & set(df.columns)):
        raise ValueError(
            f"DataFrame de listado incompleto, columnas: {list(df.columns)}"
        )

    return [
        ListingRow.from_dict(_fila_sin_nulos(fila))
        for fila in df.to_dict(orient="records")
    ]
