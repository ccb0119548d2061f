# services/constants.py
"""Constantes globales del planificador de carga"""

import os

# ============ Apilamiento ============
# Techo de peso de una unidad cuando el catálogo no define max_stack_weight:
# FACTOR × peso bruto del pallet base completo
FACTOR_PESO_APILAMIENTO = float(os.getenv("FACTOR_PESO_APILAMIENTO", "2.0"))

# ============ Umbrales del validador ============
UMBRAL_SOBRELLENADO = float(os.getenv("UMBRAL_SOBRELLENADO", "1.5"))        # 150% capacidad
UMBRAL_ALTURA_CERCANA = float(os.getenv("UMBRAL_ALTURA_CERCANA", "0.95"))    # 95% altura vehículo
MAX_PALLETS_GERBADOS_AVISO = int(os.getenv("MAX_PALLETS_GERBADOS_AVISO", "2"))
ALTURA_MAXIMA_SOSPECHOSA = 3.0      # metros: sobre esto, probable error de unidad
DIMENSION_MAXIMA_SOSPECHOSA = 2.0   # metros: largo/ancho de pallet

# ============ Concurrencia ============
PLAN_MAX_WORKERS = int(os.getenv("PLAN_MAX_WORKERS", str(min(8, (os.cpu_count() or 4)))))

# ============ Debug ============
DEBUG_PLANIFICACION = os.getenv("DEBUG_PLANIFICACION", "false").lower() == "true"

# ============ Geometría ============
TOLERANCIA_GEOMETRICA = 1e-9  # metros, absorbe errores de suma en punto flotante
