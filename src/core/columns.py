# Report column labels. The workbook is read by Spanish-speaking ops teams,
# so these strings are part of the output format.

COL_CENTRO = "Centro"
COL_WAREHOUSE = "Descripción (Almacén)"
COL_SKU = "SKU"
COL_NAME = "Nombre Prod"
COL_SAP = "Stock SAP"
COL_WMS = "Stock WMS"
COL_DIFFERENCE = "Diferencia"
COL_ADJUSTMENT = "Ajuste Mensual (Dif. Inventario)"
COL_TRANSFER = "Stock para Traslado"
COL_TOTAL = "Suma de Cantidad"

ANALYSIS_COLUMNS = [
    COL_CENTRO,
    COL_WAREHOUSE,
    COL_SKU,
    COL_NAME,
    COL_SAP,
    COL_WMS,
    COL_DIFFERENCE,
    COL_ADJUSTMENT,
    COL_TRANSFER,
]
CENTRO_TOTAL_COLUMNS = [COL_CENTRO, COL_TOTAL]
DIFFERENCE_COLUMNS = [COL_CENTRO, COL_DIFFERENCE]
