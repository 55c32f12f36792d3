"""
Stock Comparator Dashboard

A Streamlit dashboard for reconciling SAP stock against the WMS.
Run with: streamlit run app.py
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

import streamlit as st
import pandas as pd
import plotly.graph_objects as go
from openai import OpenAIError

from core.analysis import top_discrepancies
from core.columns import COL_CENTRO, COL_DIFFERENCE, COL_TOTAL
from core.config import Settings, env_get
from core.errors import StockReconciliationError
from core.insights import InsightGenerator
from core.log import setup_logging
from core.report import DEFAULT_FILENAME, XLSX_MIME_TYPE
from sources.stock_analysis import generate_analysis_file

settings = Settings.from_env()
setup_logging(settings.log_level)

# Page config
st.set_page_config(
    page_title="Stock Comparator",
    page_icon="📦",
    layout="wide",
)

st.title("📦 Stock Comparator")
st.caption(f"Inventario CD8000 · SAP vs WMS en {settings.warehouse_code}")

ss = st.session_state
ss.setdefault("analysis", None)
ss.setdefault("brief", None)


def show_centro_table(df: pd.DataFrame, value_col: str, value_label: str):
    """Render a Centro / value table, or a placeholder when empty."""
    if len(df) == 0:
        st.info("No hay datos")
        return
    st.dataframe(
        df.rename(columns={value_col: value_label}),
        use_container_width=True,
        hide_index=True,
        column_config={value_label: st.column_config.NumberColumn(format="%.2f")},
    )


# --- Upload form ---
with st.form("upload"):
    st.subheader("Cargar Archivos de Stock")
    st.write("Sube los archivos de SAP, WMS y Ajustes para generar el reporte de discrepancias.")
    sap_file = st.file_uploader("Archivo de Stock SAP", type=["xlsx", "csv"])
    wms_file = st.file_uploader("Archivo de Stock WMS", type=["xlsx", "csv"])
    adjustments_file = st.file_uploader("Archivo de Ajustes (Opcional)", type=["xlsx", "csv"])
    submitted = st.form_submit_button("Analizar", use_container_width=True)

if submitted:
    ss.analysis = None
    ss.brief = None
    if not sap_file or not wms_file:
        st.error("Archivos Faltantes: por favor, sube los archivos de SAP y WMS.")
    else:
        with st.spinner("Analizando..."):
            try:
                ss.analysis = generate_analysis_file(
                    sap_file, wms_file, adjustments_file, settings
                )
                st.success("Análisis Completado. Descarga el reporte más abajo.")
            except StockReconciliationError as exc:
                st.error(f"Error en el Análisis: {exc.message}")

analysis = ss.analysis
if analysis is None:
    st.stop()

result = analysis.result
metrics = result.summary()

st.download_button(
    "⬇️ Descargar Análisis (.xlsx)",
    data=analysis.file_bytes,
    file_name=DEFAULT_FILENAME,
    mime=XLSX_MIME_TYPE,
    use_container_width=True,
)

# --- Key Metrics Row ---
st.header("Resumen")
col1, col2, col3, col4 = st.columns(4)

with col1:
    st.metric(
        "SKUs Analizados",
        f"{metrics['skus_reported']:,}",
        delta=f"{metrics['skus_with_difference']:,} con diferencia",
        delta_color="inverse",
    )

with col2:
    st.metric(
        "Diferencia Neta (WMS - SAP)",
        f"{metrics['net_difference']:,.0f}",
        delta=f"{metrics['absolute_difference']:,.0f} absoluta",
        delta_color="off",
    )

with col3:
    st.metric("Merma (Z42)", f"{metrics['shrinkage_total']:,.0f}")

with col4:
    st.metric("Vencimiento (Z44)", f"{metrics['expiry_total']:,.0f}")

st.divider()

# --- Centro tables ---
left_col, mid_col, right_col = st.columns(3)

with left_col:
    st.subheader("Resumen de Diferencias por Centro")
    st.caption("Total de diferencias de inventario por centro.")
    show_centro_table(result.difference_report, COL_DIFFERENCE, "Diferencia")

    if result.chart_data:
        fig = go.Figure(
            data=[
                go.Pie(
                    labels=[s["name"] for s in result.chart_data],
                    values=[s["value"] for s in result.chart_data],
                    marker_colors=[s["fill"] for s in result.chart_data],
                    hole=0.4,
                )
            ]
        )
        fig.update_layout(
            height=280,
            margin=dict(t=20, b=20, l=20, r=20),
            legend=dict(orientation="h", yanchor="bottom", y=-0.2),
        )
        st.plotly_chart(fig, use_container_width=True)

with mid_col:
    st.subheader("Ajustes por Merma (Z42) por Centro")
    show_centro_table(result.shrinkage_report, COL_TOTAL, "Cantidad")

with right_col:
    st.subheader("Ajustes por Vencimiento (Z44) por Centro")
    show_centro_table(result.expiry_report, COL_TOTAL, "Cantidad")

st.divider()

# --- Analysis table ---
st.subheader("🔎 Análisis de Stock")

only_differences = st.checkbox("Mostrar solo SKUs con diferencia", value=False)
centros = sorted(result.analysis_report[COL_CENTRO].unique().tolist())
centro_filter = st.multiselect("Filtrar por centro:", centros, default=centros)

table = result.analysis_report[result.analysis_report[COL_CENTRO].isin(centro_filter)]
if only_differences:
    table = table[table[COL_DIFFERENCE] != 0]

st.dataframe(table, use_container_width=True, hide_index=True)
st.caption(f"Mostrando {len(table):,} de {len(result.analysis_report):,} SKUs")

# --- Data Quality Section ---
with st.expander("📋 Calidad de Datos"):
    quality_cols = st.columns(len(analysis.quality_reports) or 1)
    for col, report in zip(quality_cols, analysis.quality_reports.values()):
        with col:
            st.markdown(f"**{report.source_name}** ({report.total_rows:,} filas)")
            if not report.issues:
                st.markdown("✅ Sin problemas")
            for issue in report.issues:
                icon = "🔴" if issue.severity == "critical" else "🟡" if issue.severity == "warning" else "🔵"
                st.markdown(f"{icon} {issue.column}: {issue.description}")

# --- AI brief ---
if env_get("OPENAI_API_KEY"):
    st.divider()
    st.subheader("🤖 Resumen con IA")
    if st.button("Generar resumen"):
        with st.spinner("Generando resumen..."):
            try:
                ss.brief = InsightGenerator(model=settings.openai_model).generate_brief(
                    result
                )
            except StockReconciliationError as exc:
                st.error(f"Error en el Resumen: {exc.message}")
            except OpenAIError as exc:
                st.error(f"Error en el Resumen: {exc}")

    brief = ss.brief
    if brief is not None:
        st.markdown(brief.executive_summary)
        if brief.findings:
            st.dataframe(
                pd.DataFrame([f.model_dump() for f in brief.findings]),
                use_container_width=True,
                hide_index=True,
            )
        for obs in brief.centro_observations:
            st.markdown(f"- **{obs.centro}**: {obs.observation}")
        if brief.recommended_actions:
            st.markdown("**Acciones recomendadas**")
            for i, action in enumerate(brief.recommended_actions, 1):
                st.markdown(f"{i}. {action}")
    else:
        st.caption("Top discrepancias que se enviarán al modelo:")
        st.dataframe(top_discrepancies(result.analysis_report, limit=10), hide_index=True)

# --- Footer ---
st.divider()
st.caption(
    "Built with Streamlit | "
    f"SAP: {analysis.quality_reports['sap'].total_rows:,} filas | "
    f"WMS: {analysis.quality_reports['wms'].total_rows:,} filas"
)
