# src/ui/card_forecast_chart.py
from __future__ import annotations

import plotly.graph_objects as go
import streamlit as st

from src.config import (
    COLOR_GRID,
    COLOR_HUMIDITY,
    COLOR_TEMPERATURE,
    COLOR_TEMPERATURE_FILL,
    PLOTLY_CONFIG,
)
from src.ui.common import section_title, status_message
from src.viewmodels.weather import ChartData


def build_forecast_figure(chart: ChartData) -> go.Figure:
    """Temperature on the left axis, humidity (0..100 %) on the right one."""
    labels = list(chart.labels)

    fig = go.Figure(
        [
            go.Scatter(
                x=labels,
                y=list(chart.temperatures),
                name=chart.temperature_label,
                mode="lines+markers",
                line=dict(color=COLOR_TEMPERATURE, shape="spline", smoothing=0.7),
                marker=dict(color="#fff", line=dict(color=COLOR_TEMPERATURE, width=2)),
                fill="tozeroy",
                fillcolor=COLOR_TEMPERATURE_FILL,
                hovertemplate=f"%{{y:.0f}} {chart.temperature_unit}<extra>{chart.temperature_label}</extra>",
                yaxis="y",
            ),
            go.Scatter(
                x=labels,
                y=list(chart.humidities),
                name=chart.humidity_label,
                mode="lines",
                line=dict(color=COLOR_HUMIDITY, dash="dash", shape="spline", smoothing=0.6),
                hovertemplate=f"%{{y:.0f}}%<extra>{chart.humidity_label}</extra>",
                yaxis="y2",
            ),
        ]
    )

    fig.update_layout(
        margin=dict(l=50, r=50, t=30, b=40),
        height=320,
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(showgrid=False),
        yaxis=dict(gridcolor=COLOR_GRID, ticksuffix="°", automargin=True),
        yaxis2=dict(
            overlaying="y",
            side="right",
            range=[0, 100],
            ticksuffix="%",
            showgrid=False,
        ),
    )
    return fig


def card_forecast_chart(chart: ChartData | None, loading: bool = False) -> None:
    """Render the 'next hours' trend card."""
    section_title("Tendencia en las próximas horas", mb=2)
    st.caption("Visualiza temperatura y humedad en intervalos de 3 horas.")

    if chart is None:
        if loading:
            status_message("Cargando pronósticos…")
        else:
            st.markdown(
                "<p class='chart-empty'>Sin datos de pronóstico disponibles.</p>",
                unsafe_allow_html=True,
            )
        return

    st.plotly_chart(
        build_forecast_figure(chart),
        use_container_width=True,
        theme=None,
        config=PLOTLY_CONFIG,
    )
