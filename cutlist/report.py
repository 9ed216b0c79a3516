"""
Presentation helpers for optimization results

Turns an OptimizationResult into display strings, tables and sheet
drawings. Coordinates are drawn as given; no unit conversion or scaling.
"""

from typing import Dict, Optional

import pandas as pd
import plotly.graph_objects as go

from .models import OptimizationResult, SheetResult

EMPTY = "--"

PART_FILL = "rgba(249, 115, 22, 0.15)"
PART_LINE = "#f97316"
SHEET_FILL = "rgba(30, 41, 59, 0.08)"
SHEET_LINE = "#475569"


def summarize(result: Optional[OptimizationResult], units: str = "in") -> Dict[str, str]:
    """Efficiency, waste and used sheet count as display strings"""
    if result is None:
        return {"efficiency": EMPTY, "waste": EMPTY, "sheets_used": EMPTY}
    return {
        "efficiency": f"{result.total_efficiency:.1f}%",
        "waste": f"{result.total_waste:.2f} sq {units}",
        "sheets_used": str(result.sheets_used),
    }


def cutting_list(result: OptimizationResult) -> pd.DataFrame:
    """One row per placement, sheets numbered from 1"""
    rows = []
    for number, sheet in enumerate(result.sheets, start=1):
        for p in sheet.placements:
            rows.append({
                "Sheet": number,
                "Stock": sheet.sheet.name,
                "Part": p.part.name,
                "X": p.x,
                "Y": p.y,
                "Width": p.width,
                "Height": p.height,
                "Rotated": "Yes" if p.rotated else "No",
            })
    columns = ["Sheet", "Stock", "Part", "X", "Y", "Width", "Height", "Rotated"]
    return pd.DataFrame(rows, columns=columns)


def unplaced_table(result: OptimizationResult) -> pd.DataFrame:
    """Unplaced parts grouped by the row they were expanded from"""
    columns = ["Part", "Width", "Height", "Unplaced"]
    if not result.unplaced:
        return pd.DataFrame([], columns=columns)

    df = pd.DataFrame([
        {
            "row": p.original_id if p.original_id is not None else p.id,
            "Part": p.name,
            "Width": p.width,
            "Height": p.height,
        }
        for p in result.unplaced
    ])
    grouped = (
        df.groupby(["row", "Part", "Width", "Height"], sort=False)
        .size()
        .reset_index(name="Unplaced")
    )
    return grouped[columns]


def sheet_figure(
    sheet: SheetResult,
    units: str = "in",
    position: int = 1,
    total: int = 1,
) -> go.Figure:
    """Draw one sheet with its placements; y grows downward from the origin"""
    W, H = sheet.sheet.width, sheet.sheet.height
    fig = go.Figure()

    fig.add_shape(
        type="rect",
        x0=0,
        y0=0,
        x1=W,
        y1=H,
        line=dict(width=2, color=SHEET_LINE),
        fillcolor=SHEET_FILL
    )

    # label only parts with room for text
    min_label_w = W * 0.08
    min_label_h = H * 0.06

    for place in sheet.placements:
        x, y, w, h = place.x, place.y, place.width, place.height
        fig.add_shape(
            type="rect",
            x0=x,
            y0=y,
            x1=x + w,
            y1=y + h,
            line=dict(width=1, color=PART_LINE),
            fillcolor=PART_FILL
        )
        if w > min_label_w and h > min_label_h:
            fig.add_annotation(
                x=x + w / 2,
                y=y + h / 2,
                text=f"{place.part.name}<br>{place.part.width} × {place.part.height}",
                showarrow=False,
                font=dict(size=10, color="#333"),
                bgcolor="rgba(255, 255, 255, 0.7)",
                borderpad=4
            )

    fig.update_yaxes(scaleanchor="x", scaleratio=1)
    fig.update_layout(
        title=f"Sheet {position} of {total} · {sheet.sheet.name} · {sheet.efficiency:.1f}%",
        height=600,
        margin=dict(l=30, r=30, t=50, b=30),
        xaxis=dict(
            range=[-1, W + 1],
            title=f"Width ({units})"
        ),
        yaxis=dict(
            range=[H + 1, -1],
            title=f"Height ({units})"
        ),
        dragmode="pan",
    )
    return fig
