# app.py - Cut list optimizer front end
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import pandas as pd
import streamlit as st
from pydantic import ValidationError

from cutlist.models import OptimizationResult, OptimizerConfig, PartRequest, StockSheetSpec
from cutlist.normalize import InputLimitError
from cutlist.optimizer import optimize_requests
from cutlist.report import cutting_list, sheet_figure, summarize, unplaced_table
from cutlist.settings import settings

logger = logging.getLogger(__name__)

# ============================================================================
# PAGE SETUP
# ============================================================================
st.set_page_config(page_title="Cut List Pro", layout="wide", page_icon="📐")

PART_COLUMNS = ["Name", "Width", "Height", "Qty", "Allow Rotation"]
STOCK_COLUMNS = ["Name", "Width", "Height", "Qty"]

DEFAULT_PARTS = [
    {"Name": "Side L", "Width": 24.0, "Height": 30.0, "Qty": 1, "Allow Rotation": True},
    {"Name": "Side R", "Width": 24.0, "Height": 30.0, "Qty": 1, "Allow Rotation": True},
    {"Name": "Top", "Width": 24.0, "Height": 24.0, "Qty": 1, "Allow Rotation": True},
    {"Name": "Bottom", "Width": 24.0, "Height": 24.0, "Qty": 1, "Allow Rotation": True},
    {"Name": "Shelf", "Width": 22.5, "Height": 23.0, "Qty": 3, "Allow Rotation": True},
]
DEFAULT_STOCK = [
    {"Name": "Plywood 3/4", "Width": 96.0, "Height": 48.0, "Qty": 1},
]


# ============================================================================
# STATE MANAGEMENT
# ============================================================================
def _init_state():
    """Initialize session state with all required keys"""
    defaults = {
        "parts_df": pd.DataFrame(DEFAULT_PARTS, columns=PART_COLUMNS),
        "stock_df": pd.DataFrame(DEFAULT_STOCK, columns=STOCK_COLUMNS),
        "result": None,
        "needs_run": True,
    }
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)


_init_state()


# ============================================================================
# ROW CONVERSION
# ============================================================================
def _clean(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows the editor left half-filled"""
    return df.dropna(subset=["Width", "Height"]).reset_index(drop=True)


def rows_to_parts(df: pd.DataFrame) -> List[PartRequest]:
    parts = []
    for i, row in _clean(df).iterrows():
        parts.append(PartRequest(
            id=i + 1,
            name=str(row["Name"]) if pd.notna(row["Name"]) else f"Part {i + 1}",
            width=float(row["Width"]),
            height=float(row["Height"]),
            quantity=int(row["Qty"] if pd.notna(row["Qty"]) else 0),
            allow_rotation=bool(row["Allow Rotation"]) if pd.notna(row["Allow Rotation"]) else True,
        ))
    return parts


def rows_to_stock(df: pd.DataFrame) -> List[StockSheetSpec]:
    stock = []
    for i, row in _clean(df).iterrows():
        stock.append(StockSheetSpec(
            id=100 + i + 1,
            name=str(row["Name"]) if pd.notna(row["Name"]) else f"Sheet {i + 1}",
            width=float(row["Width"]),
            height=float(row["Height"]),
            quantity=int(row["Qty"] if pd.notna(row["Qty"]) else 0),
        ))
    return stock


# ============================================================================
# UI COMPONENTS
# ============================================================================
def render_sidebar() -> OptimizerConfig:
    """Render sidebar with optimizer settings"""
    with st.sidebar:
        st.header("⚙️ Settings")
        units = st.selectbox("Units", ["in", "mm", "cm"], index=0, key="sb_units")
        kerf = st.number_input(
            f"Blade kerf ({units})",
            min_value=0.0,
            value=settings.default_kerf,
            step=0.005,
            format="%.3f",
            key="sb_kerf"
        )
        st.caption("Kerf is removed from the leftover at every cut.")
    return OptimizerConfig(kerf=kerf, units=units)


def render_editors() -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Render the parts and stock tables"""
    col1, col2 = st.columns([3, 2])
    with col1:
        st.subheader("📋 Parts")
        parts_df = st.data_editor(
            st.session_state.parts_df,
            use_container_width=True,
            num_rows="dynamic",
            key="parts_editor"
        )
    with col2:
        st.subheader("🪵 Stock Sheets")
        stock_df = st.data_editor(
            st.session_state.stock_df,
            use_container_width=True,
            num_rows="dynamic",
            key="stock_editor"
        )
    return parts_df, stock_df


def render_stats(result: Optional[OptimizationResult], units: str):
    stats = summarize(result, units)
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Efficiency", stats["efficiency"])
    with col2:
        st.metric("Waste", stats["waste"])
    with col3:
        st.metric("Used Sheets", stats["sheets_used"])


def render_results(result: OptimizationResult, units: str):
    """Render sheet previews and tables"""
    if result.unplaced:
        st.warning(f"⚠️ {len(result.unplaced)} part(s) did not fit on the available stock")
        st.dataframe(unplaced_table(result), use_container_width=True)

    if not result.sheets:
        st.info("ℹ️ No sheets used. Add parts and stock, then run the optimizer.")
        return

    total = len(result.sheets)
    position = 1
    if total > 1:
        position = st.slider("Sheet", 1, total, 1, key="sheet_pos")
    sheet = result.sheets[position - 1]
    st.plotly_chart(sheet_figure(sheet, units, position, total), use_container_width=True)

    with st.expander("📋 Cutting List"):
        df = cutting_list(result)
        st.dataframe(df, use_container_width=True)
        st.download_button(
            "⬇️ Download CSV",
            df.to_csv(index=False),
            file_name="cutting_list.csv",
            mime="text/csv"
        )


# ============================================================================
# MAIN APPLICATION
# ============================================================================
def main():
    """Main application entry point"""
    st.title("📐 Cut List Pro")
    st.caption("Guillotine sheet optimizer with blade kerf")

    config = render_sidebar()
    parts_df, stock_df = render_editors()

    clicked = st.button("🧩 Run Optimization", type="primary", use_container_width=True)
    if clicked or st.session_state.needs_run:
        try:
            parts = rows_to_parts(parts_df)
            stock = rows_to_stock(stock_df)
            st.session_state.result = optimize_requests(
                parts, stock, config, max_units=settings.max_units
            )
        except ValidationError as e:
            st.error(f"❌ Invalid row: {e.errors()[0]['msg']}")
        except InputLimitError as e:
            logger.warning("Optimization rejected: %s", e)
            st.error(f"❌ {e}")
        st.session_state.needs_run = False

    result = st.session_state.result
    st.markdown("---")
    render_stats(result, config.units)
    if result is not None:
        render_results(result, config.units)


if __name__ == "__main__":
    main()
