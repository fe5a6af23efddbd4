import os
import tempfile

import streamlit as st

from core.models import BudgetResult
from core.rules import evaluate_rules
from export.csv_export import make_csv_bytes
from export.pdf_export import build_budget_pdf


def render_exports_view(result: BudgetResult, cost_items):
    st.header("Exports")
    if result.snapshot is None:
        st.info("Add at least one valid loan to enable exports.")
        return
    st.download_button(
        "Download CSV Summary",
        data=make_csv_bytes(result, cost_items),
        file_name="budget_summary.csv",
        mime="text/csv",
    )
    warnings = evaluate_rules(result)
    if st.button("Export PDF"):
        prop = st.session_state.get("property_info") or {}
        names = ", ".join(p.get("name", "") for p in st.session_state.get("persons", []) if p.get("name"))
        fd, path = tempfile.mkstemp(suffix=".pdf")
        os.close(fd)
        try:
            build_budget_pdf(path, result, {"household": names, "property": prop.get("name", "")}, warnings)
            with open(path, "rb") as f:
                data = f.read()
        finally:
            os.remove(path)
        st.download_button("Download PDF", data=data, file_name="budget_summary.pdf", mime="application/pdf")
