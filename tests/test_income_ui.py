from streamlit.testing.v1 import AppTest


def income_app():
    import streamlit as st
    from ui.income import render_income_section

    st.session_state.setdefault(
        "persons", [{"name": "Anna", "gross_monthly_income": 50000.0, "tax_table_id": "30", "pre_tax_deduction": 0.0}]
    )
    render_income_section()


def test_income_section_shows_household_net():
    at = AppTest.from_function(income_app)
    at.run()
    net = next(m for m in at.metric if m.label == "Net")
    assert net.value == "35 000 kr"
