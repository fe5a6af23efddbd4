from __future__ import annotations
from typing import List, Optional
from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet
from core.models import BudgetResult
from core.presets import DISCLAIMER
from core.rules import RuleResult, has_blocking

TABLE_STYLE = TableStyle([('BACKGROUND',(0,0),(-1,0), colors.lightgrey),('BOX',(0,0),(-1,-1),1,colors.black),('INNERGRID',(0,0),(-1,-1),0.5,colors.grey)])


def _kr(v) -> str:
    return "-" if v is None else f"{v:,.0f} kr".replace(",", " ")


def _pct(v) -> str:
    return "-" if v is None else f"{v*100:.1f}%"


def _table(rows, col_widths=None) -> Table:
    t = Table(rows, hAlign='LEFT', colWidths=col_widths)
    t.setStyle(TABLE_STYLE)
    return t


def build_budget_pdf(out_path: str, result: BudgetResult, branding: Optional[dict] = None, warnings: Optional[List[RuleResult]] = None, override_reason: str = ""):
    """Write a one-document budget summary to ``out_path``.

    Refuses to export a result without a snapshot.  When critical warnings
    are present an ``override_reason`` is required and printed in the
    document.
    """
    snap = result.snapshot
    if snap is None:
        raise ValueError("budget has no snapshot; add at least one valid loan before exporting")
    warnings = warnings or []
    if has_blocking(warnings) and not override_reason.strip():
        raise ValueError("override_reason required when critical warnings exist")
    branding = branding or {}

    styles = getSampleStyleSheet()
    doc = SimpleDocTemplate(out_path, pagesize=A4, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    story = []
    title = branding.get("title", "Household Mortgage Budget")
    story += [Paragraph(f"<b>{title}</b>", styles['Title']), Spacer(1,6)]
    if branding.get("household"): story.append(Paragraph(f"Household: {branding['household']}", styles['Normal']))
    if branding.get("property"): story.append(Paragraph(f"Property: {branding['property']}", styles['Normal']))
    story += [Spacer(1, 12)]

    loan_rows = [["Loan", "Type", "Amount", "Rate", "Amort.", "Interest/mo", "Amort./mo", "Total/mo"]]
    for r in snap.loans:
        loan_rows.append([r.name, r.rate_type, _kr(r.principal), f"{r.annual_interest_rate_pct:.2f}%", f"{r.amortization_pct:.2f}%", _kr(r.monthly_interest), _kr(r.monthly_amortization), _kr(r.total_monthly_cost)])
    story += [Paragraph("<b>Loans</b>", styles['Heading3']), Spacer(1,6), _table(loan_rows), Spacer(1,12)]

    totals = [
        ["Totals", ""],
        ["Net income", _kr(snap.net_income)],
        ["Income used for plan", _kr(snap.income_for_plan)],
        ["Interest deduction / month", _kr(snap.interest_deduction_monthly)],
        ["Loan cost / month", _kr(snap.totals.total_monthly_cost)],
        ["Other costs / month", _kr(snap.extra_monthly_total)],
        ["Savings / month", _kr(snap.savings_monthly_total)],
        ["Combined plan / month", _kr(snap.combined_monthly_plan)],
        ["Share of income", _pct(snap.income_share)],
        ["Remaining income", _kr(snap.remaining_income)],
        ["Loan-to-value", _pct(snap.loan_to_value)],
    ]
    story += [_table(totals, [220, 300]), Spacer(1, 12)]

    scen = [["Scenario", ""]]
    req = result.amortization_requirement
    if req is not None:
        scen.append(["Amortization requirement", f"{req.percent:.0f}% (LTV {_pct(req.ratio)})"])
    fut = result.future_scenario
    if fut is not None:
        scen += [["After step-down", f"{fut.percent_value:.2f}% amortization"], ["Combined plan after step-down", _kr(fut.combined_plan)], ["Remaining after step-down", _kr(fut.leftover)]]
    shock = result.rate_sensitivity
    if shock is not None:
        scen += [[f"Variable rates +{shock.delta_pct:.2f}", f"{_kr(shock.increase.total)} ({shock.increase.diff:+,.0f})"], [f"Variable rates -{shock.delta_pct:.2f}", f"{_kr(shock.decrease.total)} ({shock.decrease.diff:+,.0f})"]]
    if len(scen) > 1:
        story += [_table(scen, [220, 300]), Spacer(1, 12)]

    if result.forecast_rows:
        f_rows = [["Year", "Remaining", "LTV"]] + [[str(r.year), _kr(r.remaining_principal), _pct(r.loan_to_value)] for r in result.forecast_rows]
        story += [Paragraph("<b>Amortization forecast</b>", styles['Heading3']), Spacer(1,6), _table(f_rows), Spacer(1,12)]

    if warnings:
        w_rows = [["Code","Severity","Message"]]+[[w.code, w.severity, Paragraph(w.message, styles['Normal'])] for w in warnings]
        story += [Paragraph("<b>Warnings</b>", styles['Heading3']), Spacer(1,6), _table(w_rows, [150, 60, 310]), Spacer(1,12)]
    if override_reason.strip():
        story.append(Paragraph(f"Override reason: {override_reason.strip()}", styles['Normal']))
    story += [Spacer(1, 12), Paragraph(f"<font size=8>{DISCLAIMER}</font>", styles['Normal'])]
    doc.build(story)
    return out_path
