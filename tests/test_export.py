"""
tests/test_export.py
─────────────────────────────────────────────────────────────────────
Excel export of accounts, month figures and ranking (openpyxl).
"""
from __future__ import annotations

from decimal import Decimal
from io import BytesIO
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from openpyxl import load_workbook

from club_treasury.services.account_reconciler import AccountStatus
from club_treasury.services.cash_flow import MonthlyClubStats
from club_treasury.services.export_service import DEBT_FILL, build_workbook
from club_treasury.services.ranking import RankingEntry
from club_treasury.services.records import Player


@pytest.fixture
def month_stats():
    return MonthlyClubStats(
        month=3, year=2025,
        total_collected=Decimal("16000"), total_financed_this_month=Decimal("1000"),
        paid_count=16, suggested_club_fee=Decimal("15000"), amount_paid_to_club=Decimal("15000"),
        has_closed=True, savings=Decimal("0"), notes="cierre normal",
    )


@pytest.fixture
def accounts():
    return [
        AccountStatus("a", total_expected=Decimal("3000"), total_paid=Decimal("1000")),
        AccountStatus("b", total_expected=Decimal("1000"), total_paid=Decimal("1000")),
    ]


class TestBuildWorkbook:

    def test_sheets_and_rows(self, accounts, month_stats):
        content = build_workbook(accounts, month_stats, players=[Player(id="a", full_name="Ana")])
        wb = load_workbook(BytesIO(content))
        assert wb.sheetnames == ["Cuentas", "Mes"]

        ws = wb["Cuentas"]
        assert ws.cell(row=1, column=1).value == "Jugador"
        assert ws.cell(row=2, column=1).value == "Ana"
        assert ws.cell(row=2, column=4).value == 2000
        assert ws.cell(row=3, column=1).value == "b"
        assert ws.cell(row=2, column=1).fill.start_color.rgb.endswith(DEBT_FILL.start_color.rgb[-6:])

        ms = wb["Mes"]
        assert ms["B1"].value == "2025/03"
        assert ms["B7"].value == "Sí"
        assert ms["B9"].value == "cierre normal"

    def test_ranking_sheet(self, accounts, month_stats):
        ranking = [RankingEntry("a", total_points=6, full_name="Ana"),
                   RankingEntry("b", total_points=-12, full_name="Beto")]
        wb = load_workbook(BytesIO(build_workbook(accounts, month_stats, ranking=ranking)))
        rs = wb["Ranking"]
        assert [c.value for c in rs[2]] == [1, "Ana", 6, 0, 0]
        assert rs.cell(row=3, column=3).value == -12
