"""
services/export_service.py
─────────────────────────────────────────────────────────────────────
Exportación de tesorería a Excel
Writes account statements, the monthly club figures and the ranking into
an .xlsx workbook (openpyxl) and returns its bytes.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Dict, Iterable, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from .account_reconciler import AccountStatus
from .cash_flow import MonthlyClubStats
from .ranking import RankingEntry
from .records import Player

logger = logging.getLogger(__name__)

# Colores de celda (hex openpyxl, sin '#')
DEBT_FILL     = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
FINANCED_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
HEADER_FONT   = Font(bold=True)

ACCOUNT_HEADERS = ["Jugador", "Esperado", "Pagado", "Deuda", "Deuda financiada", "Meses adeudados"]
RANKING_HEADERS = ["Posición", "Jugador", "Total", "Positivos", "Negativos"]


def _header(ws, headers: List[str]) -> None:
    ws.append(headers)
    for cell in ws[1]:
        cell.font = HEADER_FONT


def build_workbook(
    accounts: Iterable[AccountStatus],
    month_stats: MonthlyClubStats,
    players: Iterable[Player] = (),
    ranking: Optional[Iterable[RankingEntry]] = None,
) -> bytes:
    """
    Hojas: "Cuentas" (una fila por jugador), "Mes" (cifras del mes)
    y "Ranking" si se pasa la tabla.
    """
    names: Dict[str, str] = {str(p.id): p.full_name or p.nickname or str(p.id) for p in players}

    wb = Workbook()
    ws = wb.active
    ws.title = "Cuentas"
    _header(ws, ACCOUNT_HEADERS)
    for acc in accounts:
        ws.append([
            names.get(acc.player_id, acc.player_id),
            acc.total_expected,
            acc.total_paid,
            acc.total_debt,
            acc.financed_debt,
            acc.debt_months,
        ])
        row = ws[ws.max_row]
        if acc.total_debt > 0:
            for cell in row:
                cell.fill = DEBT_FILL
        elif acc.financed_debt > 0:
            for cell in row:
                cell.fill = FINANCED_FILL

    ms = wb.create_sheet("Mes")
    ms.append(["Mes", f"{month_stats.year}/{month_stats.month:02d}"])
    ms.append(["Recaudado (bruto)", month_stats.total_collected])
    ms.append(["Financiado por el equipo", month_stats.total_financed_this_month])
    ms.append(["Jugadores que pagaron", month_stats.paid_count])
    ms.append(["Cuota sugerida al club", month_stats.suggested_club_fee])
    ms.append(["Pagado al club", month_stats.amount_paid_to_club])
    ms.append(["Cerrado", "Sí" if month_stats.has_closed else "No"])
    ms.append(["Ahorro", month_stats.savings])
    if month_stats.notes:
        ms.append(["Notas", month_stats.notes])
    for cell in ms["A"]:
        cell.font = HEADER_FONT

    if ranking is not None:
        rs = wb.create_sheet("Ranking")
        _header(rs, RANKING_HEADERS)
        for pos, entry in enumerate(ranking, start=1):
            rs.append([
                pos,
                entry.full_name or names.get(entry.player_id, entry.player_id),
                entry.total_points,
                entry.positive_points,
                entry.negative_points,
            ])
            if entry.total_points < 0:
                for cell in rs[rs.max_row]:
                    cell.fill = DEBT_FILL

    buf = BytesIO()
    wb.save(buf)
    logger.info("Exportación de tesorería %s/%02d generada.", month_stats.year, month_stats.month)
    return buf.getvalue()
