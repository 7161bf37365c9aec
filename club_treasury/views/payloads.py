"""
views/payloads.py
─────────────────────────────────────────────────────────────────────
Conversión de los resultados del servicio a dicts para JsonResponse.
Decimal, date y UUID los serializa DjangoJSONEncoder.
"""

from dataclasses import asdict

from ..services.account_reconciler import AccountStatus
from ..services.ranking import RankingEntry, ScoringEvent


def account_payload(account: AccountStatus) -> dict:
    data = asdict(account)
    data["total_debt"]     = account.total_debt
    data["debt_months"]    = account.debt_months
    data["monthly_status"] = [asdict(line) for line in account.most_recent_first()]
    data["orphan_payment_months"] = [str(w) for w in account.orphan_payment_months]
    return data


def entry_payload(entry: RankingEntry) -> dict:
    data = asdict(entry)
    data["shame_alert"] = entry.triggers_shame_alert
    return data


def event_payload(event: ScoringEvent) -> dict:
    data = asdict(event)
    data["is_pardonable"] = event.is_pardonable and not event.is_pardoned
    return data
