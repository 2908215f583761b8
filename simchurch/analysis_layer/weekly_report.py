"""
Weekly Report - tabular views over a game's history.

1. Financial history frame (one row per recorded week)
2. Congregation breakdown (pattern x age group)
3. Run summary over a run_weeks() frame
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from simchurch.simulation_layer.models import AgeGroup, AttendancePattern

FINANCIAL_COLUMNS = [
    "week", "attendance", "balance", "net",
    "tithes", "offerings", "other", "income_total",
    "salaries", "utilities", "programs", "maintenance", "supplies", "expense_total",
]


@dataclass
class RunSummary:
    """Headline numbers of a multi-week run."""

    weeks: int
    start_attendance: int
    end_attendance: int
    peak_attendance: int
    start_budget: int
    end_budget: int
    total_income: int
    total_expenses: int
    average_net: float
    best_week: Optional[int]
    worst_week: Optional[int]
    events_fired: int
    new_visitors: int
    conversions: int
    departures: int

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


def financial_history_frame(state) -> pd.DataFrame:
    """Oldest week first."""
    rows = []
    for record in state.financial_history:
        rows.append({
            "week": record.week,
            "attendance": record.attendance,
            "balance": record.balance,
            "net": record.net,
            "tithes": record.income.tithes,
            "offerings": record.income.offerings,
            "other": record.income.other,
            "income_total": record.income.total,
            "salaries": record.expenses.salaries,
            "utilities": record.expenses.utilities,
            "programs": record.expenses.programs,
            "maintenance": record.expenses.maintenance,
            "supplies": record.expenses.supplies,
            "expense_total": record.expenses.total,
        })
    return pd.DataFrame(rows, columns=FINANCIAL_COLUMNS)


def congregation_frame(state) -> pd.DataFrame:
    return pd.DataFrame(
        [m.to_dict() for m in state.congregation],
        columns=[
            "id", "name", "age", "age_group", "joined_week", "attendance_pattern",
            "satisfaction", "giving_level", "family_id", "total_attendance",
        ],
    )


def congregation_breakdown(state) -> pd.DataFrame:
    """Member counts by attendance pattern (rows) and age group (columns)."""
    frame = congregation_frame(state)
    patterns = [p.value for p in AttendancePattern]
    ages = [g.value for g in AgeGroup]
    if frame.empty:
        return pd.DataFrame(0, index=patterns, columns=ages)

    table = pd.crosstab(frame["attendance_pattern"], frame["age_group"])
    return table.reindex(index=patterns, columns=ages, fill_value=0)


def summarize_run(weekly: pd.DataFrame) -> RunSummary:
    """Summary of a DataFrame produced by ChurchSimulation.run_weeks()."""
    if weekly.empty:
        return RunSummary(
            weeks=0, start_attendance=0, end_attendance=0, peak_attendance=0,
            start_budget=0, end_budget=0, total_income=0, total_expenses=0,
            average_net=0.0, best_week=None, worst_week=None,
            events_fired=0, new_visitors=0, conversions=0, departures=0,
        )

    return RunSummary(
        weeks=len(weekly),
        start_attendance=int(weekly["attendance"].iloc[0]),
        end_attendance=int(weekly["attendance"].iloc[-1]),
        peak_attendance=int(weekly["attendance"].max()),
        start_budget=int(weekly["budget"].iloc[0] - weekly["net_income"].iloc[0]),
        end_budget=int(weekly["budget"].iloc[-1]),
        total_income=int(weekly["income"].sum()),
        total_expenses=int(weekly["expenses"].sum()),
        average_net=round(float(weekly["net_income"].mean()), 2),
        best_week=int(weekly.loc[weekly["net_income"].idxmax(), "week"]),
        worst_week=int(weekly.loc[weekly["net_income"].idxmin(), "week"]),
        events_fired=int(weekly["event_id"].notna().sum()),
        new_visitors=int(weekly["new_visitors"].sum()),
        conversions=int(weekly["conversions"].sum()),
        departures=int(weekly["departures"].sum()),
    )


def export_run(weekly: pd.DataFrame, state, output_dir: Path, prefix: str = "run") -> Dict[str, Path]:
    """Write the weekly, financial and congregation CSVs. Returns the paths written."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        "weekly": output_dir / f"{prefix}_weekly.csv",
        "financials": output_dir / f"{prefix}_financials.csv",
        "congregation": output_dir / f"{prefix}_congregation.csv",
    }
    weekly.to_csv(paths["weekly"], index=False, encoding="utf-8-sig")
    financial_history_frame(state).to_csv(paths["financials"], index=False, encoding="utf-8-sig")
    congregation_frame(state).to_csv(paths["congregation"], index=False, encoding="utf-8-sig")
    return paths
