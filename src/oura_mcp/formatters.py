"""
Pure transforms from raw Oura JSON to the single text block returned by each tool.

Every formatter has the signature ``(payload, start_date, end_date) -> str`` and
never raises on missing fields: absent or null numbers count as 0.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Mapping, Optional

HEART_RATE_LIMIT = 20
HEART_RATE_NOTE = f"(Showing first {HEART_RATE_LIMIT} data points)"


def _num(mapping: Any, key: str) -> float | int:
    if not isinstance(mapping, Mapping):
        return 0
    v = mapping.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return 0
    if isinstance(v, float) and v.is_integer():
        return int(v)
    return v


def _records(payload: Any) -> List[Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        return []
    data = payload.get("data")
    if not isinstance(data, list):
        return []
    return [r for r in data if isinstance(r, Mapping)]


def round_half_away_from_zero(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def average_score(scores: Iterable[float]) -> int:
    values = list(scores)
    return round_half_away_from_zero(sum(values) / len(values))


def date_range_label(start_date: str, end_date: Optional[str]) -> str:
    return f"{start_date} to {end_date or start_date}"


def no_data_message(label: str, start_date: str, end_date: Optional[str]) -> str:
    return f"No {label} data found for the specified date range ({date_range_label(start_date, end_date)})."


def _render(title: str, start_date: str, end_date: Optional[str], lines: List[str], summary: List[str]) -> str:
    header = f"{title} Data ({date_range_label(start_date, end_date)}):"
    return header + "\n\n" + "\n".join(lines) + "\n\n" + "\n".join(summary)


def _signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value:.2f}"


# ---- sleep ------------------------------------------------------------------

def _sleep_row(record: Mapping[str, Any]) -> dict:
    contributors = record.get("contributors") or {}
    return {
        "date": record.get("day", ""),
        "score": _num(record, "score"),
        "deep_sleep": _num(contributors, "deep_sleep"),
        "rem_sleep": _num(contributors, "rem_sleep"),
        "light_sleep": _num(contributors, "light_sleep"),
        "efficiency": _num(contributors, "efficiency"),
        "restfulness": _num(contributors, "restfulness"),
        "timing": _num(contributors, "timing"),
        "total_sleep": _num(contributors, "total_sleep"),
        "latency": _num(contributors, "latency"),
    }


def format_sleep(payload: Any, start_date: str, end_date: Optional[str] = None) -> str:
    rows = [_sleep_row(r) for r in _records(payload)]
    if not rows:
        return no_data_message("sleep", start_date, end_date)

    lines = [
        f"{r['date']}: Sleep {r['score']}/100 "
        f"(Deep: {r['deep_sleep']}, REM: {r['rem_sleep']}, Efficiency: {r['efficiency']})"
        for r in rows
    ]
    avg = average_score(r["score"] for r in rows)
    return _render("Sleep", start_date, end_date, lines, [f"Average Sleep Score: {avg}/100"])


# ---- readiness --------------------------------------------------------------

def _readiness_row(record: Mapping[str, Any]) -> dict:
    contributors = record.get("contributors") or {}
    return {
        "date": record.get("day", ""),
        "score": _num(record, "score"),
        "hrv_balance": _num(contributors, "hrv_balance"),
        "resting_heart_rate": _num(contributors, "resting_heart_rate"),
        "body_temp": _num(contributors, "body_temperature"),
        "temp_deviation": _num(record, "temperature_deviation"),
        "recovery_index": _num(contributors, "recovery_index"),
        "sleep_balance": _num(contributors, "sleep_balance"),
    }


def format_readiness(payload: Any, start_date: str, end_date: Optional[str] = None) -> str:
    rows = [_readiness_row(r) for r in _records(payload)]
    if not rows:
        return no_data_message("readiness", start_date, end_date)

    lines = [
        f"{r['date']}: Readiness {r['score']}/100 "
        f"(HRV: {r['hrv_balance']}, RHR: {r['resting_heart_rate']}, Temp: {_signed(r['temp_deviation'])}°C)"
        for r in rows
    ]
    avg = average_score(r["score"] for r in rows)
    return _render("Readiness", start_date, end_date, lines, [f"Average Readiness Score: {avg}/100"])


# ---- activity ---------------------------------------------------------------

def _activity_row(record: Mapping[str, Any]) -> dict:
    return {
        "date": record.get("day", ""),
        "score": _num(record, "score"),
        "steps": _num(record, "steps"),
        "calories": _num(record, "active_calories"),
    }


def format_activity(payload: Any, start_date: str, end_date: Optional[str] = None) -> str:
    rows = [_activity_row(r) for r in _records(payload)]
    if not rows:
        return no_data_message("activity", start_date, end_date)

    lines = [
        f"{r['date']}: Activity {r['score']}/100 (Steps: {r['steps']:,}, Calories: {r['calories']})"
        for r in rows
    ]
    avg = average_score(r["score"] for r in rows)
    total_steps = sum(r["steps"] for r in rows)
    return _render(
        "Activity",
        start_date,
        end_date,
        lines,
        [f"Average Activity Score: {avg}/100", f"Total Steps: {total_steps:,}"],
    )


# ---- heart rate -------------------------------------------------------------

def format_heart_rate(payload: Any, start_date: str, end_date: Optional[str] = None) -> str:
    records = _records(payload)
    if not records:
        return no_data_message("heart rate", start_date, end_date)

    # The note is appended even when fewer than HEART_RATE_LIMIT points exist.
    lines = [
        f"{r.get('timestamp', '')}: {_num(r, 'bpm')} bpm (Source: {r.get('source') or 'unknown'})"
        for r in records[:HEART_RATE_LIMIT]
    ]
    return _render("Heart Rate", start_date, end_date, lines, [HEART_RATE_NOTE])
