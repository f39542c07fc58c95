"""
Cálculo do tempo decorrido entre dois checkouts.
"""

from datetime import datetime

MILLIS_PER_HOUR = 60 * 60 * 1000


def time_delta(start_millis: float, end_millis: float) -> float:
    """Horas decimais entre dois instantes em milissegundos, sem arredondar."""
    return (end_millis - start_millis) / MILLIS_PER_HOUR


def format_hours(hours: float) -> str:
    return f"{hours:.2f}"


def iso_to_millis(timestamp: str) -> int:
    """Converte um timestamp ISO-8601 do reflog (com offset ou Z) em milissegundos."""
    if timestamp.endswith('Z'):
        timestamp = timestamp[:-1] + '+00:00'
    return int(round(datetime.fromisoformat(timestamp).timestamp() * 1000))


def now_millis() -> int:
    return int(round(datetime.now().timestamp() * 1000))
