"""
Histórico rolante por métrica.

Cada métrica guarda os últimos HISTORY_POINTS valores, do mais antigo para
o mais novo. Na primeira vez que uma chave aparece, o histórico é
preenchido com o próprio valor para o gráfico não começar "subindo".
"""
import math

HISTORY_POINTS = 28

HISTORY_MIN = 0
HISTORY_MAX = 400

BAR_MIN = 5
BAR_MAX = 100


def clamp(value, low=0, high=100):
    if value is None:
        return low
    try:
        value = float(value)
    except (TypeError, ValueError):
        return low
    if math.isnan(value):
        return low
    return min(high, max(low, value))


def clamp_point(value):
    return clamp(value, HISTORY_MIN, HISTORY_MAX)


def bar_height(point):
    """Altura da barra do sparkline, em %; nunca some por completo."""
    return clamp(point, BAR_MIN, BAR_MAX)


def seed_history(value):
    return [clamp_point(value)] * HISTORY_POINTS


def merge_history(incoming, current):
    """
    Junta as métricas recém-chegadas ao histórico atual.

    O casamento é por `key`, não por posição. A ordem do resultado segue
    `incoming`; chaves que sumiram do snapshot são descartadas.
    """
    previous_by_key = {m["key"]: m for m in current}
    merged = []
    for metric in incoming:
        value = clamp_point(metric.get("value"))
        previous = previous_by_key.get(metric["key"])
        if previous is not None:
            history = list(previous["history"][-(HISTORY_POINTS - 1):]) + [value]
        else:
            history = seed_history(value)
        merged.append({**metric, "history": history})
    return merged


def summarize(history):
    """min / max / média de um histórico (0.0 se vazio)."""
    if not history:
        return {"min": 0.0, "max": 0.0, "avg": 0.0}
    return {
        "min": min(history),
        "max": max(history),
        "avg": sum(history) / len(history),
    }
