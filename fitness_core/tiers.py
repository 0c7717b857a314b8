# fitness_core/tiers.py
from . import config


def tier_message(score: float) -> str:
    s = float(score)
    for cutoff, message in config.TIER_BANDS:
        if s >= cutoff:
            return message
    return config.TIER_FALLBACK


def input_hint(fmt: str) -> str:
    return config.INPUT_HINTS.get(fmt, config.INPUT_HINT_DEFAULT)
