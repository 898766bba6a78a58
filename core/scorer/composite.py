#!/usr/bin/env python3
"""
Composite Score - weighted combination of signal results.

Weights are normalised to sum to 1; the composite is clipped to [0, 100]
and rounded to two decimals. Each signal keeps its weight and contribution
in the breakdown for explainability.
"""

from typing import Dict, List, Any, Tuple
import logging

import numpy as np

from core.config_loader import SignalWeights
from core.scorer.models import SignalResult

logger = logging.getLogger(__name__)


def to_native_types(obj):
    """Recursively convert numpy and date values to JSON-native types."""
    if obj is None:
        return None
    if hasattr(obj, 'isoformat'):
        return obj.isoformat()
    if hasattr(obj, 'tolist'):  # numpy array (check before scalars)
        return obj.tolist()
    if hasattr(obj, 'item'):  # numpy scalar
        return obj.item()
    if isinstance(obj, dict):
        return {str(k): to_native_types(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [to_native_types(item) for item in obj]
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


def combine_signals(
    signals: List[SignalResult],
    weights: SignalWeights
) -> Tuple[float, Dict[str, Dict[str, Any]]]:
    """
    Returns (composite score, breakdown keyed by signal name).

    Signals with no configured weight contribute nothing.
    """
    weight_map = weights.as_dict()
    raw = np.array([weight_map.get(s.signal, 0.0) for s in signals], dtype=float)
    total = raw.sum()
    if total <= 0:
        raise ValueError("Signal weights must have a positive sum")

    normalized = raw / total
    scores = np.clip(np.array([float(s.score) for s in signals]), 0.0, 100.0)
    contributions = normalized * scores

    composite = float(np.clip(contributions.sum(), 0.0, 100.0))

    breakdown = {}
    for signal, weight, score, contribution in zip(signals, normalized, scores, contributions):
        breakdown[signal.signal] = {
            'score': round(float(score), 2),
            'weight': round(float(weight), 4),
            'contribution': round(float(contribution), 2),
            'details': to_native_types(signal.details),
        }

    return round(composite, 2), breakdown
