#!/usr/bin/env python3
"""
Scoring Module - match scores between students and listings.

Public API:
- ScoringService: compute_match / get_student_matches / get_listing_matches
- CompositeScore: Score with per-signal breakdown
- MatchResult: Ranked pair for list views

Modules:
- models.py: Profiles and result dataclasses
- loaders.py: Build profiles from the database
- temporal.py, skills.py, sustainability.py, growth.py, trust.py,
  compensation.py: One pure function per signal
- composite.py: Weighted combination
- persistence.py: Cache upsert and history
- service.py: ScoringService orchestrator
- attractiveness.py: Reverse-direction listing and company scores
"""

from core.scorer.models import CompositeScore, MatchResult, SignalResult
from core.scorer.service import ScoringService
from core.scorer.attractiveness import AttractivenessService, AttractivenessResult, CompanyAttractiveness

__all__ = [
    'ScoringService', 'CompositeScore', 'MatchResult', 'SignalResult',
    'AttractivenessService', 'AttractivenessResult', 'CompanyAttractiveness',
]
