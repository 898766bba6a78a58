#!/usr/bin/env python3
"""
Skills Alignment - direct skill overlap with proficiency and athletic transfers.

Weights: direct match 55%, proficiency 20%, athletic transfer 15%,
category overlap 10%.
"""

from typing import Dict
import logging

from core.scorer.models import StudentProfile, ListingProfile, SignalResult, AthleticTransfer

logger = logging.getLogger(__name__)


def _normalize(name: str) -> str:
    return (name or '').strip().lower()


def score_skills_alignment(student: StudentProfile, listing: ListingProfile) -> SignalResult:
    required = [_normalize(s) for s in listing.skills_required if _normalize(s)]
    student_skills = {_normalize(s.name): s for s in student.skills}

    if not required:
        return SignalResult(
            signal='skills',
            score=50 if student_skills else 30,
            details={
                'directMatchCount': 0,
                'totalRequired': 0,
                'matchedSkills': [],
                'missingSkills': [],
                'athleticTransferSkills': [],
            }
        )

    matched = []
    missing = []
    proficiency_scores = []
    for skill in required:
        record = student_skills.get(skill)
        if record:
            matched.append(skill)
            # 3 = meets expectations
            proficiency_scores.append(min(100.0, record.proficiency_level / 3 * 70))
        else:
            missing.append(skill)

    direct_score = round(len(matched) / len(required) * 100)
    proficiency_score = round(sum(proficiency_scores) / len(proficiency_scores)) if proficiency_scores else 0

    # Strongest transfer per professional skill
    strongest: Dict[str, AthleticTransfer] = {}
    for transfer in student.athletic_transfers:
        key = _normalize(transfer.professional_skill)
        existing = strongest.get(key)
        if existing is None or transfer.transfer_strength > existing.transfer_strength:
            strongest[key] = transfer

    transfers = [strongest[skill] for skill in missing if skill in strongest]
    transfer_score = 0
    if transfers:
        contribution = sum(t.transfer_strength for t in transfers)
        transfer_score = round(min(1.0, contribution / len(missing)) * 60)

    student_categories = {_normalize(s.category) for s in student.skills}
    listing_categories = {_normalize(t.skill_category) for t in student.athletic_transfers}
    if listing.category:
        listing_categories.add(_normalize(listing.category))
    overlap = len(student_categories & listing_categories)
    category_score = min(100, overlap * 25 + 25)

    score = round(
        direct_score * 0.55 +
        proficiency_score * 0.20 +
        transfer_score * 0.15 +
        category_score * 0.10
    )

    return SignalResult(
        signal='skills',
        score=min(100, max(0, score)),
        details={
            'directMatchCount': len(matched),
            'totalRequired': len(required),
            'directMatchScore': direct_score,
            'proficiencyScore': proficiency_score,
            'transferScore': transfer_score,
            'categoryScore': category_score,
            'matchedSkills': matched,
            'missingSkills': missing,
            'athleticTransferSkills': [t.to_dict() for t in transfers],
        }
    )
