from fastapi import APIRouter, Depends
from typing import List

from dataroom.db.seed_data import COMPANY_INFO
from dataroom.models import User
from dataroom.modules.auth.dependencies import require_nda_accepted
from dataroom.schemas.company import (
    ExecutiveSummary,
    KeyMetric,
    Milestone,
    Testimonial,
    Award,
    MediaCoverage,
)

router = APIRouter()


@router.get("/executive-summary", response_model=ExecutiveSummary)
async def executive_summary(account: User = Depends(require_nda_accepted)):
    return COMPANY_INFO["executive_summary"]


@router.get("/metrics", response_model=List[KeyMetric])
async def key_metrics(account: User = Depends(require_nda_accepted)):
    return COMPANY_INFO["metrics"]


@router.get("/milestones", response_model=List[Milestone])
async def milestones(account: User = Depends(require_nda_accepted)):
    return COMPANY_INFO["milestones"]


@router.get("/testimonials", response_model=List[Testimonial])
async def testimonials(
    featured_only: bool = False,
    account: User = Depends(require_nda_accepted)
):
    items = COMPANY_INFO["testimonials"]
    if featured_only:
        items = [t for t in items if t.get("featured")]
    return items


@router.get("/awards", response_model=List[Award])
async def awards(account: User = Depends(require_nda_accepted)):
    return COMPANY_INFO["awards"]


@router.get("/media-coverage", response_model=List[MediaCoverage])
async def media_coverage(account: User = Depends(require_nda_accepted)):
    return COMPANY_INFO["media_coverage"]
