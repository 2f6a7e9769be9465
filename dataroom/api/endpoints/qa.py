from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from datetime import datetime
from typing import List

from dataroom.core.database import get_db
from dataroom.core.exceptions import QAThreadNotFoundError
from dataroom.core.logging_config import logger
from dataroom.models import User, QAThread, QAStatus
from dataroom.modules.admin.audit import log_admin_action
from dataroom.modules.auth.dependencies import get_current_admin, require_nda_accepted
from dataroom.schemas.qa import QuestionCreate, AnswerCreate, QAThreadResponse, QuestionSubmitted

router = APIRouter()


def _visible_to(account: User):
    """Admins see every thread; investors see their own and public ones"""
    query = select(QAThread)
    if not account.is_admin:
        query = query.where(or_(QAThread.asked_by == account.id, QAThread.is_public.is_(True)))
    return query


@router.post("/questions", response_model=QuestionSubmitted, status_code=status.HTTP_201_CREATED)
async def submit_question(
    data: QuestionCreate,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    thread = QAThread(
        question_text=data.question_text.strip(),
        category=(data.category or "").strip() or "General",
        is_urgent=data.is_urgent,
        asked_by=account.id,
        asked_by_email=account.email,
    )
    db.add(thread)
    await db.commit()
    await db.refresh(thread)

    logger.info(
        f"Question submitted by {account.email}" + (" (urgent)" if thread.is_urgent else ""),
        extra={"event_type": "qa_question", "thread_id": thread.id}
    )
    return QuestionSubmitted(id=thread.id)


@router.get("/threads", response_model=List[QAThreadResponse])
async def list_threads(
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    """Newest first"""
    result = await db.execute(_visible_to(account).order_by(QAThread.asked_at.desc()))
    return result.scalars().all()


@router.get("/search", response_model=List[QAThreadResponse])
async def search_threads(
    q: str = Query(..., min_length=3),
    db: AsyncSession = Depends(get_db),
    account: User = Depends(require_nda_accepted)
):
    term = f"%{q.strip()}%"
    query = _visible_to(account).where(
        or_(
            QAThread.question_text.ilike(term),
            QAThread.answer_text.ilike(term),
            QAThread.category.ilike(term),
        )
    )
    result = await db.execute(query.order_by(QAThread.asked_at.desc()))
    return result.scalars().all()


async def _answer(
    request: Request,
    thread_id: str,
    data: AnswerCreate,
    db: AsyncSession,
    current_admin: User,
) -> QAThread:
    thread = await db.get(QAThread, thread_id)
    if thread is None:
        raise QAThreadNotFoundError(thread_id)

    was_answered = thread.status == QAStatus.ANSWERED
    thread.answer_text = data.answer_text.strip()
    thread.is_public = data.is_public
    thread.answered_by = current_admin.id
    thread.answered_at = datetime.utcnow()
    thread.status = QAStatus.ANSWERED
    await db.commit()
    await db.refresh(thread)

    await log_admin_action(
        db, current_admin.id, "question_answer_edited" if was_answered else "question_answered",
        "qa_thread", thread.id, request=request
    )
    return thread


@router.post("/threads/{thread_id}/answer", response_model=QAThreadResponse)
async def answer_question(
    request: Request,
    thread_id: str,
    data: AnswerCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Answer a question (admin). Answering again overwrites the answer."""
    return await _answer(request, thread_id, data, db, current_admin)


@router.put("/threads/{thread_id}/answer", response_model=QAThreadResponse)
async def edit_answer(
    request: Request,
    thread_id: str,
    data: AnswerCreate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await _answer(request, thread_id, data, db, current_admin)
