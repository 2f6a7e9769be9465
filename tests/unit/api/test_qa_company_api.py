"""
Unit Tests for Q&A and Company Information API Endpoints
"""
import pytest
from httpx import AsyncClient

from dataroom.core.security import create_user_token, SCOPE_INVESTOR
from dataroom.models import User, UserRole, NDAAcceptance, QAThread


async def _other_investor_headers(db_session) -> dict:
    other = User(email='other@fund.example', full_name='Other Investor', role=UserRole.USER)
    db_session.add(other)
    await db_session.flush()
    db_session.add(NDAAcceptance(
        user_id=other.id, nda_version='1.0', digital_signature='Other Investor',
        ip_address='127.0.0.1', user_agent='pytest',
    ))
    await db_session.commit()
    token = create_user_token(other.id, other.email, SCOPE_INVESTOR)
    return {'Authorization': f'Bearer {token}'}


class TestQuestions:
    """Test asking questions"""

    @pytest.mark.asyncio
    async def test_submit(self, client: AsyncClient, nda_investor_headers: dict):
        response = await client.post('/api/qa/questions', headers=nda_investor_headers, json={
            'question_text': 'What is the current monthly burn rate?',
            'category': 'Financials',
            'is_urgent': True,
        })

        assert response.status_code == 201

        threads = (await client.get('/api/qa/threads', headers=nda_investor_headers)).json()
        assert len(threads) == 1
        assert threads[0]['status'] == 'pending'
        assert threads[0]['is_urgent'] is True
        assert threads[0]['is_public'] is False

    @pytest.mark.asyncio
    async def test_question_too_short(self, client: AsyncClient, nda_investor_headers: dict):
        response = await client.post('/api/qa/questions', headers=nda_investor_headers, json={
            'question_text': 'Burn?',
        })

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_private_threads_hidden_from_others(
        self, client: AsyncClient, db_session, nda_investor_headers: dict
    ):
        await client.post('/api/qa/questions', headers=nda_investor_headers, json={
            'question_text': 'Who are the largest customers by revenue?',
        })
        other_headers = await _other_investor_headers(db_session)

        response = await client.get('/api/qa/threads', headers=other_headers)

        assert response.json() == []


class TestAnswers:
    """Test admin answers"""

    @pytest.mark.asyncio
    async def test_answer_makes_public_thread_visible(
        self, client: AsyncClient, db_session, nda_investor_headers: dict, admin_headers: dict
    ):
        thread_id = (await client.post('/api/qa/questions', headers=nda_investor_headers, json={
            'question_text': 'What is the expected runway after this round?',
        })).json()['id']

        response = await client.post(f'/api/qa/threads/{thread_id}/answer', headers=admin_headers, json={
            'answer_text': 'Roughly 24 months at the planned hiring pace.',
        })

        assert response.status_code == 200
        data = response.json()
        assert data['status'] == 'answered'
        assert data['answered_at'] is not None

        other_headers = await _other_investor_headers(db_session)
        visible = (await client.get('/api/qa/threads', headers=other_headers)).json()
        assert [t['id'] for t in visible] == [thread_id]

    @pytest.mark.asyncio
    async def test_answer_too_short(self, client: AsyncClient, nda_investor_headers: dict, admin_headers: dict):
        thread_id = (await client.post('/api/qa/questions', headers=nda_investor_headers, json={
            'question_text': 'What is the expected runway after this round?',
        })).json()['id']

        response = await client.post(
            f'/api/qa/threads/{thread_id}/answer', headers=admin_headers, json={'answer_text': 'Yes'}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_answer_unknown_thread(self, client: AsyncClient, admin_headers: dict):
        response = await client.post('/api/qa/threads/missing/answer', headers=admin_headers, json={
            'answer_text': 'Nothing to answer here.',
        })

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_search(self, client: AsyncClient, db_session, nda_investor: User, nda_investor_headers: dict):
        db_session.add(QAThread(question_text='How is churn measured?', asked_by=nda_investor.id))
        db_session.add(QAThread(question_text='Who audits the accounts?', asked_by=nda_investor.id))
        await db_session.commit()

        response = await client.get('/api/qa/search', params={'q': 'churn'}, headers=nda_investor_headers)

        assert [t['question_text'] for t in response.json()] == ['How is churn measured?']

    @pytest.mark.asyncio
    async def test_search_query_too_short(self, client: AsyncClient, nda_investor_headers: dict):
        response = await client.get('/api/qa/search', params={'q': 'ab'}, headers=nda_investor_headers)

        assert response.status_code == 422


class TestCompanyInformation:
    @pytest.mark.asyncio
    async def test_executive_summary(self, client: AsyncClient, nda_investor_headers: dict):
        response = await client.get('/api/company/executive-summary', headers=nda_investor_headers)

        assert response.status_code == 200
        assert response.json()['title'] == 'Executive Summary'

    @pytest.mark.asyncio
    @pytest.mark.parametrize('path', ['metrics', 'milestones', 'testimonials', 'awards', 'media-coverage'])
    async def test_lists(self, client: AsyncClient, nda_investor_headers: dict, path: str):
        response = await client.get(f'/api/company/{path}', headers=nda_investor_headers)

        assert response.status_code == 200
        assert isinstance(response.json(), list)
        assert response.json()

    @pytest.mark.asyncio
    async def test_featured_testimonials(self, client: AsyncClient, nda_investor_headers: dict):
        response = await client.get(
            '/api/company/testimonials', params={'featured_only': 'true'}, headers=nda_investor_headers
        )

        assert all(t['featured'] for t in response.json())
