"""
Unit Tests for Document API Endpoints
"""
import pytest
from datetime import datetime, timedelta
from httpx import AsyncClient
from sqlalchemy import select

from dataroom.models import (
    User, Document, DocumentAccessLog, PermissionLevel, AccessRequest, AccessRequestStatus,
)


class TestCategories:
    @pytest.mark.asyncio
    async def test_top_level_categories(self, client: AsyncClient, seeded, nda_investor_headers: dict):
        response = await client.get('/api/documents/categories', headers=nda_investor_headers)

        assert response.status_code == 200
        names = [c['name'] for c in response.json()]
        assert 'Financials' in names
        assert 'Pitch Deck' in names

    @pytest.mark.asyncio
    async def test_subcategories(self, client: AsyncClient, seeded, nda_investor_headers: dict):
        top = (await client.get('/api/documents/categories', headers=nda_investor_headers)).json()
        parent_ids = {c['id'] for c in top}

        children = []
        for parent_id in parent_ids:
            response = await client.get(
                '/api/documents/categories', params={'parent_id': parent_id}, headers=nda_investor_headers
            )
            children.extend(response.json())

        assert children
        assert all(c['parent_category_id'] in parent_ids for c in children)

    @pytest.mark.asyncio
    async def test_category_names_include_document_categories(
        self, client: AsyncClient, db_session, admin_user: User, nda_investor_headers: dict
    ):
        db_session.add(Document(
            title='Board Deck', categories=['Board'], tags=[],
            file_name='board.pdf', file_type='application/pdf', file_size=1, content=b'x',
        ))
        await db_session.commit()

        response = await client.get('/api/documents/categories/list', headers=nda_investor_headers)

        assert 'Board' in response.json()


class TestListDocuments:
    """Test filtering of the document list"""

    @pytest.mark.asyncio
    async def test_list(self, client: AsyncClient, sample_document: Document, nda_investor_headers: dict):
        response = await client.get('/api/documents/', headers=nda_investor_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]['title'] == 'Q3 Financial Statements'
        assert data[0]['primary_category'] == 'Financials'
        assert data[0]['file_path'] == f'/api/documents/{sample_document.id}/download'

    @pytest.mark.asyncio
    @pytest.mark.parametrize('params,expected', [
        ({'categories': 'legal'}, 1),
        ({'categories': 'Market,Legal'}, 1),
        ({'categories': 'Market'}, 0),
        ({'tags': 'q3'}, 1),
        ({'tags': 'q4'}, 0),
        ({'search': 'audited'}, 1),
        ({'search': 'roadmap'}, 0),
    ])
    async def test_filters(
        self, client: AsyncClient, sample_document: Document, nda_investor_headers: dict, params, expected
    ):
        response = await client.get('/api/documents/', params=params, headers=nda_investor_headers)

        assert len(response.json()) == expected

    @pytest.mark.asyncio
    async def test_not_found(self, client: AsyncClient, nda_investor_headers: dict):
        response = await client.get('/api/documents/missing', headers=nda_investor_headers)

        assert response.status_code == 404
        assert response.json()['code'] == 'DOCUMENT_NOT_FOUND'


class TestUpload:
    """Test admin uploads"""

    @pytest.mark.asyncio
    async def test_upload(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            '/api/documents/',
            headers=admin_headers,
            data={'categories': 'Financials, Legal', 'tags': 'fy24', 'description': 'Annual'},
            files={'file': ('annual-report.pdf', b'%PDF annual', 'application/pdf')},
        )

        assert response.status_code == 201
        data = response.json()
        assert data['title'] == 'annual-report'
        assert data['categories'] == ['Financials', 'Legal']
        assert data['tags'] == ['fy24']
        assert data['file_size'] == len(b'%PDF annual')

    @pytest.mark.asyncio
    async def test_upload_requires_category(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            '/api/documents/',
            headers=admin_headers,
            data={'categories': ' , '},
            files={'file': ('deck.pdf', b'x', 'application/pdf')},
        )

        assert response.status_code == 400
        assert response.json()['detail'] == 'At least one category is required'

    @pytest.mark.asyncio
    async def test_upload_rejects_extension(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            '/api/documents/',
            headers=admin_headers,
            data={'categories': 'Legal'},
            files={'file': ('payload.exe', b'MZ', 'application/octet-stream')},
        )

        assert response.status_code == 400
        assert "not allowed" in response.json()['detail']

    @pytest.mark.asyncio
    async def test_investors_cannot_upload(self, client: AsyncClient, nda_investor_headers: dict):
        response = await client.post(
            '/api/documents/',
            headers=nda_investor_headers,
            data={'categories': 'Legal'},
            files={'file': ('deck.pdf', b'x', 'application/pdf')},
        )

        assert response.status_code == 401


class TestViewAndDownload:
    """Test file streaming, counters and access logs"""

    @pytest.mark.asyncio
    async def test_view_counts_and_logs(
        self, client: AsyncClient, sample_document: Document, nda_investor: User,
        nda_investor_headers: dict, session_factory
    ):
        response = await client.get(f'/api/documents/{sample_document.id}/view', headers=nda_investor_headers)

        assert response.status_code == 200
        assert response.content == b'%PDF-1.4 sample'
        assert response.headers['content-disposition'].startswith('inline')

        async with session_factory() as session:
            document = await session.get(Document, sample_document.id)
            logs = (await session.execute(select(DocumentAccessLog))).scalars().all()
        assert document.view_count == 1
        assert len(logs) == 1
        assert logs[0].action == 'view'
        assert logs[0].user_id == nda_investor.id

    @pytest.mark.asyncio
    async def test_download(self, client: AsyncClient, sample_document: Document, nda_investor_headers: dict):
        response = await client.get(f'/api/documents/{sample_document.id}/download', headers=nda_investor_headers)

        assert response.status_code == 200
        assert 'attachment' in response.headers['content-disposition']
        assert 'q3-financials.pdf' in response.headers['content-disposition']

    @pytest.mark.asyncio
    async def test_view_only_level_cannot_download(
        self, client: AsyncClient, db_session, sample_document: Document, nda_investor: User,
        view_only_level: PermissionLevel, nda_investor_headers: dict
    ):
        nda_investor.permission_level_id = view_only_level.id
        await db_session.commit()

        view = await client.get(f'/api/documents/{sample_document.id}/view', headers=nda_investor_headers)
        download = await client.get(f'/api/documents/{sample_document.id}/download', headers=nda_investor_headers)

        assert view.status_code == 200
        assert download.status_code == 403
        assert download.json()['detail'] == 'Your permission level does not allow downloading documents'

    @pytest.mark.asyncio
    async def test_download_limit(
        self, client: AsyncClient, db_session, sample_document: Document, nda_investor: User,
        nda_investor_headers: dict
    ):
        level = PermissionLevel(name='One Shot', description='Single download', can_download=True, max_downloads=1)
        db_session.add(level)
        await db_session.flush()
        nda_investor.permission_level_id = level.id
        await db_session.commit()

        first = await client.get(f'/api/documents/{sample_document.id}/download', headers=nda_investor_headers)
        second = await client.get(f'/api/documents/{sample_document.id}/download', headers=nda_investor_headers)

        assert first.status_code == 200
        assert second.status_code == 403
        assert 'Download limit' in second.json()['detail']

    @pytest.mark.asyncio
    async def test_access_logs_for_admin(
        self, client: AsyncClient, sample_document: Document, nda_investor_headers: dict, admin_headers: dict
    ):
        await client.get(f'/api/documents/{sample_document.id}/view', headers=nda_investor_headers)
        await client.get(f'/api/documents/{sample_document.id}/download', headers=nda_investor_headers)

        response = await client.get(
            f'/api/documents/{sample_document.id}/access-logs', params={'limit': 1}, headers=admin_headers
        )

        assert response.status_code == 200
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_url(self, client: AsyncClient, sample_document: Document, nda_investor_headers: dict):
        response = await client.get(f'/api/documents/{sample_document.id}/url', headers=nda_investor_headers)

        data = response.json()
        assert data['url'] == f'/api/documents/{sample_document.id}/view'
        assert data['file_name'] == 'q3-financials.pdf'


class TestDeleteAndStats:
    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient, sample_document: Document, admin_headers: dict):
        response = await client.delete(f'/api/documents/{sample_document.id}', headers=admin_headers)

        assert response.status_code == 200
        assert response.json()['message'] == 'Document deleted successfully'

        missing = await client.get(f'/api/documents/{sample_document.id}', headers=admin_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_stats_by_category(self, client: AsyncClient, sample_document: Document, admin_headers: dict):
        response = await client.get('/api/documents/stats/by-category', headers=admin_headers)

        assert response.json() == {'Financials': 1, 'Legal': 1}


async def _limit_investor(db_session, investor: User, max_downloads=None, has_expiry=False) -> PermissionLevel:
    level = PermissionLevel(
        name='Limited', description='Capped access', can_download=True,
        max_downloads=max_downloads, has_expiry=has_expiry,
    )
    db_session.add(level)
    await db_session.flush()
    investor.permission_level_id = level.id
    await db_session.commit()
    return level


class TestDownloadBudget:
    """Download limits and expiring access"""

    @pytest.mark.asyncio
    async def test_deleting_a_document_keeps_the_budget_spent(
        self, client: AsyncClient, db_session, sample_document: Document, nda_investor: User,
        nda_investor_headers: dict, admin_headers: dict, session_factory
    ):
        other = Document(
            title='Cap Table', categories=['Legal'], tags=[],
            file_name='cap-table.xlsx', file_type='application/vnd.ms-excel', file_size=3, content=b'cap',
        )
        db_session.add(other)
        await db_session.commit()
        await _limit_investor(db_session, nda_investor, max_downloads=1)

        first = await client.get(f'/api/documents/{sample_document.id}/download', headers=nda_investor_headers)
        blocked = await client.get(f'/api/documents/{other.id}/download', headers=nda_investor_headers)
        deleted = await client.delete(f'/api/documents/{sample_document.id}', headers=admin_headers)
        after = await client.get(f'/api/documents/{other.id}/download', headers=nda_investor_headers)

        assert first.status_code == 200
        assert blocked.status_code == 403
        assert deleted.status_code == 200
        assert after.status_code == 403

        async with session_factory() as session:
            logs = (await session.execute(select(DocumentAccessLog))).scalars().all()
        assert len(logs) == 1
        assert logs[0].document_id is None
        assert logs[0].document_title == 'Q3 Financial Statements'

    @pytest.mark.asyncio
    async def test_expired_access_blocks_view_and_download(
        self, client: AsyncClient, db_session, sample_document: Document, nda_investor: User,
        nda_investor_headers: dict
    ):
        await _limit_investor(db_session, nda_investor, has_expiry=True)
        db_session.add(AccessRequest(
            email=nda_investor.email, full_name=nda_investor.full_name, company='Acme Capital',
            status=AccessRequestStatus.APPROVED,
            expires_at=datetime.utcnow() - timedelta(hours=1),
        ))
        await db_session.commit()

        view = await client.get(f'/api/documents/{sample_document.id}/view', headers=nda_investor_headers)
        download = await client.get(f'/api/documents/{sample_document.id}/download', headers=nda_investor_headers)

        assert view.status_code == 403
        assert download.status_code == 403

    @pytest.mark.asyncio
    async def test_unexpired_access_still_works(
        self, client: AsyncClient, db_session, sample_document: Document, nda_investor: User,
        nda_investor_headers: dict
    ):
        await _limit_investor(db_session, nda_investor, has_expiry=True)
        db_session.add(AccessRequest(
            email=nda_investor.email, full_name=nda_investor.full_name, company='Acme Capital',
            status=AccessRequestStatus.APPROVED,
            expires_at=datetime.utcnow() + timedelta(days=30),
        ))
        await db_session.commit()

        download = await client.get(f'/api/documents/{sample_document.id}/download', headers=nda_investor_headers)

        assert download.status_code == 200
