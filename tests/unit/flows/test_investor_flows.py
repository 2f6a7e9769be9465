"""
Unit Tests for the access request, Q&A and document flows
"""
import pytest
from unittest.mock import AsyncMock

from dataroom.client.api_client import APIClient
from dataroom.client.errors import APIClientError
from dataroom.flows.access_request import AccessRequestFlow, AccessRequestForm, REQUIRED_FIELDS_MESSAGE
from dataroom.flows.investor_documents import InvestorDocumentsFlow, load_company_overview, safe_file_name
from dataroom.flows.investor_qa import InvestorQAFlow


@pytest.fixture
def client():
    return AsyncMock(spec=APIClient)


class TestAccessRequestFlow:
    """Test the public access request form"""

    @pytest.mark.asyncio
    async def test_incomplete_form_makes_no_call(self, client):
        flow = AccessRequestFlow(client)

        assert await flow.submit(AccessRequestForm(email='a@b.com', full_name='Jane')) is False
        assert flow.error == REQUIRED_FIELDS_MESSAGE
        client.submit_access_request.assert_not_called()

    @pytest.mark.asyncio
    async def test_role_and_type_folded_into_message(self, client):
        client.submit_access_request.return_value = {'id': 'r1', 'message': 'submitted'}
        form = AccessRequestForm(
            email=' a@b.com ', full_name='Jane', company='Acme Capital',
            role_title='Partner', investor_type='VC', message='Met at demo day',
        )

        assert await AccessRequestFlow(client).submit(form) is True

        client.submit_access_request.assert_awaited_once_with(
            email='a@b.com', full_name='Jane', company='Acme Capital', phone=None,
            message='Role: Partner\nInvestor type: VC\nMet at demo day',
        )

    def test_empty_message(self):
        assert AccessRequestForm().compose_message() is None

    @pytest.mark.asyncio
    async def test_check_status(self, client):
        client.check_access_request_status.return_value = {'exists': True, 'status': 'approved'}

        assert (await AccessRequestFlow(client).check_status(' a@b.com '))['status'] == 'approved'

    @pytest.mark.asyncio
    async def test_load_by_id(self, client):
        client.get_access_request.return_value = {'id': 'r1', 'status': 'pending'}
        flow = AccessRequestFlow(client)

        assert (await flow.load(' r1 '))['status'] == 'pending'
        assert flow.result == {'id': 'r1', 'status': 'pending'}
        client.get_access_request.assert_awaited_once_with('r1')

    @pytest.mark.asyncio
    async def test_load_unknown_id(self, client):
        client.get_access_request.side_effect = APIClientError('Access request not found', 404)
        flow = AccessRequestFlow(client)

        assert await flow.load('missing') is None
        assert flow.error == 'Access request not found'
        client.check_access_request_status.assert_awaited_once_with('a@b.com')


class TestInvestorQAFlow:
    @pytest.mark.asyncio
    async def test_short_question_rejected(self, client):
        flow = InvestorQAFlow(client)

        assert await flow.ask('Burn?') is False
        assert flow.error == 'Question must be at least 10 characters.'
        client.submit_question.assert_not_called()

    @pytest.mark.asyncio
    async def test_ask_reloads_threads(self, client):
        client.get_qa_threads.return_value = [{'id': 't1'}]
        flow = InvestorQAFlow(client)

        assert await flow.ask('What is the monthly burn?', is_urgent=True) is True

        client.submit_question.assert_awaited_once_with('What is the monthly burn?', category='General', is_urgent=True)
        assert flow.threads == [{'id': 't1'}]

    @pytest.mark.asyncio
    async def test_short_search_rejected(self, client):
        flow = InvestorQAFlow(client)

        assert await flow.search('ab') == []
        assert flow.error == 'Search query must be at least 3 characters.'
        client.search_qa.assert_not_called()


class TestInvestorDocumentsFlow:
    """Test browsing and downloading documents"""

    def test_safe_file_name(self):
        assert safe_file_name('../../etc/passwd', 'doc-1') == 'passwd'
        assert safe_file_name('', 'doc-1') == 'doc-1'

    @pytest.mark.asyncio
    async def test_download_writes_file(self, client, tmp_path):
        client.get_document.return_value = {'id': 'doc-1', 'file_name': 'deck.pdf'}
        client.download_document.return_value = b'%PDF deck'

        target = await InvestorDocumentsFlow(client).download('doc-1', tmp_path / 'out')

        assert target == tmp_path / 'out' / 'deck.pdf'
        assert target.read_bytes() == b'%PDF deck'

    @pytest.mark.asyncio
    async def test_download_forbidden(self, client, tmp_path):
        client.get_document.return_value = {'id': 'doc-1', 'file_name': 'deck.pdf'}
        client.download_document.side_effect = APIClientError(
            'Your permission level does not allow downloading documents', 403
        )
        flow = InvestorDocumentsFlow(client)

        assert await flow.download('doc-1', tmp_path) is None
        assert flow.error == 'Your permission level does not allow downloading documents'
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_search_failure_clears_documents(self, client):
        client.list_documents.side_effect = APIClientError('NDA acceptance required', 403)
        flow = InvestorDocumentsFlow(client)
        flow.documents = [{'id': 'stale'}]

        assert await flow.search(search='deck') == []
        assert flow.error == 'NDA acceptance required'

    @pytest.mark.asyncio
    async def test_open_category(self, client):
        client.get_documents_by_category.return_value = [{'id': 'doc-1'}]
        flow = InvestorDocumentsFlow(client)

        assert await flow.open_category('cat-1') == [{'id': 'doc-1'}]
        assert flow.selected_category == 'cat-1'

    @pytest.mark.asyncio
    async def test_company_overview(self, client):
        client.get_executive_summary.return_value = {'title': 'Executive Summary'}
        client.get_key_metrics.return_value = [{'label': 'ARR', 'value': '1.2M'}]
        client.get_milestones.return_value = []

        overview = await load_company_overview(client)

        assert overview['summary']['title'] == 'Executive Summary'
        assert overview['metrics'][0]['label'] == 'ARR'
        assert overview['milestones'] == []

    @pytest.mark.asyncio
    async def test_company_overview_has_every_section(self, client):
        client.get_executive_summary.return_value = {'title': 'Executive Summary'}
        client.get_key_metrics.return_value = []
        client.get_milestones.return_value = []
        client.get_testimonials.return_value = [{'author': 'A. Founder', 'content': 'Great team'}]
        client.get_awards.return_value = [{'title': 'Best Seed Startup', 'year': 2024}]
        client.get_media_coverage.return_value = [{'title': 'Raises seed', 'publication': 'TechDaily'}]

        overview = await load_company_overview(client)

        assert overview['testimonials'][0]['author'] == 'A. Founder'
        assert overview['awards'][0]['title'] == 'Best Seed Startup'
        assert overview['media'][0]['publication'] == 'TechDaily'
        client.get_testimonials.assert_awaited_once_with(featured_only=True)

    @pytest.mark.asyncio
    async def test_failed_section_comes_back_empty(self, client):
        client.get_executive_summary.return_value = {'title': 'Executive Summary'}
        client.get_key_metrics.return_value = [{'label': 'ARR', 'value': '1.2M'}]
        client.get_milestones.return_value = []
        client.get_testimonials.return_value = []
        client.get_awards.side_effect = APIClientError('Internal server error', 500)
        client.get_media_coverage.return_value = []

        overview = await load_company_overview(client)

        assert overview['awards'] == []
        assert overview['metrics'][0]['label'] == 'ARR'

    @pytest.mark.asyncio
    async def test_category_names(self, client):
        client.get_categories_list.return_value = ['Financials', 'Legal']

        assert await InvestorDocumentsFlow(client).load_category_names() == ['Financials', 'Legal']

    @pytest.mark.asyncio
    async def test_category_names_failure(self, client):
        client.get_categories_list.side_effect = APIClientError('NDA acceptance required', 403)
        flow = InvestorDocumentsFlow(client)

        assert await flow.load_category_names() == []
        assert flow.error == 'NDA acceptance required'

    @pytest.mark.asyncio
    async def test_permissions(self, client):
        client.get_user_permissions.return_value = {'can_view': True, 'can_download': False}

        permissions = await InvestorDocumentsFlow(client).load_permissions('u1')

        assert permissions['can_download'] is False
        client.get_user_permissions.assert_awaited_once_with('u1')
