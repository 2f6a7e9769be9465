"""
Unit Tests for the dataroom CLI commands
Tests for: admin console commands, investor status, access lookup, company page
"""
import io

import pytest
from unittest.mock import AsyncMock
from rich.console import Console

from dataroom.cli import main as cli
from dataroom.cli.main import CLIContext, cmd_admin, create_parser, run_command
from dataroom.client.admin_api_client import AdminAPIClient
from dataroom.client.api_client import APIClient
from dataroom.client.errors import APIClientError

SUPER_ADMIN = {'id': 'a1', 'email': 'root@co.com', 'full_name': 'Root', 'role': 'super_admin'}
PLAIN_ADMIN = {'id': 'a2', 'email': 'ops@co.com', 'full_name': 'Ops', 'role': 'admin'}
LEVEL = {
    'id': 'l1', 'name': 'Due Diligence', 'description': 'Full access',
    'can_view': True, 'can_download': True, 'has_expiry': False, 'max_downloads': 5,
}


@pytest.fixture
def admin_client():
    client = AsyncMock(spec=AdminAPIClient)
    client.is_authenticated = True
    client.get_current_admin.return_value = SUPER_ADMIN
    client.list_permission_levels.return_value = [LEVEL]
    client.list_users.return_value = []
    return client


@pytest.fixture
def investor_client():
    client = AsyncMock(spec=APIClient)
    client.is_authenticated = True
    client.get_current_user.return_value = {'id': 'u1', 'email': 'jane@fund.com', 'full_name': 'Jane'}
    client.check_nda_status.return_value = {'accepted': True, 'version': '1.0'}
    return client


@pytest.fixture
def ctx(admin_client, investor_client):
    console = Console(file=io.StringIO(), width=200)
    return CLIContext(console=console, client=investor_client, admin_client=admin_client)


@pytest.fixture
def answers(monkeypatch):
    """Queue replies for the interactive prompts"""
    replies = []
    monkeypatch.setattr(cli.Prompt, 'ask', lambda *args, **kwargs: replies.pop(0))
    return replies


def output(ctx) -> str:
    return ctx.console.file.getvalue()


async def admin(ctx, *argv) -> int:
    return await cmd_admin(create_parser().parse_args(['admin', *argv]), ctx)


class TestAdminAccountCommands:
    @pytest.mark.asyncio
    async def test_register_needs_no_session(self, ctx, admin_client, answers):
        admin_client.is_authenticated = False
        admin_client.register.return_value = {'email': 'new@co.com', 'role': 'super_admin'}
        answers.extend(['securepass123', 'securepass123'])

        assert await admin(ctx, 'register', 'new@co.com', '--name', 'New Admin') == 0

        admin_client.register.assert_awaited_once_with('new@co.com', 'securepass123', 'New Admin', role='admin')
        admin_client.get_current_admin.assert_not_called()
        assert 'super_admin' in output(ctx)

    @pytest.mark.asyncio
    async def test_register_password_mismatch(self, ctx, admin_client, answers):
        answers.extend(['securepass123', 'different123'])

        assert await admin(ctx, 'register', 'new@co.com', '--name', 'New Admin') == 1
        admin_client.register.assert_not_called()
        assert 'Passwords do not match' in output(ctx)

    @pytest.mark.asyncio
    async def test_profile_edit(self, ctx, admin_client):
        admin_client.update_current_admin.return_value = {**SUPER_ADMIN, 'full_name': 'New Name'}

        assert await admin(ctx, 'profile', '--name', 'New Name') == 0

        admin_client.update_current_admin.assert_awaited_once_with('New Name')
        assert 'New Name' in output(ctx)

    @pytest.mark.asyncio
    async def test_password_change(self, ctx, admin_client, answers):
        answers.extend(['oldpassword1', 'newpassword1', 'newpassword1'])

        assert await admin(ctx, 'password') == 0
        admin_client.change_password.assert_awaited_once_with('oldpassword1', 'newpassword1')

    @pytest.mark.asyncio
    async def test_signed_out_admin_is_turned_away(self, ctx, admin_client):
        admin_client.is_authenticated = False

        assert await admin(ctx, 'levels') == 1
        admin_client.list_permission_levels.assert_not_called()
        assert 'Admin sign-in required' in output(ctx)


class TestUserCommands:
    @pytest.mark.asyncio
    async def test_create(self, ctx, admin_client, answers):
        answers.append('initialpass1')

        assert await admin(ctx, 'user-create', 'jane@fund.com', '--name', 'Jane', '--level', 'l1') == 0

        admin_client.create_user.assert_awaited_once_with(
            email='jane@fund.com', password='initialpass1', full_name='Jane',
            role='user', permission_level_id='l1',
        )

    @pytest.mark.asyncio
    async def test_plain_admin_cannot_create(self, ctx, admin_client, answers):
        admin_client.get_current_admin.return_value = PLAIN_ADMIN

        assert await admin(ctx, 'user-create', 'jane@fund.com', '--name', 'Jane') == 1
        admin_client.create_user.assert_not_called()
        assert answers == []

    @pytest.mark.asyncio
    async def test_update_sends_only_given_fields(self, ctx, admin_client):
        assert await admin(ctx, 'user-update', 'u1', '--role', 'admin') == 0
        admin_client.update_user.assert_awaited_once_with('u1', {'role': 'admin'})

    @pytest.mark.asyncio
    async def test_update_clears_level(self, ctx, admin_client):
        assert await admin(ctx, 'user-update', 'u1', '--clear-level') == 0
        admin_client.update_user.assert_awaited_once_with('u1', {'permission_level_id': None})

    @pytest.mark.asyncio
    async def test_update_without_changes(self, ctx, admin_client):
        assert await admin(ctx, 'user-update', 'u1') == 1
        admin_client.update_user.assert_not_called()

    def test_level_and_clear_level_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['admin', 'user-update', 'u1', '--level', 'l1', '--clear-level'])

    @pytest.mark.asyncio
    async def test_deactivate_and_activate(self, ctx, admin_client):
        assert await admin(ctx, 'user-deactivate', 'u1') == 0
        assert await admin(ctx, 'user-activate', 'u1') == 0

        admin_client.deactivate_user.assert_awaited_once_with('u1')
        admin_client.activate_user.assert_awaited_once_with('u1')

    @pytest.mark.asyncio
    async def test_list_filters_locally(self, ctx, admin_client):
        admin_client.list_users.return_value = [
            {'id': 'u1', 'email': 'jane@fund.com', 'role': 'user', 'is_active': True},
            {'id': 'u2', 'email': 'old@fund.com', 'role': 'user', 'is_active': False},
        ]

        assert await admin(ctx, 'users', '--inactive') == 0

        assert 'old@fund.com' in output(ctx)
        assert 'jane@fund.com' not in output(ctx)

    @pytest.mark.asyncio
    async def test_user_permissions(self, ctx, admin_client):
        admin_client.get_user_permissions.return_value = {
            'email': 'jane@fund.com', 'permission_level': LEVEL,
            'can_view': True, 'can_download': True, 'max_downloads': 5, 'downloads_used': 2,
        }

        assert await admin(ctx, 'user-permissions', 'u1') == 0
        assert '2/5 downloads used' in output(ctx)


class TestPermissionLevelCommands:
    @pytest.mark.asyncio
    async def test_list(self, ctx):
        assert await admin(ctx, 'levels') == 0
        assert 'Due Diligence' in output(ctx)

    @pytest.mark.asyncio
    async def test_create_passes_flags(self, ctx, admin_client):
        code = await admin(
            ctx, 'level-create', 'Due Diligence', '-d', 'Full access', '--download', '--max-downloads', '5'
        )

        assert code == 0
        admin_client.create_permission_level.assert_awaited_once_with({
            'name': 'Due Diligence', 'description': 'Full access',
            'can_view': True, 'can_download': True, 'has_expiry': False, 'max_downloads': 5,
        })

    @pytest.mark.asyncio
    async def test_update(self, ctx, admin_client):
        assert await admin(ctx, 'level-update', 'l1', 'Teaser', '-d', 'Deck only', '--expiry') == 0

        admin_client.update_permission_level.assert_awaited_once_with('l1', {
            'name': 'Teaser', 'description': 'Deck only',
            'can_view': True, 'can_download': False, 'has_expiry': True, 'max_downloads': None,
        })

    @pytest.mark.asyncio
    async def test_delete_asks_first(self, ctx, admin_client, monkeypatch):
        prompts = []
        monkeypatch.setattr(cli.Confirm, 'ask', lambda prompt, **kwargs: prompts.append(prompt) or False)

        assert await admin(ctx, 'level-delete', 'l1') == 1

        assert "Delete permission level 'Due Diligence'?" in prompts[0]
        admin_client.delete_permission_level.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_confirmed(self, ctx, admin_client):
        assert await admin(ctx, 'level-delete', 'l1', '--yes') == 0
        admin_client.delete_permission_level.assert_awaited_once_with('l1')


class TestDocumentAndLogCommands:
    @pytest.mark.asyncio
    async def test_detail(self, ctx, admin_client):
        admin_client.get_document.return_value = {
            'id': 'd1', 'title': 'Q3 Financial Statements', 'file_name': 'q3.pdf',
            'categories': ['Financials'], 'uploaded_by': 'a1', 'uploaded_at': '2024-01-02T00:00:00',
        }
        admin_client.get_document_url.return_value = {
            'url': '/api/documents/d1/view', 'download_url': '/api/documents/d1/download',
        }
        admin_client.get_user.return_value = SUPER_ADMIN

        assert await admin(ctx, 'doc', 'd1') == 0

        text = output(ctx)
        assert 'Q3 Financial Statements' in text
        assert 'by Root' in text
        assert '/api/documents/d1/download' in text

    @pytest.mark.asyncio
    async def test_detail_not_found(self, ctx, admin_client):
        admin_client.get_document.side_effect = APIClientError('Document not found', 404)

        assert await admin(ctx, 'doc', 'missing') == 1
        assert 'Document not found' in output(ctx)

    @pytest.mark.asyncio
    async def test_category_stats(self, ctx, admin_client):
        admin_client.get_document_category_stats.return_value = {'Legal': 1, 'Financials': 3}

        assert await admin(ctx, 'doc-stats') == 0

        text = output(ctx)
        assert text.index('Financials') < text.index('Legal')

    @pytest.mark.asyncio
    async def test_activity(self, ctx, admin_client):
        admin_client.get_document_access_logs.return_value = [
            {'accessed_at': '2024-01-02T00:00:00', 'user_email': 'jane@fund.com', 'action': 'download'},
        ]

        assert await admin(ctx, 'activity', 'd1', '--limit', '10') == 0

        admin_client.get_document_access_logs.assert_awaited_once_with('d1', limit=10)
        assert 'jane@fund.com' in output(ctx)

    @pytest.mark.asyncio
    async def test_audit(self, ctx, admin_client):
        admin_client.list_audit_logs.return_value = [
            {'created_at': '2024-01-02T00:00:00', 'admin_email': 'root@co.com',
             'action': 'user_created', 'target_type': 'user', 'target_id': 'u1'},
        ]

        assert await admin(ctx, 'audit', '--action', 'user_created') == 0

        admin_client.list_audit_logs.assert_awaited_once_with(action='user_created', target_type=None, limit=50)
        assert 'user_created' in output(ctx)


class TestInvestorCommands:
    @pytest.mark.asyncio
    async def test_status_shows_access(self, ctx, investor_client):
        investor_client.get_user_permissions.return_value = {
            'permission_level': {'name': 'View Only'}, 'can_view': True, 'can_download': False,
        }

        assert await run_command(create_parser().parse_args(['status']), ctx) == 0

        investor_client.get_user_permissions.assert_awaited_once_with('u1')
        assert 'View Only, view only' in output(ctx)

    @pytest.mark.asyncio
    async def test_check_access_by_id(self, ctx, investor_client):
        investor_client.get_access_request.return_value = {'id': 'r1', 'status': 'approved'}

        assert await run_command(create_parser().parse_args(['check-access', 'r1']), ctx) == 0

        investor_client.get_access_request.assert_awaited_once_with('r1')
        investor_client.check_access_request_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_check_access_by_email(self, ctx, investor_client):
        investor_client.check_access_request_status.return_value = {'exists': True, 'status': 'pending'}

        assert await run_command(create_parser().parse_args(['check-access', 'jane@fund.com']), ctx) == 0
        investor_client.check_access_request_status.assert_awaited_once_with('jane@fund.com')

    @pytest.mark.asyncio
    async def test_category_names(self, ctx, investor_client):
        investor_client.get_categories_list.return_value = ['Financials', 'Legal']

        assert await run_command(create_parser().parse_args(['docs', '--list-categories']), ctx) == 0

        assert 'Legal' in output(ctx)
        investor_client.list_documents.assert_not_called()

    @pytest.mark.asyncio
    async def test_company_shows_every_section(self, ctx, investor_client):
        investor_client.get_executive_summary.return_value = {'title': 'Acme', 'description': 'We build rockets'}
        investor_client.get_key_metrics.return_value = [{'label': 'ARR', 'value': '1.2M', 'change': '+40%'}]
        investor_client.get_milestones.return_value = [{'date': '2023-06', 'title': 'Seed round'}]
        investor_client.get_testimonials.return_value = [
            {'author': 'A. Customer', 'role': 'CTO', 'company': 'Globex', 'content': 'Indispensable'},
        ]
        investor_client.get_awards.return_value = [{'title': 'Best Seed Startup', 'organization': 'TechDaily', 'year': 2024}]
        investor_client.get_media_coverage.return_value = [
            {'title': 'Acme raises seed', 'publication': 'Finance Weekly', 'date': '2023-07-01'},
        ]

        assert await run_command(create_parser().parse_args(['company']), ctx) == 0

        text = output(ctx)
        for expected in ('We build rockets', 'ARR', 'Seed round', 'Indispensable', 'Best Seed Startup', 'Finance Weekly'):
            assert expected in text
