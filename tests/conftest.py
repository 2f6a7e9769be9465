"""
Investor Data Room - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['DEMO_MODE'] = 'true'
os.environ['SEED_DEMO_DATA'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_LEVEL'] = 'WARNING'

from dataroom.main import app
from dataroom.core.database import create_engine_for_url, init_db, get_db
from dataroom.core.security import get_password_hash, create_user_token, SCOPE_INVESTOR, SCOPE_ADMIN
from dataroom.client.admin_api_client import AdminAPIClient
from dataroom.client.api_client import APIClient
from dataroom.db.seed_data import seed_database
from dataroom.models import User, UserRole, NDAAcceptance, Document, PermissionLevel
from dataroom.modules.auth import otp_service

fake = Faker()

TEST_OTP_CODE = '123456'
ADMIN_PASSWORD = 'adminpassword123'
BASE_URL = 'http://test'


@pytest.fixture
async def db_engine():
    """Fresh in-memory database for each test"""
    engine = create_engine_for_url('sqlite+aiosqlite://')
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def fixed_otp_code(monkeypatch):
    """Every issued one-time code is 123456"""
    monkeypatch.setattr(otp_service, 'generate_otp_code', lambda: TEST_OTP_CODE)
    return TEST_OTP_CODE


@pytest.fixture
def test_app(session_factory):
    """The FastAPI app bound to the per-test database"""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                if session.new or session.dirty or session.deleted:
                    await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Raw HTTP client against the app"""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        yield ac


@pytest.fixture
async def api_client(test_app) -> AsyncGenerator[APIClient, None]:
    """Investor SDK client talking to the app in-process"""
    sdk = APIClient(base_url=BASE_URL, transport=ASGITransport(app=test_app))
    yield sdk
    await sdk.aclose()


@pytest.fixture
async def admin_api_client(test_app) -> AsyncGenerator[AdminAPIClient, None]:
    """Admin SDK client talking to the app in-process"""
    sdk = AdminAPIClient(base_url=BASE_URL, transport=ASGITransport(app=test_app))
    yield sdk
    await sdk.aclose()


@pytest.fixture
async def seeded(db_session: AsyncSession) -> AsyncSession:
    """Default categories and permission levels"""
    await seed_database(db_session)
    return db_session


async def _create_user(db_session: AsyncSession, role: UserRole, password: str = None, **fields) -> User:
    user = User(
        email=fields.pop('email', None) or fake.unique.email().lower(),
        full_name=fields.pop('full_name', None) or fake.name(),
        hashed_password=get_password_hash(password) if password else None,
        role=role,
        is_active=fields.pop('is_active', True),
        **fields
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def super_admin(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.SUPER_ADMIN, ADMIN_PASSWORD)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.ADMIN, ADMIN_PASSWORD)


@pytest.fixture
async def investor(db_session: AsyncSession) -> User:
    """Investor who has not signed the NDA yet"""
    return await _create_user(db_session, UserRole.USER, company=fake.company())


@pytest.fixture
async def nda_investor(db_session: AsyncSession) -> User:
    """Investor with the current NDA accepted"""
    user = await _create_user(db_session, UserRole.USER, company=fake.company())
    db_session.add(NDAAcceptance(
        user_id=user.id,
        nda_version='1.0',
        digital_signature=user.full_name,
        ip_address='127.0.0.1',
        user_agent='pytest',
    ))
    await db_session.commit()
    return user


@pytest.fixture
def investor_headers(investor: User) -> dict:
    token = create_user_token(investor.id, investor.email, SCOPE_INVESTOR)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def nda_investor_headers(nda_investor: User) -> dict:
    token = create_user_token(nda_investor.id, nda_investor.email, SCOPE_INVESTOR)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    token = create_user_token(admin_user.id, admin_user.email, SCOPE_ADMIN)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def super_admin_headers(super_admin: User) -> dict:
    token = create_user_token(super_admin.id, super_admin.email, SCOPE_ADMIN)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def sample_document(db_session: AsyncSession, admin_user: User) -> Document:
    document = Document(
        title='Q3 Financial Statements',
        description='Audited statements for the third quarter',
        categories=['Financials', 'Legal'],
        tags=['audit', 'q3'],
        file_name='q3-financials.pdf',
        file_type='application/pdf',
        file_size=15,
        content=b'%PDF-1.4 sample',
        uploaded_by=admin_user.id,
    )
    db_session.add(document)
    await db_session.commit()
    await db_session.refresh(document)
    return document


@pytest.fixture
async def view_only_level(db_session: AsyncSession) -> PermissionLevel:
    level = PermissionLevel(
        name='View Only',
        description='Browser viewing only',
        can_view=True,
        can_download=False,
    )
    db_session.add(level)
    await db_session.commit()
    await db_session.refresh(level)
    return level
