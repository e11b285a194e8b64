"""
BSAP statistics API - Test Configuration and Fixtures
"""
import os
from types import SimpleNamespace
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_bsap.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_access_token
from app.models import Battalion, District, Range, Role, State, User

fake = Faker()

TEST_PASSWORD = 'password123'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_bsap.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh schema and a session for fixture data, per test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Test client; each request gets its own session like get_db"""
    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def hierarchy(db_session: AsyncSession) -> SimpleNamespace:
    """One state -> district -> range -> two battalions"""
    state = State(state_name='Bihar', active=True)
    db_session.add(state)
    await db_session.flush()

    district = District(state_id=state.id, district_name='Patna', active=True)
    db_session.add(district)
    await db_session.flush()

    range_ = Range(district_id=district.id, range_name='Central Range', active=True)
    db_session.add(range_)
    await db_session.flush()

    first = Battalion(range_id=range_.id, district_id=district.id, battalion_name='BSAP-1', active=True)
    second = Battalion(range_id=range_.id, district_id=district.id, battalion_name='BSAP-2', active=True)
    db_session.add_all([first, second])
    await db_session.commit()

    return SimpleNamespace(state=state, district=district, range=range_, battalion=first, other_battalion=second)


@pytest.fixture
async def roles(db_session: AsyncSession) -> SimpleNamespace:
    system_admin = Role(role_name='System Admin', active=True)
    range_admin = Role(role_name='Range Admin', active=True)
    battalion_user = Role(role_name='Battalion User', active=True)
    db_session.add_all([system_admin, range_admin, battalion_user])
    await db_session.commit()
    return SimpleNamespace(system_admin=system_admin, range_admin=range_admin, battalion_user=battalion_user)


@pytest.fixture
def make_user(db_session: AsyncSession, hierarchy: SimpleNamespace):
    """Factory creating a committed user in the test hierarchy"""
    async def _make_user(role: Role, battalion: Battalion = None, **overrides) -> User:
        battalion = battalion or hierarchy.battalion
        values = dict(
            first_name=fake.first_name(),
            last_name=fake.last_name(),
            email=fake.unique.email(),
            password=get_password_hash(TEST_PASSWORD),
            role_id=role.id,
            state_id=hierarchy.state.id,
            district_id=hierarchy.district.id,
            range_id=hierarchy.range.id,
            battalion_id=battalion.id,
            verified=True,
            is_first=False,
            active=True,
        )
        values.update(overrides)
        user = User(**values)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def admin_user(make_user, roles) -> User:
    return await make_user(roles.system_admin)


@pytest.fixture
async def range_admin_user(make_user, roles) -> User:
    return await make_user(roles.range_admin)


@pytest.fixture
async def battalion_user(make_user, roles) -> User:
    return await make_user(roles.battalion_user)


def headers_for(user: User) -> dict:
    """Bearer headers for a user"""
    token = create_access_token({'sub': str(user.id), 'email': user.email})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return headers_for(admin_user)


@pytest.fixture
def range_admin_headers(range_admin_user: User) -> dict:
    return headers_for(range_admin_user)


@pytest.fixture
def user_headers(battalion_user: User) -> dict:
    return headers_for(battalion_user)
