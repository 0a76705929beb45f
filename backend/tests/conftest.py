"""
Pytest configuration and fixtures for backend tests.

Provides shared fixtures for:
- Test database sessions
- Sample data factories (events, dancers, entries, performances, judges,
  scores, judge assignments)
- FastAPI test client and bearer token headers
"""

import os
import pytest
from datetime import date, datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

_TEST_JWT_SECRET = "test-secret-key-for-eodsa-results-engine-0123456789"

# Set test environment variables before importing app modules
os.environ['EODSA_JWT_SECRET_KEY'] = _TEST_JWT_SECRET
os.environ['EODSA_DB_URL'] = 'sqlite:///:memory:'
os.environ['EODSA_ENV'] = 'test'

from backend.src.models import (
    Base,
    Dancer,
    Entry,
    Event,
    Judge,
    JudgeEventAssignment,
    Performance,
    Score,
)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    from sqlalchemy import event

    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    # Enable foreign key constraints for SQLite
    # This must be set for each connection
    def _fk_pragma_on_connect(dbapi_con, con_record):
        dbapi_con.execute('pragma foreign_keys=ON')

    event.listen(engine, 'connect', _fk_pragma_on_connect)

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# Sample Data Factories
# ============================================================================

@pytest.fixture
def sample_event(test_db_session):
    """Factory for creating sample Event models in the database."""
    def _create(
        name='Gauteng Regionals - Solo 13-14',
        region='Gauteng',
        age_category='13-14',
        performance_type='Solo',
        event_date=date(2025, 5, 10),
        venue='Joburg Theatre',
        **kwargs
    ):
        event = Event(
            name=name,
            region=region,
            age_category=age_category,
            performance_type=performance_type,
            event_date=event_date,
            venue=venue,
            **kwargs
        )
        test_db_session.add(event)
        test_db_session.commit()
        test_db_session.refresh(event)
        return event
    return _create


@pytest.fixture
def sample_dancer(test_db_session):
    """Factory for creating sample Dancer models in the database."""
    counter = {'n': 0}

    def _create(
        eodsa_id=None,
        name=None,
        registration_fee_paid=False,
        registration_fee_mastery_level=None,
    ):
        counter['n'] += 1
        dancer = Dancer(
            eodsa_id=eodsa_id or f"E{100000 + counter['n']}",
            name=name or f"Dancer {counter['n']}",
            registration_fee_paid=registration_fee_paid,
            registration_fee_paid_at=datetime.utcnow() if registration_fee_paid else None,
            registration_fee_mastery_level=registration_fee_mastery_level,
        )
        test_db_session.add(dancer)
        test_db_session.commit()
        test_db_session.refresh(dancer)
        return dancer
    return _create


@pytest.fixture
def sample_entry(test_db_session, sample_event):
    """Factory for creating sample Entry models in the database."""
    def _create(
        event=None,
        item_number=None,
        item_name='Firebird',
        contestant_id='C-1001',
        participant_ids=None,
        approved=True,
        **kwargs
    ):
        if event is None:
            event = sample_event()
        entry = Entry(
            event_id=event.id,
            contestant_id=contestant_id,
            participant_ids=participant_ids or [],
            item_number=item_number,
            item_name=item_name,
            approved=approved,
            **kwargs
        )
        test_db_session.add(entry)
        test_db_session.commit()
        test_db_session.refresh(entry)
        return entry
    return _create


@pytest.fixture
def sample_performance(test_db_session, sample_entry):
    """
    Factory for creating sample Performance models in the database.

    Creates the backing entry when none is given; the performance copies
    the entry's item number unless item_number is passed explicitly.
    """
    _unset = object()

    def _create(
        entry=None,
        event=None,
        item_number=_unset,
        title=None,
        withdrawn_from_judging=False,
        **kwargs
    ):
        if entry is None:
            entry_kwargs = {'event': event}
            if item_number is not _unset:
                entry_kwargs['item_number'] = item_number
            if title is not None:
                entry_kwargs['item_name'] = title
            entry = sample_entry(**entry_kwargs)
        performance = Performance(
            event_id=entry.event_id,
            entry_id=entry.id,
            contestant_id=entry.contestant_id,
            title=title or entry.item_name,
            participant_names=[],
            item_number=entry.item_number if item_number is _unset else item_number,
            withdrawn_from_judging=withdrawn_from_judging,
            **kwargs
        )
        test_db_session.add(performance)
        test_db_session.commit()
        test_db_session.refresh(performance)
        return performance
    return _create


@pytest.fixture
def sample_judge(test_db_session):
    """Factory for creating sample Judge models in the database."""
    counter = {'n': 0}

    def _create(name=None, email=None, is_admin=False):
        counter['n'] += 1
        judge = Judge(
            name=name or f"Judge {counter['n']}",
            email=email or f"judge{counter['n']}@eodsa.test",
            is_admin=is_admin,
        )
        test_db_session.add(judge)
        test_db_session.commit()
        test_db_session.refresh(judge)
        return judge
    return _create


@pytest.fixture
def sample_assignment(test_db_session):
    """Factory for creating sample JudgeEventAssignment models in the database."""
    def _create(judge, event, assigned_by='admin', status='active'):
        assignment = JudgeEventAssignment(
            judge_id=judge.id,
            event_id=event.id,
            assigned_by=assigned_by,
            status=status,
        )
        test_db_session.add(assignment)
        test_db_session.commit()
        test_db_session.refresh(assignment)
        return assignment
    return _create


@pytest.fixture
def sample_score(test_db_session):
    """
    Factory for creating sample Score models in the database.

    ``total`` spreads a judge total evenly over the five components.
    """
    def _create(judge, performance, total=None, **components):
        if total is not None:
            per_component = total / 5
            components = {
                'technical_score': per_component,
                'musical_score': per_component,
                'performance_score': per_component,
                'styling_score': per_component,
                'overall_impression_score': per_component,
                **components,
            }
        values = {
            'technical_score': 16.0,
            'musical_score': 16.0,
            'performance_score': 16.0,
            'styling_score': 16.0,
            'overall_impression_score': 16.0,
        }
        values.update(components)
        score = Score(
            judge_id=judge.id,
            performance_id=performance.id,
            **values
        )
        test_db_session.add(score)
        test_db_session.commit()
        test_db_session.refresh(score)
        return score
    return _create


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def jwt_secret():
    """The signing key the application is configured with."""
    return _TEST_JWT_SECRET


@pytest.fixture
def auth_headers(test_db_session, jwt_secret):
    """Factory returning Authorization headers for a judge."""
    from backend.src.services.token_service import TokenService

    def _create(judge):
        token = TokenService(test_db_session, jwt_secret).issue_token(judge.guid)
        return {'Authorization': f'Bearer {token}'}
    return _create


@pytest.fixture
def admin_judge(sample_judge):
    """An administrator judge."""
    return sample_judge(name='Admin', email='admin@eodsa.test', is_admin=True)


@pytest.fixture
def admin_headers(auth_headers, admin_judge):
    """Authorization headers for the administrator judge."""
    return auth_headers(admin_judge)


@pytest.fixture
def test_client(test_db_session):
    """Create a test client for FastAPI application."""
    from fastapi.testclient import TestClient
    from backend.src.main import app

    # Override dependencies
    def get_test_db():
        try:
            yield test_db_session
        finally:
            pass

    from backend.src.db.database import get_db

    app.dependency_overrides[get_db] = get_test_db

    with TestClient(app) as client:
        yield client

    # Clear overrides
    app.dependency_overrides.clear()
