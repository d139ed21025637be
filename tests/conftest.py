import pytest

from core.repository import StateRepository
from core.storage import InMemoryStore
from models.metrics import MetricInputs
from services.checklist_service import ChecklistTracker
from services.roadmap_service import RoadmapService


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repository(store):
    return StateRepository(store)


@pytest.fixture
def tracker(repository):
    return ChecklistTracker(repository)


@pytest.fixture
def roadmap(repository):
    return RoadmapService(repository)


@pytest.fixture
def example_inputs():
    return MetricInputs(
        mrr=100000,
        mrr_clients=50,
        service_revenue=80000,
        service_cogs=28000,
        marketing_spend=20000,
        new_clients=10,
        retention_months=24,
        ar_balance=150000,
        revenue_90d=450000,
    )
