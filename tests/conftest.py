import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config overlay before any domain module is imported.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/workflow/" in test_path:
            item.add_marker(pytest.mark.workflow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def reviews_bed():
    from reviews.domain import reviews

    bed = DomainFixture(reviews)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(reviews_bed):
    """Push the reviews domain context for each test, cleanup after."""
    from purchases.gateway import reset_gateway

    with reviews_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

    reset_gateway()


@pytest.fixture()
def make_payment():
    """Factory for raw Plugin API payment payloads."""

    def _make(payment_id="tbx-10001-a1b2", packages=None, **overrides):
        raw = {
            "id": payment_id,
            "amount": "19.99",
            "date": "2025-03-01T12:00:00+00:00",
            "currency": {"iso_4217": "USD", "symbol": "$"},
            "status": "Complete",
            "player": {"id": 42, "name": "Steve"},
            "packages": packages if packages is not None else [{"id": 7, "name": "VIP Rank", "quantity": 1}],
        }
        raw.update(overrides)
        return raw

    return _make
