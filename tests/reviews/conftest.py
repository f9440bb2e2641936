import pytest
from purchases.gateway.fake_adapter import FakeGateway
from purchases.verifier import PurchaseVerifier
from reviews.workflow.fake_announcer import FakeAnnouncer
from reviews.workflow.flow import Reviewer, ReviewWorkflow
from reviews.workflow.sessions import InMemorySessionStore

TRANSACTION_ID = "tbx-10001-a1b2"
PRODUCT_NAME = "VIP Rank"
PRODUCT_IMAGE = "https://cdn.example.com/vip.png"
REVIEW_TEXT = "Great rank, the perks are worth every penny."


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def sessions(clock):
    return InMemorySessionStore(clock=clock)


@pytest.fixture()
def gateway(make_payment):
    gateway = FakeGateway()
    gateway.add_payment(make_payment(TRANSACTION_ID))
    gateway.add_package(PRODUCT_NAME, image=PRODUCT_IMAGE, package_id=7)
    return gateway


@pytest.fixture()
def announcer():
    return FakeAnnouncer()


@pytest.fixture()
def workflow(sessions, gateway, announcer):
    return ReviewWorkflow(sessions=sessions, verifier=PurchaseVerifier(gateway), announcer=announcer)


@pytest.fixture()
def reviewer():
    return Reviewer(user_id="1001", name="alice", avatar_url="https://cdn.example.com/alice.png")


@pytest.fixture()
def review_fields():
    """Factory for the keyword arguments of a complete review."""

    def _fields(**overrides):
        defaults = {
            "transaction_id": TRANSACTION_ID,
            "payment_id": TRANSACTION_ID,
            "user_id": "1001",
            "user_name": "alice",
            "user_avatar": "https://cdn.example.com/alice.png",
            "product_id": "7",
            "product_name": PRODUCT_NAME,
            "product_image": PRODUCT_IMAGE,
            "body": REVIEW_TEXT,
            "rating": 5,
            "message_id": "msg-000000000001",
        }
        defaults.update(overrides)
        return defaults

    return _fields
