import pytest

from paypal_client import ClientOptions, PayPalClient
from tests.helpers.fake_clock import FakeClock
from tests.helpers.fake_session import FakeSession


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def session():
    return FakeSession()


@pytest.fixture()
def client(session, clock):
    c = PayPalClient('client-id', 'client-secret', 'sandbox', ClientOptions(timeout=5), session=session, clock=clock)
    yield c
    c.close()
