import os

# set before any application import so Settings and boto3 never see real values
os.environ["ACCESS_TOKEN_SECRET"] = "test-secret-not-real"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_not_real"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_REGION"] = "us-east-1"
os.environ.pop("AWS_PROFILE", None)
os.environ.pop("DYNAMODB_ENDPOINT_URL", None)

import boto3
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from moto import mock_aws

from paw_haven.api.main import app
from paw_haven.core.dependencies import get_dynamo_table
from paw_haven.core.security import issue_token
from paw_haven.data_access.dynamodb import DynamoDataAccess, create_table

TABLE_NAME = "paw-haven-test"
ADMIN_EMAIL = "admin@pawhaven.org"
ALICE = "alice@example.com"
BOB = "bob@example.com"


def session_headers(email: str, **claims) -> dict:
    token = issue_token({"email": email, **claims})
    return {"Cookie": f"token={token}"}


@pytest.fixture
def table():
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        yield create_table(dynamodb, TABLE_NAME)


@pytest.fixture
def data_access(table):
    return DynamoDataAccess(table)


@pytest.fixture
def admin(data_access):
    data_access.users.create({"email": ADMIN_EMAIL, "role": "admin", "isBanned": False})
    return ADMIN_EMAIL


@pytest.fixture
def campaign(data_access):
    """A running campaign owned by Alice with 90 of 100 collected."""
    inserted = data_access.campaigns.create({
        "petName": "Rex",
        "addedBy": ALICE,
        "maxDonation": 100,
        "currentDonation": 90,
        "donors": 3,
        "isPaused": False,
    })
    return inserted["insertedId"]


@pytest_asyncio.fixture
async def client(table):
    app.dependency_overrides[get_dynamo_table] = lambda: table
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
