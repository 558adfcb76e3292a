import os

# Settings are cached on first import; point them at throwaway backends.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AI_GATEWAY_API_KEY"] = "test-key"
os.environ["AI_GATEWAY_URL"] = "https://gateway.test/v1/chat/completions"

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.core.auth import OwnerContext
from api.core.database import Base, get_db
from api.core.errors import Unauthorized
from api.main import app
from api.services.auth_service import get_auth_service
from api.services.document_store import DocumentStore
from api.services.storage import StorageService, get_storage_service
import api.models  # noqa: F401


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeS3Client:
    """In-memory stand-in for the boto3 S3 client calls the storage service makes."""

    def __init__(self):
        self.objects = {}
        self.fail_put = False
        self.fail_delete = False
        self.put_error = None
        self.delete_error = None
        self.head_error = None
        self.deleted = []

    def put_object(self, Bucket, Key, Body, ContentType=None, IfNoneMatch=None):
        if self.put_error is not None:
            raise self.put_error
        if self.fail_put:
            raise _client_error("InternalError", "PutObject")
        if IfNoneMatch == "*" and (Bucket, Key) in self.objects:
            raise _client_error("PreconditionFailed", "PutObject")
        self.objects[(Bucket, Key)] = Body
        return {}

    def delete_object(self, Bucket, Key):
        if self.delete_error is not None:
            raise self.delete_error
        if self.fail_delete:
            raise _client_error("AccessDenied", "DeleteObject")
        self.objects.pop((Bucket, Key), None)
        self.deleted.append(Key)
        return {}

    def head_object(self, Bucket, Key):
        if self.head_error is not None:
            raise self.head_error
        if (Bucket, Key) not in self.objects:
            raise _client_error("404", "HeadObject")
        return {"ContentLength": len(self.objects[(Bucket, Key)])}

    def keys(self):
        return [key for (_, key) in self.objects]


class FakeAuthService:
    """Accepts tokens of the form ``token-<user>``."""

    def get_user_id(self, access_token: str) -> str:
        if not access_token.startswith("token-"):
            raise Unauthorized("Invalid token")
        return access_token[len("token-"):]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def fake_s3():
    return FakeS3Client()


@pytest.fixture
def storage(fake_s3):
    return StorageService(s3_client=fake_s3, bucket_name="documents")


@pytest.fixture
def store(db_session, storage):
    return DocumentStore(db_session, storage)


@pytest.fixture
def owner():
    return OwnerContext(user_id="alice", access_token="token-alice")


@pytest.fixture
def other_owner():
    return OwnerContext(user_id="bob", access_token="token-bob")


@pytest.fixture
def client(session_factory, storage):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_auth_service] = lambda: FakeAuthService()

    yield TestClient(app)

    app.dependency_overrides.clear()
