import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from notary_vault.config import settings
from notary_vault.database import _configure_sqlite, get_db, init_db
from notary_vault.main import app


@pytest.fixture
def tmp_vault(tmp_path):
    vault_path = tmp_path / "TestVault"
    vault_path.mkdir()
    return vault_path


@pytest.fixture
def test_db(tmp_vault):
    db_path = tmp_vault / "db.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _configure_sqlite)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def client(tmp_vault, test_db):
    original_vault_path = settings.vault_path
    settings.vault_path = tmp_vault
    c = TestClient(app)
    yield c
    settings.vault_path = original_vault_path


@pytest.fixture
def api(client):
    """Shortcuts for building customers and documents through the API."""
    return ApiHelper(client)


class ApiHelper:
    prefix = "/api/v1"

    def __init__(self, client):
        self.client = client

    def url(self, path):
        return f"{self.prefix}{path}"

    def create_customer(self, full_name="Nguyen Van A", **fields):
        r = self.client.post(self.url("/customers"), json={"full_name": full_name, **fields})
        assert r.status_code == 201, r.text
        return r.json()

    def create_document(self, transaction_code, parties, created_date="2024-03-01", **fields):
        r = self.client.post(self.url("/documents"), json={
            "transaction_code": transaction_code,
            "created_date": created_date,
            "parties": parties,
            **fields,
        })
        assert r.status_code == 201, r.text
        return r.json()

    def create_pair_document(self, transaction_code, party_a, party_b, notary_date=None, **fields):
        parties = [
            {"customer_id": party_a, "party_role": "PartyA"},
            {"customer_id": party_b, "party_role": "PartyB"},
        ]
        if notary_date:
            for p in parties:
                p["notary_date"] = notary_date
        return self.create_document(transaction_code, parties, **fields)

    def upload(self, document_id, content=b"%PDF-1.4 notarized", name="contract.pdf",
               content_type="application/pdf"):
        return self.client.post(
            self.url(f"/documents/{document_id}/files"),
            files={"file": (name, content, content_type)},
        )
