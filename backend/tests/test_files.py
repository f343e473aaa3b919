import hashlib
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from notary_vault.config import settings
from notary_vault.dependencies import get_storage
from notary_vault.errors import StorageUnavailableError
from notary_vault.main import app
from notary_vault.schemas.customer import CustomerCreate
from notary_vault.schemas.document import DocumentCreate
from notary_vault.schemas.party_link import PartyInput
from notary_vault.services import customer_service, document_service, file_service
from notary_vault.services.storage import LocalObjectStorage


class TestFiles:
    def _document(self, api):
        a = api.create_customer("A")
        b = api.create_customer("B")
        return api.create_pair_document("TX-FILES", a["id"], b["id"])

    def test_upload_file(self, client, api):
        doc = self._document(api)
        content = b"%PDF-1.4 deed of sale"
        r = api.upload(doc["id"], content=content, name="deed of sale.pdf")
        assert r.status_code == 201
        data = r.json()
        assert data["file_name"] == "deed of sale.pdf"
        assert data["file_size"] == len(content)
        assert data["sha256_hash"] == hashlib.sha256(content).hexdigest()
        assert data["bucket"] == settings.storage_bucket
        assert data["storage_key"].startswith(f"documents/{doc['id']}/")
        assert " " not in data["storage_key"]

        r = client.get(api.url(f"/documents/{doc['id']}/files"))
        assert [f["id"] for f in r.json()] == [data["id"]]

    def test_identical_content_rejected(self, client, api):
        doc = self._document(api)
        assert api.upload(doc["id"], content=b"same", name="a.pdf").status_code == 201
        r = api.upload(doc["id"], content=b"same", name="b.pdf")
        assert r.status_code == 409

    def test_disallowed_type_rejected(self, client, api):
        doc = self._document(api)
        r = api.upload(doc["id"], content=b"MZ", name="run.exe", content_type="application/octet-stream")
        assert r.status_code == 400
        assert "Invalid file type" in r.json()["detail"]

    def test_empty_and_oversized_rejected(self, client, api, monkeypatch):
        doc = self._document(api)
        assert api.upload(doc["id"], content=b"").status_code == 400

        monkeypatch.setattr(settings, "max_upload_bytes", 8)
        r = api.upload(doc["id"], content=b"0123456789")
        assert r.status_code == 400
        assert "too large" in r.json()["detail"]

    def test_upload_to_missing_document(self, client, api):
        r = api.upload("nope")
        assert r.status_code == 404

    def test_download(self, client, api):
        doc = self._document(api)
        content = b"GIF89a stamp"
        uploaded = api.upload(doc["id"], content=content, name="stamp.gif", content_type="image/gif").json()

        r = client.get(api.url(f"/files/{uploaded['id']}/download"))
        assert r.status_code == 200
        assert r.content == content
        assert r.headers["content-type"] == "image/gif"
        assert "stamp.gif" in r.headers["content-disposition"]

    def test_verify_integrity(self, client, api, tmp_vault):
        doc = self._document(api)
        uploaded = api.upload(doc["id"]).json()

        r = client.get(api.url(f"/files/{uploaded['id']}/verify"))
        assert r.status_code == 200
        assert r.json()["verified"] is True

        stored = tmp_vault / "objects" / uploaded["bucket"] / uploaded["storage_key"]
        stored.chmod(0o644)
        stored.write_bytes(b"tampered")
        r = client.get(api.url(f"/files/{uploaded['id']}/verify"))
        assert r.json()["verified"] is False
        assert r.json()["actual_hash"] == hashlib.sha256(b"tampered").hexdigest()

    def test_missing_bytes_report_unavailable(self, client, api, tmp_vault):
        doc = self._document(api)
        uploaded = api.upload(doc["id"]).json()
        (tmp_vault / "objects" / uploaded["bucket"] / uploaded["storage_key"]).unlink()

        r = client.get(api.url(f"/files/{uploaded['id']}/download"))
        assert r.status_code == 503
        assert r.json()["code"] == "STORAGE_UNAVAILABLE"

    def test_delete_file_idempotent(self, client, api, tmp_vault):
        doc = self._document(api)
        uploaded = api.upload(doc["id"]).json()
        stored = tmp_vault / "objects" / uploaded["bucket"] / uploaded["storage_key"]

        r = client.delete(api.url(f"/files/{uploaded['id']}"))
        assert r.status_code == 204
        assert not stored.exists()
        assert client.get(api.url(f"/files/{uploaded['id']}")).status_code == 404

        r = client.delete(api.url(f"/files/{uploaded['id']}"))
        assert r.status_code == 204

        # same bytes may be attached again once removed
        assert api.upload(doc["id"]).status_code == 201


class FailingDeleteStorage(LocalObjectStorage):
    def delete(self, bucket, key):
        raise StorageUnavailableError(f"Could not delete object '{key}'.")


class TestFileStorageFailures:
    def _document(self, db):
        for cid in ("ca", "cb"):
            customer_service.create_customer(db, CustomerCreate(id=cid, full_name=cid))
        return document_service.create_document(db, DocumentCreate(
            transaction_code="TX-STORE",
            created_date=date(2024, 1, 1),
            parties=[
                PartyInput(customer_id="ca", party_role="PartyA"),
                PartyInput(customer_id="cb", party_role="PartyB"),
            ],
        ))

    def test_delete_succeeds_when_bytes_cannot_be_removed(self, client, api):
        a = api.create_customer("A")["id"]
        b = api.create_customer("B")["id"]
        doc = api.create_pair_document("TX-ORPHAN", a, b)
        uploaded = api.upload(doc["id"]).json()

        app.dependency_overrides[get_storage] = lambda: FailingDeleteStorage(settings.storage_path)
        r = client.delete(api.url(f"/files/{uploaded['id']}"))
        assert r.status_code == 204
        assert client.get(api.url(f"/files/{uploaded['id']}")).status_code == 404

    def test_failed_commit_removes_stored_bytes(self, test_db, tmp_path, monkeypatch):
        db = test_db()
        document = self._document(db)
        storage = LocalObjectStorage(tmp_path / "objects")

        def broken_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db, "commit", broken_commit)
        with pytest.raises(OperationalError):
            file_service.upload_file(db, storage, document.id, "deed.pdf", "application/pdf", b"%PDF x")

        assert [p for p in (tmp_path / "objects").rglob("*") if p.is_file()] == []
        db.close()
