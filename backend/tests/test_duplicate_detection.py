import pytest
from sqlalchemy.exc import IntegrityError

from notary_vault.config import settings
from notary_vault.models import Customer
from notary_vault.services import customer_service


class TestDuplicateDetection:
    def _duplicates(self, client, api, **keys):
        r = client.post(api.url("/customers/duplicates"), json=keys)
        assert r.status_code == 200
        return [c["id"] for c in r.json()]

    def test_shared_document_id_is_symmetric(self, client, api):
        a = api.create_customer("A", document_id="SHARED-1", passport_id="PA")
        assert self._duplicates(client, api, document_id="SHARED-1", passport_id="PB") == [a["id"]]

        client.delete(api.url(f"/customers/{a['id']}"))
        b = api.create_customer("B", document_id="SHARED-1", passport_id="PB")
        assert self._duplicates(client, api, document_id="SHARED-1", passport_id="PA") == [b["id"]]

    def test_disjoint_keys_no_match(self, client, api):
        a = api.create_customer("A", document_id="D-A", passport_id="P-A")
        b = api.create_customer("B", document_id="D-B", passport_id="P-B")

        assert a["id"] not in self._duplicates(client, api, document_id="D-B", passport_id="P-B")
        assert b["id"] not in self._duplicates(client, api, document_id="D-A", passport_id="P-A")

    def test_empty_keys_never_match(self, client, api):
        api.create_customer("No keys")
        api.create_customer("Also no keys")
        assert self._duplicates(client, api) == []
        assert self._duplicates(client, api, document_id="", passport_id="  ") == []

    def test_second_create_with_same_document_id_rejected(self, client, api):
        first = api.create_customer("First", document_id="D1")

        assert self._duplicates(client, api, document_id="D1") == [first["id"]]
        r = client.post(api.url("/customers"), json={"full_name": "Second", "document_id": "D1"})
        assert r.status_code == 409
        body = r.json()
        assert body["code"] == "CONFLICT"
        assert body["duplicate_ids"] == [first["id"]]

        r = client.get(api.url("/customers"))
        assert r.json()["total_count"] == 1

    def test_match_on_any_key_reported_once(self, client, api):
        first = api.create_customer("First", document_id="D1", passport_id="P1")
        assert self._duplicates(client, api, document_id="D1", passport_id="P1") == [first["id"]]

    def test_keys_are_normalized(self, client, api):
        first = api.create_customer("First", passport_id=" b1234567 ")
        assert first["passport_id"] == "B1234567"
        assert self._duplicates(client, api, passport_id="B1234567 ") == [first["id"]]

    def test_exact_match_without_normalization(self, client, api, monkeypatch):
        monkeypatch.setattr(settings, "normalize_natural_keys", False)
        api.create_customer("First", passport_id="b1")
        assert self._duplicates(client, api, passport_id="B1") == []

    def test_storage_rejects_duplicate_without_precheck(self, test_db):
        db = test_db()
        stamp = "2024-01-01T00:00:00Z"
        db.add(Customer(id="1", full_name="A", customer_kind="Individual", document_id="D1",
                        created_at=stamp, updated_at=stamp))
        db.commit()
        db.add(Customer(id="2", full_name="B", customer_kind="Individual", document_id="D1",
                        created_at=stamp, updated_at=stamp))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()
        db.close()

    def test_storage_violation_maps_to_conflict(self, client, api, monkeypatch):
        api.create_customer("First", business_registration_number="BRN-1", customer_kind="Business")
        monkeypatch.setattr(customer_service, "find_duplicates", lambda *a, **kw: [])

        r = client.post(api.url("/customers"), json={
            "full_name": "Second",
            "customer_kind": "Business",
            "business_registration_number": "BRN-1",
        })
        assert r.status_code == 409
        assert "registration number" in r.json()["detail"]

    def test_kind_enforcement(self, client, api, monkeypatch):
        monkeypatch.setattr(settings, "enforce_kind_natural_keys", True)
        r = client.post(api.url("/customers"), json={
            "full_name": "Person",
            "business_registration_number": "BRN-2",
        })
        assert r.status_code == 400

        r = client.post(api.url("/customers"), json={
            "full_name": "Company",
            "customer_kind": "Business",
            "passport_id": "P9",
        })
        assert r.status_code == 400
