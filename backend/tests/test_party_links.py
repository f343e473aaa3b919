class TestPartyLinks:
    def _document(self, api):
        a = api.create_customer("Alpha")
        b = api.create_customer("Beta")
        doc = api.create_pair_document("TX-L", a["id"], b["id"])
        return doc, a["id"], b["id"]

    def test_link_witness(self, client, api):
        doc, _, _ = self._document(api)
        w = api.create_customer("Witness One")

        r = client.post(api.url(f"/documents/{doc['id']}/parties"), json={
            "customer_id": w["id"],
            "party_role": "Witness",
            "notary_date": "2024-03-01T10:30:00+07:00",
        })
        assert r.status_code == 201
        link = r.json()
        assert link["party_role"] == "Witness"
        assert link["notary_date"] == "2024-03-01T03:30:00Z"

        r = client.get(api.url(f"/documents/{doc['id']}/parties"))
        assert [l["party_role"] for l in r.json()] == ["PartyA", "PartyB", "Witness"]

    def test_link_missing_customer_creates_no_edge(self, client, api):
        doc, _, _ = self._document(api)
        r = client.post(api.url(f"/documents/{doc['id']}/parties"), json={
            "customer_id": "ghost",
            "party_role": "Witness",
        })
        assert r.status_code == 400
        assert len(client.get(api.url(f"/documents/{doc['id']}/parties")).json()) == 2

    def test_link_missing_document(self, client, api):
        c = api.create_customer()
        r = client.post(api.url("/documents/nope/parties"), json={
            "customer_id": c["id"],
            "party_role": "Witness",
        })
        assert r.status_code == 404

    def test_relink_same_customer_rejected(self, client, api):
        doc, a, _ = self._document(api)
        r = client.post(api.url(f"/documents/{doc['id']}/parties"), json={
            "customer_id": a,
            "party_role": "Witness",
        })
        assert r.status_code == 409

    def test_unlink_idempotent(self, client, api):
        doc, a, b = self._document(api)
        r = client.delete(api.url(f"/documents/{doc['id']}/parties/{b}"))
        assert r.status_code == 204
        remaining = client.get(api.url(f"/documents/{doc['id']}/parties")).json()
        assert [l["customer_id"] for l in remaining] == [a]

        r = client.delete(api.url(f"/documents/{doc['id']}/parties/{b}"))
        assert r.status_code == 204
        r = client.delete(api.url("/documents/nope/parties/nobody"))
        assert r.status_code == 204

    def test_update_signature_status(self, client, api):
        doc, a, _ = self._document(api)
        r = client.put(
            api.url(f"/documents/{doc['id']}/parties/{a}/signature-status"),
            json={"signature_status": "Rejected"},
        )
        assert r.status_code == 200
        assert r.json()["signature_status"] == "Rejected"

        r = client.put(
            api.url(f"/documents/{doc['id']}/parties/nobody/signature-status"),
            json={"signature_status": "Signed"},
        )
        assert r.status_code == 404

    def test_invalid_role_rejected(self, client, api):
        doc, _, _ = self._document(api)
        c = api.create_customer()
        r = client.post(api.url(f"/documents/{doc['id']}/parties"), json={
            "customer_id": c["id"],
            "party_role": "Notary",
        })
        assert r.status_code == 400


class TestLinkOrdering:
    def _document_with_witnesses(self, client, api):
        a = api.create_customer("Alpha")["id"]
        b = api.create_customer("Beta")["id"]
        doc = api.create_document("TX-ORDER", [
            {"customer_id": b, "party_role": "PartyB"},
            {"customer_id": a, "party_role": "PartyA"},
        ], document_type="Power of attorney")
        for name in ["Zoe", "Anh"]:
            w = api.create_customer(name)
            r = client.post(api.url(f"/documents/{doc['id']}/parties"), json={
                "customer_id": w["id"], "party_role": "Witness",
            })
            assert r.status_code == 201
        return doc

    def _order(self, links):
        return [(l["party_role"], l["customer_name"]) for l in links]

    def test_witnesses_ordered_by_name(self, client, api):
        doc = self._document_with_witnesses(client, api)
        expected = [("PartyA", "Alpha"), ("PartyB", "Beta"), ("Witness", "Anh"), ("Witness", "Zoe")]

        r = client.get(api.url(f"/documents/{doc['id']}/parties"))
        assert self._order(r.json()) == expected
        r = client.get(api.url(f"/documents/{doc['id']}"))
        assert self._order(r.json()["party_links"]) == expected

    def test_pages_use_the_same_link_order(self, client, api):
        doc = self._document_with_witnesses(client, api)
        expected = [("PartyA", "Alpha"), ("PartyB", "Beta"), ("Witness", "Anh"), ("Witness", "Zoe")]

        pages = [
            client.get(api.url("/documents")),
            client.get(api.url("/search/documents"), params={"q": "attorney"}),
        ]
        for r in pages:
            assert self._order(r.json()["items"][0]["party_links"]) == expected

        r = client.post(api.url("/verification/batch"), json={"document_ids": [doc["id"]]})
        assert self._order(r.json()[0]["party_links"]) == expected
