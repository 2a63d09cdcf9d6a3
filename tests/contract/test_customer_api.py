"""
Contract tests for the customer endpoints.
"""

from brewery_api.src.models.customer import CustomerEntity

BASE = "/api/v2/customer"


class TestCustomerApi:

    def test_create_joselito_then_get(self, client, auth_headers):
        response = client.post(
            BASE,
            json={"customerName": "Joselito", "email": "Joselito@google.com"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        location = response.headers["Location"]
        assert location == f"{BASE}/3"

        fetched = client.get(location)

        assert fetched.status_code == 200
        assert fetched.json()["customerName"] == "Joselito"
        assert fetched.json()["email"] == "Joselito@google.com"

    def test_create_without_name(self, client, auth_headers, customer_repo):
        response = client.post(BASE, json={"email": "x@example.com"}, headers=auth_headers)

        assert response.status_code == 400
        assert len(customer_repo.rows) == 2

    def test_list(self, client):
        response = client.get(BASE)

        assert response.status_code == 200
        assert [c["customerName"] for c in response.json()] == ["Customer 1", "Customer 2"]

    def test_get_missing(self, client):
        assert client.get(f"{BASE}/42").status_code == 404

    def test_stored_row_returned_as_is(self, client, customer_repo):
        customer_repo.add(CustomerEntity(customer_name=" " * 3, email="x" * 300))

        response = client.get(f"{BASE}/3")

        assert response.status_code == 200
        assert response.json()["customerName"] == "   "
        assert len(response.json()["email"]) == 300

    def test_put(self, client, auth_headers, customer_repo):
        response = client.put(
            f"{BASE}/2",
            json={"customerName": "Renamed", "email": "renamed@example.com"},
            headers=auth_headers,
        )

        assert response.status_code == 204
        assert customer_repo.rows[2].customer_name == "Renamed"

    def test_put_missing(self, client, auth_headers):
        response = client.put(f"{BASE}/42", json={"customerName": "Nobody"}, headers=auth_headers)

        assert response.status_code == 404

    def test_patch_email(self, client, auth_headers, customer_repo):
        response = client.patch(f"{BASE}/1", json={"email": "new@example.com"}, headers=auth_headers)

        assert response.status_code == 204
        assert customer_repo.rows[1].email == "new@example.com"
        assert customer_repo.rows[1].customer_name == "Customer 1"

    def test_patch_null_email_kept_by_default(self, client, auth_headers, customer_repo):
        response = client.patch(f"{BASE}/1", json={"email": None}, headers=auth_headers)

        assert response.status_code == 204
        assert customer_repo.rows[1].email == "customer1@example.com"

    def test_delete_twice(self, client, auth_headers):
        first = client.delete(f"{BASE}/1", headers=auth_headers)
        second = client.delete(f"{BASE}/1", headers=auth_headers)

        assert first.status_code == 204
        assert second.status_code == 404
