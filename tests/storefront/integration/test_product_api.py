"""Integration tests for the product endpoints."""


class TestProductAPI:
    def test_get_product(self, client):
        product_id = client.post("/products", json={"sku": "WID-1", "name": "Widget", "price": 20.0}).json()["id"]

        response = client.get(f"/products/{product_id}")

        assert response.status_code == 200
        assert response.json()["isActive"] is True
        assert response.json()["quantity"] == 0

    def test_missing_product_is_404(self, client):
        assert client.get("/products/nope").status_code == 404

    def test_negative_price_is_400(self, client):
        response = client.post("/products", json={"sku": "WID-1", "name": "Widget", "price": -1})
        assert response.status_code == 400
        assert "error" in response.json()
