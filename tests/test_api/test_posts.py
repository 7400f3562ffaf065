"""
Tests for Post API endpoints.

Tests cover:
- Post creation and validation (400 on bad input)
- Conditional reads (ETag / If-None-Match / 304)
- Lenient pagination and author filter
- Update with optional If-Match precondition
- Hard delete
"""

import pytest
from fastapi.testclient import TestClient
from typing import Dict, Any

from database.models import PostORM, UserORM
from tests.conftest import assert_datetime_format

POSTS_URL = "/api/v1/posts"


class TestPostCreation:
    """Tests for POST /api/v1/posts."""

    def test_crear_post_exitoso(
        self,
        client: TestClient,
        post_data: Dict[str, Any],
        user_instance: UserORM
    ):
        """Test successful post creation returns 201 with ETag and Location."""
        response = client.post(POSTS_URL, json=post_data)

        assert response.status_code == 201
        data = response.json()

        assert data["title"] == post_data["title"]
        assert data["content"] == post_data["content"]
        assert data["userId"] == user_instance.id
        assert data["userName"] == user_instance.name
        assert assert_datetime_format(data["createdAt"])
        assert data["createdAt"] == data["updatedAt"]

        assert response.headers["etag"].startswith('W/"')
        assert response.headers["location"].endswith(f"{POSTS_URL}/{data['id']}")

    def test_crear_post_recorta_espacios(
        self,
        client: TestClient,
        user_instance: UserORM
    ):
        """Test title and content are trimmed before storing."""
        response = client.post(POSTS_URL, json={
            "title": "  Con espacios  ",
            "content": "\tcontenido\n",
            "userId": user_instance.id,
        })

        assert response.status_code == 201
        assert response.json()["title"] == "Con espacios"
        assert response.json()["content"] == "contenido"

    def test_crear_post_titulo_vacio(
        self,
        client: TestClient,
        post_data: Dict[str, Any]
    ):
        """Test a whitespace-only title is rejected with 400."""
        post_data["title"] = "   "
        response = client.post(POSTS_URL, json=post_data)

        assert response.status_code == 400
        assert "title" in response.json()["detail"]

    def test_crear_post_sin_contenido(
        self,
        client: TestClient,
        post_data: Dict[str, Any]
    ):
        """Test a missing content field is rejected with 400."""
        del post_data["content"]
        response = client.post(POSTS_URL, json=post_data)

        assert response.status_code == 400
        assert "content" in response.json()["detail"]

    def test_crear_post_titulo_demasiado_largo(
        self,
        client: TestClient,
        post_data: Dict[str, Any]
    ):
        """Test a title over 200 characters is rejected."""
        post_data["title"] = "x" * 201
        response = client.post(POSTS_URL, json=post_data)

        assert response.status_code == 400

    def test_crear_post_usuario_inexistente(
        self,
        client: TestClient,
        post_data: Dict[str, Any]
    ):
        """Test creating a post for a non-existent author returns 400."""
        post_data["userId"] = 9999
        response = client.post(POSTS_URL, json=post_data)

        assert response.status_code == 400
        assert "9999" in response.json()["detail"]

    def test_crear_post_sin_user_id(self, client: TestClient):
        """Test a missing userId is rejected with 400."""
        response = client.post(POSTS_URL, json={"title": "t", "content": "c"})

        assert response.status_code == 400

    def test_crear_post_cuerpo_malformado(self, client: TestClient):
        """Test a body with wrong types is rejected with 400 (not 422)."""
        response = client.post(POSTS_URL, json={"title": "t", "content": "c", "userId": "abc"})

        assert response.status_code == 400
        assert "detail" in response.json()


class TestPostConditionalRead:
    """Tests for GET /api/v1/posts/{id} with ETag validators."""

    def test_obtener_post_con_etag(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test GET by id returns the post and a weak ETag."""
        response = client.get(f"{POSTS_URL}/{post_instance.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == post_instance.id
        assert data["title"] == "Post existente"
        assert data["userName"] == "Ada Lovelace"
        assert data["createdAt"].startswith("2024-01-01T12:00:00")
        assert response.headers["etag"].startswith('W/"')

    def test_flujo_304_actualizar_200(
        self,
        client: TestClient,
        post_data: Dict[str, Any]
    ):
        """Test create, 304 with the same ETag, update, then 200 with a new ETag."""
        created = client.post(POSTS_URL, json=post_data)
        post_id = created.json()["id"]

        first = client.get(f"{POSTS_URL}/{post_id}")
        assert first.status_code == 200
        etag = first.headers["etag"]
        assert etag == created.headers["etag"]

        not_modified = client.get(f"{POSTS_URL}/{post_id}", headers={"If-None-Match": etag})
        assert not_modified.status_code == 304
        assert not_modified.headers["etag"] == etag
        assert not_modified.content == b""

        updated = client.put(
            f"{POSTS_URL}/{post_id}",
            json={"title": "Nuevo título", "content": "Nuevo contenido"},
        )
        assert updated.status_code == 204

        after = client.get(f"{POSTS_URL}/{post_id}", headers={"If-None-Match": etag})
        assert after.status_code == 200
        assert after.headers["etag"] != etag
        assert after.json()["title"] == "Nuevo título"

    def test_if_none_match_lista_con_coincidencia(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test a comma separated list containing the current ETag gives 304."""
        etag = client.get(f"{POSTS_URL}/{post_instance.id}").headers["etag"]

        response = client.get(
            f"{POSTS_URL}/{post_instance.id}",
            headers={"If-None-Match": f'W/"otro", {etag}'},
        )

        assert response.status_code == 304

    def test_if_none_match_comodin(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test If-None-Match: * matches any current representation."""
        response = client.get(f"{POSTS_URL}/{post_instance.id}", headers={"If-None-Match": "*"})

        assert response.status_code == 304
        assert response.headers["etag"].startswith('W/"')

    def test_if_none_match_distinto(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test a stale validator gets the full representation."""
        response = client.get(
            f"{POSTS_URL}/{post_instance.id}",
            headers={"If-None-Match": 'W/"desactualizado"'},
        )

        assert response.status_code == 200
        assert response.json()["id"] == post_instance.id

    def test_obtener_post_inexistente(self, client: TestClient):
        """Test GET of a missing post returns 404."""
        response = client.get(f"{POSTS_URL}/9999")

        assert response.status_code == 404
        assert "9999" in response.json()["detail"]

    def test_obtener_post_id_invalido(self, client: TestClient):
        """Test a non-integer id is rejected with 400."""
        response = client.get(f"{POSTS_URL}/abc")

        assert response.status_code == 400

    @pytest.mark.parametrize("post_id", ["0", "-1"])
    def test_obtener_post_id_no_positivo(self, client: TestClient, post_id: str):
        """Test integer ids without a row, zero and negatives included, return 404."""
        response = client.get(f"{POSTS_URL}/{post_id}")

        assert response.status_code == 404


class TestPostList:
    """Tests for GET /api/v1/posts."""

    def test_listar_posts_mas_recientes_primero(
        self,
        client: TestClient,
        many_posts
    ):
        """Test posts are ordered by creation date descending."""
        response = client.get(POSTS_URL)

        assert response.status_code == 200
        titles = [item["title"] for item in response.json()]
        assert titles == ["Post 4", "Post 3", "Post 2", "Post 1", "Post 0"]

    def test_listar_posts_paginado(
        self,
        client: TestClient,
        many_posts
    ):
        """Test page/pageSize select the right slice."""
        response = client.get(POSTS_URL, params={"page": 2, "pageSize": 2})

        assert response.status_code == 200
        titles = [item["title"] for item in response.json()]
        assert titles == ["Post 2", "Post 1"]

    def test_listar_posts_pagina_fuera_de_rango(
        self,
        client: TestClient,
        many_posts
    ):
        """Test a page past the end returns an empty array."""
        response = client.get(POSTS_URL, params={"page": 10, "pageSize": 2})

        assert response.status_code == 200
        assert response.json() == []

    def test_listar_posts_parametros_invalidos_usan_defaults(
        self,
        client: TestClient,
        many_posts
    ):
        """Test invalid pagination values fall back to page 1 / size 20."""
        response = client.get(POSTS_URL, params={"page": "abc", "pageSize": 0})

        assert response.status_code == 200
        assert len(response.json()) == 5

    def test_listar_posts_page_size_excesivo(
        self,
        client: TestClient,
        many_posts
    ):
        """Test a pageSize over the maximum falls back to the default."""
        response = client.get(POSTS_URL, params={"pageSize": 500})

        assert response.status_code == 200
        assert len(response.json()) == 5

    def test_listar_posts_por_autor(
        self,
        client: TestClient,
        many_posts,
        otro_user: UserORM
    ):
        """Test userId filters by author."""
        response = client.get(POSTS_URL, params={"userId": otro_user.id})

        assert response.status_code == 200
        data = response.json()
        assert [item["title"] for item in data] == ["Post 3", "Post 1"]
        assert all(item["userName"] == "Grace Hopper" for item in data)

    def test_listar_posts_user_id_invalido(self, client: TestClient):
        """Test a non-integer userId filter is rejected."""
        response = client.get(POSTS_URL, params={"userId": "abc"})

        assert response.status_code == 400

    def test_listar_posts_vacio(self, client: TestClient):
        """Test an empty store returns an empty array."""
        response = client.get(POSTS_URL)

        assert response.status_code == 200
        assert response.json() == []


class TestPostUpdate:
    """Tests for PUT /api/v1/posts/{id}."""

    def test_actualizar_post_exitoso(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test update replaces title/content and bumps updatedAt only."""
        response = client.put(
            f"{POSTS_URL}/{post_instance.id}",
            json={"title": "Editado", "content": "Texto editado"},
        )

        assert response.status_code == 204
        assert response.content == b""

        data = client.get(f"{POSTS_URL}/{post_instance.id}").json()
        assert data["title"] == "Editado"
        assert data["content"] == "Texto editado"
        assert data["createdAt"].startswith("2024-01-01T12:00:00")
        assert data["updatedAt"] != data["createdAt"]

    def test_actualizar_post_if_match_vigente(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test If-Match with the current ETag allows the update."""
        etag = client.get(f"{POSTS_URL}/{post_instance.id}").headers["etag"]

        response = client.put(
            f"{POSTS_URL}/{post_instance.id}",
            json={"title": "Editado", "content": "Texto"},
            headers={"If-Match": etag},
        )

        assert response.status_code == 204

    def test_actualizar_post_if_match_desactualizado(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test If-Match with a stale ETag returns 412 and leaves the post untouched."""
        etag = client.get(f"{POSTS_URL}/{post_instance.id}").headers["etag"]
        client.put(f"{POSTS_URL}/{post_instance.id}", json={"title": "Uno", "content": "Uno"})

        response = client.put(
            f"{POSTS_URL}/{post_instance.id}",
            json={"title": "Dos", "content": "Dos"},
            headers={"If-Match": etag},
        )

        assert response.status_code == 412
        assert response.headers["etag"] != etag

        current = client.get(
            f"{POSTS_URL}/{post_instance.id}",
            headers={"If-None-Match": etag},
        )
        assert current.json()["title"] == "Uno"

    def test_actualizar_post_inexistente(self, client: TestClient):
        """Test updating a missing post returns 404."""
        response = client.put(f"{POSTS_URL}/9999", json={"title": "t", "content": "c"})

        assert response.status_code == 404

    def test_actualizar_post_titulo_vacio(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test update validation rejects blank fields."""
        response = client.put(
            f"{POSTS_URL}/{post_instance.id}",
            json={"title": "", "content": "c"},
        )

        assert response.status_code == 400


class TestPostDelete:
    """Tests for DELETE /api/v1/posts/{id}."""

    def test_eliminar_post(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test delete returns 204 and the post is gone."""
        post_id = post_instance.id

        response = client.delete(f"{POSTS_URL}/{post_id}")
        assert response.status_code == 204

        assert client.get(f"{POSTS_URL}/{post_id}").status_code == 404

    def test_eliminar_post_inexistente(self, client: TestClient):
        """Test deleting a missing post returns 404."""
        response = client.delete(f"{POSTS_URL}/9999")

        assert response.status_code == 404

    def test_eliminar_post_dos_veces(
        self,
        client: TestClient,
        post_instance: PostORM
    ):
        """Test a second delete of the same post returns 404."""
        post_id = post_instance.id

        assert client.delete(f"{POSTS_URL}/{post_id}").status_code == 204
        assert client.delete(f"{POSTS_URL}/{post_id}").status_code == 404
