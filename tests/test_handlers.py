"""
Snippetbox — Request Handler Tests
====================================

What:  End-to-end tests of the HTTP surface through httpx + ASGITransport,
       backed by a real SQLite database.

What we test:
    ✅ Home lists active snippets; empty store renders the empty-state text
    ✅ View renders one snippet; missing/expired → 404
    ✅ Malformed ids (0, -3, abc) → 404 without calling storage
    ✅ Create form renders; valid submit → 303 to the new snippet
    ✅ Invalid submit → 400, form re-rendered, nothing inserted
    ✅ Storage failures → generic 500 with no internal details
    ✅ Unknown path → 404, wrong method → 405, static assets served
    ✅ Common security headers and X-Request-ID on every response
"""

import re
from unittest.mock import AsyncMock, patch

import pytest

from snippetbox.exceptions import StorageError
from snippetbox.middleware.headers import COMMON_HEADERS

SAMPLE_TITLE = "O snail"
SAMPLE_CONTENT = "O snail\nClimb Mount Fuji,\nBut slowly, slowly!\n\n– Kobayashi Issa"

VIEW_PATH = re.compile(r"^/snippet/view/(\d+)$")


def storage_failure() -> StorageError:
    return StorageError(
        message="Could not retrieve the snippet",
        context={"sql": "SELECT secret_column FROM snippets"},
    )


class TestHome:
    """GET /"""

    @pytest.mark.asyncio
    async def test_empty_store_renders_placeholder(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "There's nothing to see here... yet!" in response.text

    @pytest.mark.asyncio
    async def test_lists_latest_snippets(self, test_client, snippet_model):
        first = await snippet_model.insert("First snippet", "a", 7)
        second = await snippet_model.insert("Second snippet", "b", 7)

        response = await test_client.get("/")

        assert response.status_code == 200
        assert "First snippet" in response.text
        assert "Second snippet" in response.text
        assert response.text.index(f"#{second}") < response.text.index(f"#{first}")

    @pytest.mark.asyncio
    async def test_hides_expired_snippets(self, test_client, snippet_model, clock):
        await snippet_model.insert("Gone tomorrow", "a", 1)
        clock.advance(days=2)

        response = await test_client.get("/")

        assert response.status_code == 200
        assert "Gone tomorrow" not in response.text

    @pytest.mark.asyncio
    async def test_storage_failure_is_generic_500(self, test_client, test_app):
        snippets = test_app.state.application.snippets
        with patch.object(snippets, "latest", AsyncMock(side_effect=storage_failure())):
            response = await test_client.get("/")

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert "secret_column" not in response.text


class TestSnippetView:
    """GET /snippet/view/{id}"""

    @pytest.mark.asyncio
    async def test_renders_snippet(self, test_client, snippet_model):
        snippet_id = await snippet_model.insert(SAMPLE_TITLE, SAMPLE_CONTENT, 7)

        response = await test_client.get(f"/snippet/view/{snippet_id}")

        assert response.status_code == 200
        assert SAMPLE_TITLE in response.text
        assert "Climb Mount Fuji," in response.text
        assert f"#{snippet_id}" in response.text

    @pytest.mark.asyncio
    async def test_content_is_html_escaped(self, test_client, snippet_model):
        snippet_id = await snippet_model.insert("xss", "<script>alert(1)</script>", 7)

        response = await test_client.get(f"/snippet/view/{snippet_id}")

        assert "<script>alert(1)</script>" not in response.text
        assert "&lt;script&gt;" in response.text

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client):
        response = await test_client.get("/snippet/view/12345")
        assert response.status_code == 404
        assert response.text == "Not Found"

    @pytest.mark.asyncio
    async def test_expired_is_404(self, test_client, snippet_model, clock):
        snippet_id = await snippet_model.insert("short", "c", 1)
        clock.advance(days=1)

        response = await test_client.get(f"/snippet/view/{snippet_id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw_id",
        ["0", "-3", "abc", "1.5", "%201", "2147483648", "99999999999999999999999"],
    )
    async def test_malformed_id_is_404_without_storage(self, test_client, test_app, raw_id):
        """Bad identifiers fail fast; the storage model is never consulted."""
        snippets = test_app.state.application.snippets
        with patch.object(snippets, "get", AsyncMock()) as mock_get:
            response = await test_client.get(f"/snippet/view/{raw_id}")

        assert response.status_code == 404
        mock_get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_storage_failure_is_generic_500(self, test_client, test_app):
        snippets = test_app.state.application.snippets
        with patch.object(snippets, "get", AsyncMock(side_effect=storage_failure())):
            response = await test_client.get("/snippet/view/1")

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert "secret_column" not in response.text


class TestSnippetCreate:
    """GET and POST /snippet/create"""

    @pytest.mark.asyncio
    async def test_form_renders(self, test_client):
        response = await test_client.get("/snippet/create")

        assert response.status_code == 200
        assert '<form action="/snippet/create" method="POST">' in response.text
        assert 'value="365" checked' in response.text

    @pytest.mark.asyncio
    async def test_valid_submit_redirects_to_new_snippet(self, test_client, snippet_model):
        response = await test_client.post(
            "/snippet/create",
            data={"title": SAMPLE_TITLE, "content": SAMPLE_CONTENT, "expires": "7"},
        )

        assert response.status_code == 303
        match = VIEW_PATH.match(response.headers["location"])
        assert match is not None

        record = await snippet_model.get(int(match.group(1)))
        assert record.title == SAMPLE_TITLE
        assert record.content == SAMPLE_CONTENT

        followed = await test_client.get(response.headers["location"])
        assert followed.status_code == 200
        assert SAMPLE_TITLE in followed.text

    @pytest.mark.asyncio
    async def test_empty_title_is_rejected_without_insert(self, test_client, test_app, snippet_model):
        snippets = test_app.state.application.snippets
        with patch.object(snippets, "insert", AsyncMock()) as mock_insert:
            response = await test_client.post(
                "/snippet/create",
                data={"title": "", "content": SAMPLE_CONTENT, "expires": "7"},
            )

        assert response.status_code == 400
        assert "This field cannot be blank" in response.text
        mock_insert.assert_not_awaited()
        assert await snippet_model.latest() == []

    @pytest.mark.asyncio
    async def test_rejected_form_keeps_submitted_values(self, test_client):
        response = await test_client.post(
            "/snippet/create",
            data={"title": "Kept title", "content": "", "expires": "1"},
        )

        assert response.status_code == 400
        assert 'value="Kept title"' in response.text
        assert 'value="1" checked' in response.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expires", ["30", "0", "", "week"])
    async def test_expires_outside_permitted_set(self, test_client, snippet_model, expires):
        response = await test_client.post(
            "/snippet/create",
            data={"title": "t", "content": "c", "expires": expires},
        )

        assert response.status_code == 400
        assert "This field must equal 1, 7 or 365" in response.text
        assert await snippet_model.latest() == []

    @pytest.mark.asyncio
    async def test_title_over_100_characters(self, test_client):
        response = await test_client.post(
            "/snippet/create",
            data={"title": "x" * 101, "content": "c", "expires": "7"},
        )

        assert response.status_code == 400
        assert "cannot be more than 100 characters long" in response.text

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_client):
        response = await test_client.post("/snippet/create", data={})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_storage_failure_is_generic_500(self, test_client, test_app):
        snippets = test_app.state.application.snippets
        with patch.object(snippets, "insert", AsyncMock(side_effect=storage_failure())):
            response = await test_client.post(
                "/snippet/create",
                data={"title": "t", "content": "c", "expires": "7"},
            )

        assert response.status_code == 500
        assert response.text == "Internal Server Error"


class TestRouting:
    """Dispatch outcomes that never reach a handler."""

    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, test_client):
        response = await test_client.get("/snippet/edit/1")
        assert response.status_code == 404
        assert response.text == "Not Found"

    @pytest.mark.asyncio
    async def test_paths_are_case_sensitive(self, test_client):
        response = await test_client.get("/Snippet/create")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_wrong_method_is_405(self, test_client):
        response = await test_client.delete("/")

        assert response.status_code == 405
        assert "GET" in response.headers["allow"]

    @pytest.mark.asyncio
    async def test_post_to_view_is_405(self, test_client):
        response = await test_client.post("/snippet/view/1")
        assert response.status_code == 405

    @pytest.mark.asyncio
    async def test_static_asset_served(self, test_client):
        response = await test_client.get("/static/css/main.css")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/css")

    @pytest.mark.asyncio
    async def test_missing_static_asset_is_404(self, test_client):
        response = await test_client.get("/static/css/missing.css")
        assert response.status_code == 404


class TestMiddleware:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/", "/snippet/view/999", "/static/css/main.css"])
    async def test_common_headers_on_every_response(self, test_client, path):
        response = await test_client.get(path)

        for name, value in COMMON_HEADERS.items():
            assert response.headers[name] == value

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/")
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_propagated(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "abc123"})
        assert response.headers["x-request-id"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_at_length_limit_propagated(self, test_client):
        rid = "a" * 64
        response = await test_client.get("/", headers={"X-Request-ID": rid})
        assert response.headers["x-request-id"] == rid

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "supplied", ["a" * 65, "abc def", "id;drop", "<script>", "a.b"]
    )
    async def test_unsafe_request_id_replaced(self, test_client, supplied):
        response = await test_client.get("/", headers={"X-Request-ID": supplied})

        rid = response.headers["x-request-id"]
        assert rid != supplied
        assert re.fullmatch(r"[0-9a-f]{8}", rid)
