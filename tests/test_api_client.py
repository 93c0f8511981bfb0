from urllib.parse import parse_qs

import httpx
import pytest

from wsslots.wiki.api_client import (
    MediaWikiClient,
    MediaWikiRequestError,
    MediaWikiResponseError,
)

API_URL = "https://wiki.example.org/w/api.php"


class FakeWiki:
    """Minimal api.php answering login, token, editslot and revision queries."""

    def __init__(self):
        self.edits = []
        self.csrf_tokens = ["token-1", "token-2"]
        self.reject_first_edit = False

    def _params(self, request):
        if request.method == "POST":
            return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        return dict(request.url.params)

    def __call__(self, request):
        params = self._params(request)
        action = params.get("action")

        if action == "query" and params.get("meta") == "tokens":
            token_type = params["type"]
            if token_type == "login":
                return httpx.Response(200, json={"query": {"tokens": {"logintoken": "login-token"}}})
            return httpx.Response(200, json={"query": {"tokens": {"csrftoken": self.csrf_tokens.pop(0)}}})

        if action == "login":
            result = "Success" if params.get("lgpassword") == "secret" else "Failed"
            return httpx.Response(200, json={"login": {"result": result, "reason": "Incorrect password"}})

        if action == "editslot":
            if self.reject_first_edit and not self.edits:
                self.edits.append(None)
                return httpx.Response(200, json={"error": {"code": "badtoken", "info": "Invalid CSRF token."}})
            if params.get("slot") == "nope":
                return httpx.Response(200, json={"error": {"code": "unknownslot", "info": "Unknown slot"}})
            self.edits.append(params)
            return httpx.Response(200, json={})

        if action == "query" and params.get("prop") == "revisions":
            if params["titles"] == "Missing":
                return httpx.Response(200, json={"query": {"pages": [{"title": "Missing", "missing": True}]}})
            if params["titles"] == "Bad<title>":
                return httpx.Response(200, json={"query": {"pages": [{"title": "Bad<title>", "invalid": True}]}})
            if params["titles"] == "Hidden":
                return httpx.Response(200, json={"query": {"pages": [{"pageid": 7, "title": "Hidden"}]}})
            slots = {"main": {"contentmodel": "wikitext", "content": "Body"}}
            return httpx.Response(
                200,
                json={"query": {"pages": [{"title": params["titles"], "revisions": [{"slots": slots}]}]}},
            )

        return httpx.Response(500, text="unexpected request")


@pytest.fixture
def wiki():
    return FakeWiki()


@pytest.fixture
def client(wiki):
    http = httpx.AsyncClient(transport=httpx.MockTransport(wiki))
    return MediaWikiClient(API_URL, "Bot@tool", "secret", http_client=http)


@pytest.mark.asyncio
async def test_login_and_edit_slot(client, wiki):
    await client.login()
    await client.edit_slot(title="Page", text="x", slot="seo", append=True, watchlist="nochange")

    edit = wiki.edits[-1]
    assert edit["title"] == "Page"
    assert edit["slot"] == "seo"
    assert edit["append"] == "1"
    assert edit["watchlist"] == "nochange"
    assert edit["token"] == "token-1"


@pytest.mark.asyncio
async def test_append_omitted_when_false(client, wiki):
    await client.edit_slot(pageid=3, text="x")

    edit = wiki.edits[-1]
    assert edit["pageid"] == "3"
    assert "append" not in edit
    assert "title" not in edit


@pytest.mark.asyncio
async def test_login_failure(wiki):
    http = httpx.AsyncClient(transport=httpx.MockTransport(wiki))
    client = MediaWikiClient(API_URL, "Bot@tool", "wrong", http_client=http)

    with pytest.raises(MediaWikiResponseError) as excinfo:
        await client.login()
    assert excinfo.value.code == "loginfailed"


@pytest.mark.asyncio
async def test_api_error_raised(client):
    with pytest.raises(MediaWikiResponseError) as excinfo:
        await client.edit_slot(title="Page", slot="nope")

    assert excinfo.value.code == "unknownslot"


@pytest.mark.asyncio
async def test_badtoken_retried_once(client, wiki):
    wiki.reject_first_edit = True

    await client.edit_slot(title="Page", text="x")

    assert wiki.edits[-1]["token"] == "token-2"


@pytest.mark.asyncio
async def test_page_identifier_required(client):
    with pytest.raises(ValueError):
        await client.edit_slot(text="x")

    with pytest.raises(ValueError):
        await client.edit_slot(title="A", pageid=1)


@pytest.mark.asyncio
async def test_get_slot_content(client):
    assert await client.get_slot_content("Page") == "Body"
    assert await client.get_slot_content("Page", "seo") is None
    assert await client.get_slot_content("Missing") is None


@pytest.mark.asyncio
async def test_get_slot_content_without_revisions(client):
    assert await client.get_slot_content("Bad<title>") is None
    assert await client.get_slot_content("Hidden") is None


@pytest.mark.asyncio
async def test_transport_error_wrapped():
    def handler(request):
        return httpx.Response(502, text="bad gateway")

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = MediaWikiClient(API_URL, http_client=http)

    with pytest.raises(MediaWikiRequestError):
        await client.get_slot_content("Page")
    await client.aclose()
