"""
Unit tests for the Open Library and OMDb lookup clients.
"""

import pytest

from shelf_api.src.errors import Failure, NotFoundError, Ok, UpstreamError
from shelf_api.src.services.metadata_service import OmdbClient, OpenLibraryClient

OPEN_LIBRARY = "https://openlibrary.org"
OMDB = "https://www.omdbapi.com/"


@pytest.fixture
def open_library(fake_http) -> OpenLibraryClient:
    return OpenLibraryClient(fake_http)


@pytest.fixture
def omdb(fake_http) -> OmdbClient:
    return OmdbClient(fake_http, api_key="omdb-key")


# ============================================================================
# OPEN LIBRARY
# ============================================================================


class TestBookByIsbn:
    """Test ISBN lookups."""

    @pytest.mark.asyncio
    async def test_found(self, open_library, fake_http):
        fake_http.add("GET", f"{OPEN_LIBRARY}/isbn/9780441172719.json", payload={"title": "Dune"})

        result = await open_library.by_isbn("9780441172719")

        assert isinstance(result, Ok)
        assert result.value.title == "Dune"
        assert result.value.isbn == "9780441172719"
        assert result.value.cover == "https://covers.openlibrary.org/b/isbn/9780441172719-L.jpg"

    @pytest.mark.asyncio
    async def test_unknown_isbn(self, open_library):
        result = await open_library.by_isbn("0000000000")

        assert isinstance(result, Failure)
        assert isinstance(result.error, NotFoundError)
        assert result.error.message == "Book not found"

    @pytest.mark.asyncio
    async def test_transport_error(self, open_library, fake_http, transport_error):
        fake_http.raise_on_request(transport_error)

        result = await open_library.by_isbn("9780441172719")

        assert isinstance(result.error, UpstreamError)
        assert result.error.message == "Failed to fetch book data"


class TestBookByTitle:
    """Test title searches."""

    @pytest.mark.asyncio
    async def test_first_hit_with_isbn(self, open_library, fake_http):
        fake_http.add("GET", f"{OPEN_LIBRARY}/search.json", payload={
            "docs": [
                {"title": "Dune", "isbn": ["9780441172719", "0441172717"], "cover_i": 11481354},
                {"title": "Dune Messiah", "isbn": ["9780593098233"]},
            ]
        })

        result = await open_library.by_title("Dune")

        assert result.value.title == "Dune"
        assert result.value.isbn == "9780441172719"
        assert result.value.cover.endswith("/b/isbn/9780441172719-L.jpg")
        assert fake_http.last_request["params"] == [("title", "Dune")]

    @pytest.mark.asyncio
    async def test_hit_without_isbn_uses_cover_id(self, open_library, fake_http):
        fake_http.add("GET", f"{OPEN_LIBRARY}/search.json", payload={
            "docs": [{"title": "Obscure Zine", "cover_i": 42}]
        })

        result = await open_library.by_title("Obscure Zine")

        assert result.value.isbn == ""
        assert result.value.cover == "https://covers.openlibrary.org/b/id/42-L.jpg"

    @pytest.mark.asyncio
    async def test_hit_without_isbn_or_cover(self, open_library, fake_http):
        fake_http.add("GET", f"{OPEN_LIBRARY}/search.json", payload={"docs": [{"title": "Bare"}]})

        result = await open_library.by_title("Bare")

        assert result.value.cover == ""

    @pytest.mark.asyncio
    async def test_no_hits(self, open_library, fake_http):
        fake_http.add("GET", f"{OPEN_LIBRARY}/search.json", payload={"docs": []})

        result = await open_library.by_title("zzzz")

        assert result.error.message == "Book not found"
        assert result.error.status_code == 404


# ============================================================================
# OMDB
# ============================================================================


class TestOmdbLookups:
    """Test movie and show lookups."""

    @pytest.mark.asyncio
    async def test_by_imdb_id(self, omdb, fake_http):
        fake_http.add("GET", OMDB, payload={
            "Response": "True",
            "imdbID": "tt0133093",
            "Title": "The Matrix",
            "Poster": "https://img.example/matrix.jpg",
            "Type": "movie",
            "Year": "1999",
        })

        result = await omdb.by_imdb_id("tt0133093")

        assert result.value.imdb_id == "tt0133093"
        assert result.value.title == "The Matrix"
        assert result.value.year == "1999"
        assert fake_http.last_request["params"] == [("i", "tt0133093"), ("apikey", "omdb-key")]

    @pytest.mark.asyncio
    async def test_by_title_blanks_missing_poster(self, omdb, fake_http):
        fake_http.add("GET", OMDB, payload={
            "Response": "True", "imdbID": "tt1", "Title": "Show", "Poster": "N/A", "Type": "series", "Year": "2001-2003",
        })

        result = await omdb.by_title("Show")

        assert result.value.poster == ""
        assert result.value.type == "series"
        assert ("t", "Show") in fake_http.last_request["params"]

    @pytest.mark.asyncio
    async def test_not_found_reported_with_http_200(self, omdb, fake_http):
        fake_http.add("GET", OMDB, payload={"Response": "False", "Error": "Movie not found!"})

        result = await omdb.by_imdb_id("tt0000000")

        assert isinstance(result.error, NotFoundError)
        assert result.error.message == "Movie not found"

    @pytest.mark.asyncio
    async def test_missing_api_key(self, fake_http):
        result = await OmdbClient(fake_http, api_key=None).by_title("Alien")

        assert isinstance(result.error, UpstreamError)
        assert result.error.message == "OMDb API key is not configured"
        assert fake_http.requests == []

    @pytest.mark.asyncio
    async def test_timeout(self, omdb, fake_http, timeout_error):
        fake_http.raise_on_request(timeout_error)

        result = await omdb.by_title("Alien")

        assert result.error.message == "Failed to fetch movie data"
