from unittest.mock import AsyncMock, MagicMock

from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError


def listing_html(titles: list[str], pagination: str = "") -> str:
    """A generic listing page with one .job-card per title."""
    cards = "".join(
        f"""
        <div class="job-card">
            <h2 class="job-title">{title}</h2>
            <span class="company-name">Acme Corp</span>
            <span class="location">Paris, France</span>
            <a href="/jobs/{index}">View offer</a>
        </div>
        """
        for index, title in enumerate(titles, start=1)
    )
    return f"<html><body><main>{cards}</main>{pagination}</body></html>"


class FakeElement:
    """Stand-in for a Playwright ElementHandle backed by a parsed tag."""

    def __init__(self, page: "FakePage", tag) -> None:
        self._page = page
        self._tag = tag

    async def click(self) -> None:
        self._page.clicks.append(self._tag)
        self._page.navigate()

    async def text_content(self) -> str:
        return self._tag.get_text()


class FakePage:
    """
    Minimal Playwright Page driven by a list of HTML documents.
    Every click or goto moves to the next document; the last one stays put.
    """

    def __init__(self, documents: list[str], url: str = "https://jobs.example.com/jobs") -> None:
        self.documents = documents
        self.index = 0
        self.url = url
        self.closed = False
        self.clicks: list = []
        self.visited: list[str] = []
        self.context = MagicMock()
        self.context.new_page = AsyncMock(side_effect=PlaywrightError("no detail pages in tests"))

    def navigate(self) -> None:
        if self.index < len(self.documents) - 1:
            self.index += 1

    def _soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.documents[self.index], "html.parser")

    def is_closed(self) -> bool:
        return self.closed

    async def content(self) -> str:
        return self.documents[self.index]

    async def query_selector(self, selector: str):
        match = self._soup().select_one(selector)
        return FakeElement(self, match) if match is not None else None

    async def query_selector_all(self, selector: str):
        return [FakeElement(self, tag) for tag in self._soup().select(selector)]

    async def goto(self, url: str, **kwargs):
        self.visited.append(url)
        self.url = url
        self.navigate()
        return None

    async def evaluate(self, expression: str):
        return "complete"
