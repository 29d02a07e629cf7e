"""HTML documentation parser.

Extracts resources from the index page (one table listing every endpoint)
and properties from per-resource detail pages. Real-world markup is
inconsistent, so every lookup degrades to an empty or default value instead
of raising: malformed pages yield less data, never an error.
"""

import logging

from bs4 import BeautifulSoup, Tag

from api_model_gen.parser.base import Property, Resource
from api_model_gen.parser.normalize import normalize_type
from api_model_gen.parser.tables import (
    HEADER_STRATEGIES,
    ROW_STRATEGIES,
    cell_text,
    first_match,
    header_text,
)

logger = logging.getLogger(__name__)

DOCS_BASE_URL = "https://start.exactonline.nl/docs/"
TITLE_SUFFIX = " - Exact Online REST API"
UNKNOWN_RESOURCE = "UnknownResource"

INDEX_HEADERS = ("service", "endpoint", "resource uri", "supported methods", "webhook", "scope")
NO_WEBHOOK_MARKER = "HasNoWebhook"

# Detail table layout: [checkbox, name, mandatory, value POST, value PUT, type, description]
DETAIL_NAME_COL = 1
DETAIL_MANDATORY_COL = 2
DETAIL_TYPE_COL = 5
DETAIL_DESCRIPTION_COL = 6
DETAIL_MIN_CELLS = 7


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class DocumentationParser:
    """Parses index and detail documentation pages into ``Resource`` models."""

    def __init__(self, docs_base_url: str = DOCS_BASE_URL):
        self.docs_base_url = docs_base_url

    # -- index page -----------------------------------------------------------

    def parse_main_page(self, html: str) -> list[Resource]:
        """Return the resources listed in the first table that looks like the endpoint index."""
        soup = _soup(html)
        for table in soup.find_all("table"):
            resources = self._parse_index_table(table)
            if resources:
                return resources
        return []

    def _parse_index_table(self, table: Tag) -> list[Resource]:
        headers = first_match(table, HEADER_STRATEGIES)
        if len(headers) < len(INDEX_HEADERS):
            return []
        if not is_index_table(header_text(headers)):
            return []

        resources = []
        for row in first_match(table, ROW_STRATEGIES):
            cells = row.select("td")
            if len(cells) < len(INDEX_HEADERS):
                continue
            resource = self._parse_index_row(cells)
            if resource is not None:
                resources.append(resource)
        return resources

    def _parse_index_row(self, cells: list[Tag]) -> Resource | None:
        service = cell_text(cells[0])

        link = cells[1].select_one("a")
        endpoint_name = cell_text(link) if link is not None else cell_text(cells[1])
        detail_url = self._resolve_href(link.get("href")) if link is not None else None

        resource_uri = cell_text(cells[2])
        supported_methods = cell_text(cells[3])
        has_webhook = webhook_flag(cells[4])
        scope = cell_text(cells[5])

        if not service or not endpoint_name or not resource_uri:
            return None
        if _is_header_label(service, endpoint_name, resource_uri):
            return None

        return Resource(
            name=endpoint_name,
            endpoint=resource_uri,
            description=f"API endpoint for {service} - {endpoint_name}",
            properties=(),
            service=service,
            resource_uri=resource_uri,
            supported_methods=supported_methods,
            has_webhook=has_webhook,
            scope=scope,
            detail_url=detail_url,
        )

    def _resolve_href(self, href: str | None) -> str | None:
        if not href:
            return None
        if href.startswith("http"):
            return href
        return self.docs_base_url + href.lstrip("/")

    # -- detail pages ---------------------------------------------------------

    def parse_resource_page(self, html: str) -> Resource:
        """Build a resource from a detail page alone, without index metadata."""
        soup = _soup(html)
        return Resource(
            name=extract_resource_name(soup),
            endpoint=extract_endpoint(soup),
            description=extract_description(soup),
            properties=extract_properties(soup),
        )

    def parse_detail_page_properties(self, html: str, resource: Resource) -> Resource:
        """Return a copy of *resource* with properties and description from its detail page.

        Routing metadata from the index page is carried over unchanged. The
        index description is kept when the page has none.
        """
        soup = _soup(html)
        properties = extract_properties(soup)
        description = extract_description(soup)
        return resource.with_overrides(
            properties=properties,
            description=description or resource.description,
        )


def is_index_table(text: str) -> bool:
    return all(expected in text for expected in INDEX_HEADERS)


def is_properties_table(text: str) -> bool:
    return "name" in text and "type" in text and ("mandatory" in text or "description" in text)


def webhook_flag(cell: Tag) -> bool:
    """Webhook support is encoded as a CSS class on the cell."""
    classes = " ".join(cell.get("class") or [])
    return bool(classes) and NO_WEBHOOK_MARKER not in classes


def _is_header_label(service: str, endpoint_name: str, resource_uri: str) -> bool:
    return (
        "service" in service.lower()
        or "endpoint" in endpoint_name.lower()
        or "resource uri" in resource_uri.lower()
    )


def extract_resource_name(soup: BeautifulSoup) -> str:
    h1 = soup.find("h1")
    if h1 is not None:
        return cell_text(h1)

    title = soup.find("title")
    if title is not None:
        return cell_text(title).replace(TITLE_SUFFIX, "")

    return UNKNOWN_RESOURCE


def extract_endpoint(soup: BeautifulSoup) -> str:
    for block in soup.select("code, pre"):
        content = cell_text(block)
        if "/api/v1/" in content and "{division}" in content:
            return content
    return ""


def extract_description(soup: BeautifulSoup) -> str:
    """First paragraph following the first <h1>, skipping other siblings."""
    h1 = soup.find("h1")
    if h1 is None:
        return ""
    paragraph = h1.find_next_sibling("p")
    if paragraph is None:
        return ""
    return cell_text(paragraph)


def extract_properties(soup: BeautifulSoup) -> tuple[Property, ...]:
    for table in soup.find_all("table"):
        properties = _properties_from_table(table)
        if properties:
            return properties
    return ()


def _properties_from_table(table: Tag) -> tuple[Property, ...]:
    rows = table.select("tr")
    if len(rows) < 2:
        return ()

    header_cells = rows[0].select("td, th")
    if len(header_cells) < 3:
        return ()
    if not is_properties_table(header_text(header_cells)):
        return ()

    properties = []
    for row in rows[1:]:
        prop = parse_property_row(row.select("td"))
        if prop is not None:
            properties.append(prop)
    return tuple(properties)


def parse_property_row(cells: list[Tag]) -> Property | None:
    """Decode one property row; returns None for rows that do not describe a property."""
    if len(cells) < DETAIL_MIN_CELLS:
        return None

    name_cell = cells[DETAIL_NAME_COL]
    name = cell_text(name_cell)
    if not name or "|" in name:
        logger.debug("Skipping property row with name %r", name)
        return None

    mandatory = cell_text(cells[DETAIL_MANDATORY_COL]).lower() == "true"
    is_key = name_cell.select_one('img[title="Key"]') is not None
    required = mandatory or is_key

    return Property(
        name=name,
        type=normalize_type(cell_text(cells[DETAIL_TYPE_COL])),
        description=cell_text(cells[DETAIL_DESCRIPTION_COL]),
        is_required=required,
        is_nullable=not required,
    )
