"""Crawl orchestration: index page -> detail pages -> generated models.

Two variants share all fetching, parsing and generation logic:

``ApiCrawler``
    parses every detail page first, then writes all models.
``StreamingApiCrawler``
    writes each model as soon as its detail page has been parsed.

Only a failure to fetch the index page aborts a run. Everything after that
degrades per resource: failures are logged and the resource is skipped.
"""

import itertools
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator

from api_model_gen.client import DocumentationClient
from api_model_gen.config import CrawlerSettings, FailedDetailPolicy
from api_model_gen.crawler.result import CrawlResult
from api_model_gen.errors import FetchError
from api_model_gen.generator import ModelGenerator, get_emitter
from api_model_gen.parser.base import Resource
from api_model_gen.parser.documentation import DocumentationParser
from api_model_gen.writer import FileWriter

__all__ = ["ApiCrawler", "FailedDetailPolicy", "StreamingApiCrawler"]


class _BaseCrawler(ABC):
    mode = "batch"

    def __init__(
        self,
        client: DocumentationClient | None = None,
        parser: DocumentationParser | None = None,
        generator: ModelGenerator | None = None,
        writer: FileWriter | None = None,
        settings: CrawlerSettings | None = None,
        logger: logging.Logger | None = None,
    ):
        self.settings = settings or CrawlerSettings()
        self.logger = logger or logging.getLogger(__name__)
        self.client = client or DocumentationClient(
            timeout=self.settings.request_timeout,
            user_agent=self.settings.user_agent,
            logger=self.logger,
        )
        self.parser = parser or DocumentationParser(docs_base_url=self.settings.docs_base_url)
        self.generator = generator or ModelGenerator(get_emitter(self.settings.target))
        self.writer = writer or FileWriter()

    def crawl(self, output_directory: Path | str) -> CrawlResult:
        """Crawl the documentation and write one model file per resource."""
        output_directory = Path(output_directory)
        self.logger.info("Starting %s API documentation crawl", self.mode)

        try:
            index_html = self.client.fetch_page(self.settings.index_url)
        except FetchError as e:
            self.logger.error("Crawl failed: %s", e)
            return CrawlResult.aborted(str(e))

        resources = self.parser.parse_main_page(index_html)
        self.logger.info("Found %d resources from main page", len(resources))

        detailed, files = self._process(resources, output_directory)
        self.logger.info("Parsed %d detailed resources", len(detailed))
        self.logger.info("Generated %d model files", len(files))

        return CrawlResult(
            resources=tuple(resources),
            detailed_resources=tuple(detailed),
            generated_files=tuple(files),
            success=True,
        )

    @abstractmethod
    def _process(self, resources: list[Resource], output_directory: Path) -> tuple[list[Resource], list[Path]]:
        """Turn index resources into detailed resources and written files."""

    # -- detail pages ---------------------------------------------------------

    def _partition(self, resources: list[Resource]) -> tuple[list[Resource], dict[str, list[Resource]]]:
        """Split resources into those without a detail page and a {url: resources} fetch queue."""
        pass_through: list[Resource] = []
        to_fetch: dict[str, list[Resource]] = {}
        for resource in resources:
            if resource.detail_url:
                to_fetch.setdefault(resource.detail_url, []).append(resource)
            else:
                pass_through.append(resource)
        return pass_through, to_fetch

    def _detailed_resources(self, to_fetch: dict[str, list[Resource]]) -> Iterator[Resource]:
        """Fetch and parse detail pages batch by batch, yielding each resource once parsed.

        Batches run one after another with a pause in between; requests
        within a batch run concurrently.
        """
        urls = list(to_fetch)
        size = self.settings.concurrency
        batches = [urls[i:i + size] for i in range(0, len(urls), size)]

        if not batches:
            self.logger.info("No detailed resource pages to fetch")
            return

        for index, batch in enumerate(batches):
            if index > 0 and self.settings.batch_delay:
                time.sleep(self.settings.batch_delay)

            self.logger.info("Processing detail batch %d/%d", index + 1, len(batches))
            yield from self._process_batch(batch, to_fetch)

    def _process_batch(self, batch: list[str], to_fetch: dict[str, list[Resource]]) -> Iterator[Resource]:
        try:
            pages = self.client.fetch_pages(batch)
        except Exception:
            self.logger.exception("Failed to fetch detail batch")
            pages = {}

        for url in batch:
            for resource in to_fetch[url]:
                if url in pages:
                    detailed = self._parse_detail(url, pages[url], resource)
                else:
                    self.logger.warning("No detail page for %s (%s)", resource.name, url)
                    detailed = None

                if detailed is None:
                    detailed = self._on_failed_detail(resource)
                if detailed is not None:
                    yield detailed

    def _parse_detail(self, url: str, html: str, resource: Resource) -> Resource | None:
        try:
            detailed = self.parser.parse_detail_page_properties(html, resource)
        except Exception:
            self.logger.exception("Failed to parse detailed resource at %s", url)
            return None

        if detailed.properties:
            self.logger.debug("Parsed %d properties for %s", len(detailed.properties), resource.name)
        else:
            self.logger.warning("No properties found for detailed resource %s", resource.name)
        return detailed

    def _on_failed_detail(self, resource: Resource) -> Resource | None:
        if self.settings.failed_detail_policy is FailedDetailPolicy.KEEP_MINIMAL:
            self.logger.info("Keeping index-only model for %s", resource.name)
            return resource
        self.logger.warning("Skipping %s", resource.name)
        return None

    # -- generation -----------------------------------------------------------

    def _generate(self, resource: Resource, output_directory: Path) -> Path | None:
        """Render and write one model. Failures are logged and return None."""
        try:
            code = self.generator.generate(resource)
            path = self.generator.output_path(resource, output_directory)
            self.writer.ensure_directory(path.parent)
            self.writer.write_file(path, code)
        except Exception:
            self.logger.exception("Failed to generate model for %s", resource.name)
            return None

        self.logger.debug("Generated model %s at %s", resource.class_name, path)
        return path


class ApiCrawler(_BaseCrawler):
    """Parses every detail page before writing any model file."""

    def _process(self, resources: list[Resource], output_directory: Path) -> tuple[list[Resource], list[Path]]:
        detailed, to_fetch = self._partition(resources)
        detailed.extend(self._detailed_resources(to_fetch))

        files = []
        for resource in detailed:
            path = self._generate(resource, output_directory)
            if path is not None:
                files.append(path)
        return detailed, files


class StreamingApiCrawler(_BaseCrawler):
    """Writes each model file as soon as its resource has been parsed."""

    mode = "streaming"

    def _process(self, resources: list[Resource], output_directory: Path) -> tuple[list[Resource], list[Path]]:
        detailed: list[Resource] = []
        files: list[Path] = []

        pass_through, to_fetch = self._partition(resources)
        for resource in itertools.chain(pass_through, self._detailed_resources(to_fetch)):
            detailed.append(resource)
            path = self._generate(resource, output_directory)
            if path is not None:
                files.append(path)
        return detailed, files
