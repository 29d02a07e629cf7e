import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from api_model_gen.config import CrawlerSettings, FailedDetailPolicy
from api_model_gen.crawler import ApiCrawler, CrawlResult, StreamingApiCrawler
from api_model_gen.crawler.crawler import _BaseCrawler
from api_model_gen.errors import FetchError, GenerationError
from api_model_gen.generator import ModelGenerator
from api_model_gen.parser.documentation import DocumentationParser

FIXTURES = Path(__file__).parent / "fixtures"

DOCS = "https://start.exactonline.nl/docs/"
ACCOUNTS_URL = DOCS + "HlpRestAPIResourcesDetails.aspx?name=CRMAccounts"
CONTACTS_URL = DOCS + "HlpRestAPIResourcesDetails.aspx?name=CRMContacts"

DETAIL_PAGES = {
    ACCOUNTS_URL: (FIXTURES / "detail_accounts.html").read_text(),
    CONTACTS_URL: (FIXTURES / "detail_contacts.html").read_text(),
}


def _client(pages: dict[str, str] | None = None) -> MagicMock:
    pages = DETAIL_PAGES if pages is None else pages
    client = MagicMock()
    client.fetch_page.return_value = (FIXTURES / "index.html").read_text()
    client.fetch_pages.side_effect = lambda urls: {u: pages[u] for u in urls if u in pages}
    return client


def _settings(**kwargs) -> CrawlerSettings:
    return CrawlerSettings(**{"batch_delay": 0.5, **kwargs})


def _tree(root: Path) -> dict[str, str]:
    return {str(p.relative_to(root)): p.read_text(encoding="utf-8") for p in sorted(root.rglob("*")) if p.is_file()}


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("api_model_gen.crawler.crawler.time.sleep") as mock_sleep:
        yield mock_sleep


class TestApiCrawler:
    def test_full_crawl(self, tmp_path):
        result = ApiCrawler(client=_client(), settings=_settings()).crawl(tmp_path)

        assert result.success is True
        assert result.error is None
        assert [r.name for r in result.resources] == ["Accounts", "Contacts", "GLAccounts"]
        # Resources without a detail page come first, then detailed ones in URL order
        assert [r.name for r in result.detailed_resources] == ["GLAccounts", "Accounts", "Contacts"]
        assert sorted(_tree(tmp_path)) == [
            "models/crm/accounts.py",
            "models/crm/contacts.py",
            "models/financial/gl_accounts.py",
        ]
        assert all(p.exists() for p in result.generated_files)

    def test_detailed_resource_keeps_index_metadata(self, tmp_path):
        result = ApiCrawler(client=_client(), settings=_settings()).crawl(tmp_path)
        accounts = result.detailed_resources[1]
        assert accounts.service == "CRM"
        assert accounts.detail_url == ACCOUNTS_URL
        assert [p.name for p in accounts.properties] == ["ID", "Name", "Code"]
        assert accounts.description == "This resource represents customer and supplier accounts."

    def test_resource_without_detail_url_is_generated_from_index(self, tmp_path):
        result = ApiCrawler(client=_client(), settings=_settings()).crawl(tmp_path)
        gl_accounts = result.detailed_resources[0]
        assert gl_accounts.properties == ()
        content = (tmp_path / "models/financial/gl_accounts.py").read_text()
        assert "class GLAccounts:" in content

    def test_index_fetch_failure_aborts(self, tmp_path):
        client = _client()
        client.fetch_page.side_effect = FetchError("https://x", "Failed to fetch page: https://x (Status: 503)", 503)

        result = ApiCrawler(client=client, settings=_settings()).crawl(tmp_path)

        assert result.success is False
        assert result.error == "Failed to fetch page: https://x (Status: 503)"
        assert result.resources == ()
        assert result.generated_files == ()
        client.fetch_pages.assert_not_called()
        assert _tree(tmp_path) == {}

    def test_index_without_resources(self, tmp_path):
        client = _client()
        client.fetch_page.return_value = "<html><body>maintenance</body></html>"

        result = ApiCrawler(client=client, settings=_settings()).crawl(tmp_path)

        assert result.success is True
        assert result.statistics() == {"total_resources": 0, "detailed_resources": 0, "generated_files": 0, "success": True}
        client.fetch_pages.assert_not_called()

    def test_failed_detail_fetch_is_dropped_and_logged(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        client = _client({ACCOUNTS_URL: DETAIL_PAGES[ACCOUNTS_URL]})

        result = ApiCrawler(client=client, settings=_settings()).crawl(tmp_path)

        assert result.success is True
        assert [r.name for r in result.detailed_resources] == ["GLAccounts", "Accounts"]
        assert len(result.generated_files) == 2
        stats = result.statistics()
        assert stats["total_resources"] > stats["generated_files"]
        assert "Contacts" in caplog.text

    def test_keep_minimal_policy_keeps_failed_resource(self, tmp_path):
        client = _client({ACCOUNTS_URL: DETAIL_PAGES[ACCOUNTS_URL]})
        settings = _settings(failed_detail_policy=FailedDetailPolicy.KEEP_MINIMAL)

        result = ApiCrawler(client=client, settings=settings).crawl(tmp_path)

        contacts = result.detailed_resources[-1]
        assert contacts.name == "Contacts"
        assert contacts.properties == ()
        assert (tmp_path / "models/crm/contacts.py").exists()

    def test_batches_are_sequential_with_delay(self, tmp_path, no_sleep):
        client = _client()

        ApiCrawler(client=client, settings=_settings(concurrency=1)).crawl(tmp_path)

        assert [c.args[0] for c in client.fetch_pages.call_args_list] == [[ACCOUNTS_URL], [CONTACTS_URL]]
        no_sleep.assert_called_once_with(0.5)

    def test_single_batch_does_not_sleep(self, tmp_path, no_sleep):
        client = _client()

        ApiCrawler(client=client, settings=_settings(concurrency=5)).crawl(tmp_path)

        client.fetch_pages.assert_called_once_with([ACCOUNTS_URL, CONTACTS_URL])
        no_sleep.assert_not_called()

    def test_batch_fetch_exception_is_contained(self, tmp_path):
        client = _client()
        client.fetch_pages.side_effect = RuntimeError("pool exploded")

        result = ApiCrawler(client=client, settings=_settings()).crawl(tmp_path)

        assert result.success is True
        assert [r.name for r in result.detailed_resources] == ["GLAccounts"]

    def test_parse_failure_is_isolated(self, tmp_path, caplog):
        parser = DocumentationParser()
        real = parser.parse_detail_page_properties

        def flaky(html, resource):
            if resource.name == "Accounts":
                raise ValueError("broken page")
            return real(html, resource)

        parser.parse_detail_page_properties = flaky
        result = ApiCrawler(client=_client(), parser=parser, settings=_settings()).crawl(tmp_path)

        assert [r.name for r in result.detailed_resources] == ["GLAccounts", "Contacts"]
        assert "broken page" in caplog.text

    def test_generation_failure_is_skipped(self, tmp_path, caplog):
        generator = ModelGenerator()
        real = generator.generate

        def flaky(resource):
            if resource.name == "Contacts":
                raise GenerationError("bad resource")
            return real(resource)

        generator.generate = flaky
        result = ApiCrawler(client=_client(), generator=generator, settings=_settings()).crawl(tmp_path)

        assert len(result.detailed_resources) == 3
        assert len(result.generated_files) == 2
        assert not (tmp_path / "models/crm/contacts.py").exists()
        assert "Failed to generate model for Contacts" in caplog.text

    def test_write_failure_is_skipped(self, tmp_path):
        writer = MagicMock()
        writer.write_file.side_effect = [None, OSError("disk full"), None]

        result = ApiCrawler(client=_client(), writer=writer, settings=_settings()).crawl(tmp_path)

        assert result.success is True
        assert len(result.generated_files) == 2
        assert writer.ensure_directory.call_count == 3

    def test_injected_logger(self, tmp_path, caplog):
        logger = logging.getLogger("custom.crawler")
        caplog.set_level(logging.INFO, logger="custom.crawler")

        ApiCrawler(client=_client(), settings=_settings(), logger=logger).crawl(tmp_path)

        assert any(r.name == "custom.crawler" and "Found 3 resources" in r.getMessage() for r in caplog.records)

    def test_php_target(self, tmp_path):
        result = ApiCrawler(client=_client(), settings=_settings(target="php")).crawl(tmp_path)
        assert "Models/Crm/Accounts.php" in _tree(tmp_path)
        assert len(result.generated_files) == 3


class TestStreamingApiCrawler:
    def test_same_files_as_batch_crawler(self, tmp_path):
        batch_dir = tmp_path / "batch"
        stream_dir = tmp_path / "stream"

        batch = ApiCrawler(client=_client(), settings=_settings(concurrency=1)).crawl(batch_dir)
        stream = StreamingApiCrawler(client=_client(), settings=_settings(concurrency=1)).crawl(stream_dir)

        assert _tree(batch_dir) == _tree(stream_dir)
        assert len(_tree(stream_dir)) == 3
        assert batch.statistics() == stream.statistics()
        assert [r.name for r in batch.detailed_resources] == [r.name for r in stream.detailed_resources]

    def test_files_written_before_next_batch(self, tmp_path):
        seen_before_second_batch = []
        client = _client()

        def fetch(urls):
            if urls == [CONTACTS_URL]:
                seen_before_second_batch.extend(sorted(_tree(tmp_path)))
            return {u: DETAIL_PAGES[u] for u in urls}

        client.fetch_pages.side_effect = fetch
        StreamingApiCrawler(client=client, settings=_settings(concurrency=1)).crawl(tmp_path)

        assert seen_before_second_batch == ["models/crm/accounts.py", "models/financial/gl_accounts.py"]

    def test_batch_crawler_writes_nothing_before_parsing_finishes(self, tmp_path):
        seen_before_second_batch = []
        client = _client()

        def fetch(urls):
            if urls == [CONTACTS_URL]:
                seen_before_second_batch.extend(_tree(tmp_path))
            return {u: DETAIL_PAGES[u] for u in urls}

        client.fetch_pages.side_effect = fetch
        ApiCrawler(client=client, settings=_settings(concurrency=1)).crawl(tmp_path)

        assert seen_before_second_batch == []

    def test_failed_detail_is_dropped(self, tmp_path):
        client = _client({CONTACTS_URL: DETAIL_PAGES[CONTACTS_URL]})

        result = StreamingApiCrawler(client=client, settings=_settings()).crawl(tmp_path)

        assert [r.name for r in result.detailed_resources] == ["GLAccounts", "Contacts"]
        assert sorted(_tree(tmp_path)) == ["models/crm/contacts.py", "models/financial/gl_accounts.py"]

    def test_index_failure_aborts(self, tmp_path):
        client = _client()
        client.fetch_page.side_effect = FetchError("https://x", "boom")

        result = StreamingApiCrawler(client=client, settings=_settings()).crawl(tmp_path)

        assert result == CrawlResult.aborted("boom")


class TestBaseCrawler:
    def test_base_crawler_is_abstract(self):
        with pytest.raises(TypeError):
            _BaseCrawler(client=_client(), settings=_settings())
