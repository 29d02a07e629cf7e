"""CLI entry point for api-model-gen."""

import logging
import sys
from pathlib import Path

import click
import yaml

from api_model_gen.config import FailedDetailPolicy, load_settings
from api_model_gen.crawler import ApiCrawler, StreamingApiCrawler
from api_model_gen.errors import ConfigError
from api_model_gen.generator import EMITTERS
from api_model_gen.parser.documentation import DocumentationParser

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(verbose: bool, log_file: Path | None) -> None:
    """Send package logs to stderr and, optionally, to a file."""
    logger = logging.getLogger("api_model_gen")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)


@click.group()
def main():
    """API Model Gen: generate model classes from HTML REST API documentation."""
    pass


@main.command()
@click.argument("output_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Also write logs to this file.")
@click.option("-v", "--verbose", is_flag=True, help="Log per-resource debug output.")
@click.option("--streaming/--batch", default=False, help="Write each model as soon as it is parsed (default: after all parsing).")
@click.option("--target", type=click.Choice(sorted(EMITTERS)), default=None, help="Language of the generated models.")
@click.option("--keep-failed", is_flag=True, help="Keep index-only models for resources whose detail page failed.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="YAML settings file.")
@click.option("--index-url", default=None, help="URL of the documentation index page.")
@click.option("--concurrency", type=int, default=None, help="Detail pages fetched per batch.")
@click.option("--delay", "batch_delay", type=float, default=None, help="Seconds to pause between batches.")
def generate(
    output_dir: Path,
    log_file: Path | None,
    verbose: bool,
    streaming: bool,
    target: str | None,
    keep_failed: bool,
    config_path: Path | None,
    index_url: str | None,
    concurrency: int | None,
    batch_delay: float | None,
):
    """Crawl the API documentation and write one model class per resource."""
    _configure_logging(verbose, log_file)

    try:
        settings = load_settings(
            config_path,
            overrides={
                "target": target,
                "index_url": index_url,
                "concurrency": concurrency,
                "batch_delay": batch_delay,
                "failed_detail_policy": FailedDetailPolicy.KEEP_MINIMAL if keep_failed else None,
            },
        )
    except ConfigError as e:
        raise click.ClickException(str(e))

    crawler_cls = StreamingApiCrawler if streaming else ApiCrawler
    crawler = crawler_cls(settings=settings)

    click.echo(f"Crawling {settings.index_url} ({crawler.mode}, target: {settings.target})...")
    result = crawler.crawl(output_dir)

    if not result.success:
        click.echo(f"Error: {result.error}", err=True)
        sys.exit(1)

    stats = result.statistics()
    click.echo(f"Found {stats['total_resources']} resources.")
    click.echo(f"Parsed {stats['detailed_resources']} detailed resources.")
    click.echo(f"Done! Generated {stats['generated_files']} files in {output_dir}")


@main.command()
@click.argument("html_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--detail", is_flag=True, help="Parse a resource detail page instead of the index page.")
def parse(html_path: Path, detail: bool):
    """Parse a saved documentation page and print the result as YAML."""
    html = html_path.read_text(encoding="utf-8")
    parser = DocumentationParser()

    if detail:
        resources = [parser.parse_resource_page(html)]
    else:
        resources = parser.parse_main_page(html)

    data = [r.model_dump(mode="json") for r in resources]
    click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)
