from api_model_gen.crawler.crawler import ApiCrawler, FailedDetailPolicy, StreamingApiCrawler
from api_model_gen.crawler.result import CrawlResult

__all__ = ["ApiCrawler", "CrawlResult", "FailedDetailPolicy", "StreamingApiCrawler"]
