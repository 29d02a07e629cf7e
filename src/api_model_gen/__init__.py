"""api-model-gen: generate model classes from HTML REST API documentation."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
