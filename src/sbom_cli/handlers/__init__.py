# sbom_cli/handlers/__init__.py

import logging

# Common logger for all handlers
logger = logging.getLogger("sbom-cli")

# Import handlers
from .merge import handle_merge
from .enrich import handle_enrich
from .inspect import handle_inspect

__all__ = [
    'handle_merge',
    'handle_enrich',
    'handle_inspect',
]
