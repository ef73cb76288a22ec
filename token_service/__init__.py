import logging

logger = logging.getLogger("livenet")
