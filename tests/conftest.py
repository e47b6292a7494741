"""Pytest configuration for level allocator tests."""

import logging

# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

# Set the engine logger to INFO level
logging.getLogger("level_allocator.engine").setLevel(logging.INFO)
