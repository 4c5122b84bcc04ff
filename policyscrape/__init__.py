"""
Insurance carrier policy scraper.

This package reads agent, customer and policy data from carrier web
portals and normalizes it into one schema. Carrier-specific page layouts
live in policyscrape.carriers; fetching, pagination and batching live in
policyscrape.driver.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
