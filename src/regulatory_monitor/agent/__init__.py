"""Crawl loop control plane."""
