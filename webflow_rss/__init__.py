"""Webflow CMS collection to RSS 2.0 feed generator."""
