"""Compose tweet intent links and persist snippets, settings and drafts."""
