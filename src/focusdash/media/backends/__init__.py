"""Concrete hosted-media platform backends."""
