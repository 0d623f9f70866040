"""Headless build pipeline packages."""
