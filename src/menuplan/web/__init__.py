"""Menuplan - Web API."""
