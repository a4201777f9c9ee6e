"""Utility functions for shared Lambda code."""

from src.lambdas.shared.utils.response_builder import json_response

__all__ = ["json_response"]
