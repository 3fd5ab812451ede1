"""Test suite for the cuke-core package.

This package contains unit and integration tests validating feature
aggregate construction, outline expansion, document parsing, feature
loading and execution order of YAML feature documents.
"""
