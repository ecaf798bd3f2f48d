"""
Test suite for the formflow project.

This module contains the unit tests for the formflow package.
"""
