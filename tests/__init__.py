"""
astral_permissions test suite.

This package contains tests for:
- Permission values
- Rule evaluation
- Preparation status state machine
- Policy manager and policy handles
- Diagnostics logging and configuration
"""
