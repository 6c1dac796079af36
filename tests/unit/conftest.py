"""
Unit Test Layer Configuration

Structure:
    tests/unit/
    ├── auth/        Session token rules
    ├── booking/     Booking request models
    ├── campaign/    Campaign request models
    ├── core/        Shared validation and relay helpers
    ├── gateway/     Route registry
    ├── onboarding/  Wizard step rules
    └── payment/     Provider signing

Usage:
    pytest tests/unit -v
    pytest tests/unit -m unit -v
"""
import os
import sys

import pytest

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
