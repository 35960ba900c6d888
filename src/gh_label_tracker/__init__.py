"""
gh-label-tracker: Keep a GitHub tracking issue in sync with a label.

This package maintains a single tracking issue listing every issue that
carries a given label, in one repository or across an organization,
while preserving any human-written content around the generated section.
"""

__version__ = "1.0.0"
