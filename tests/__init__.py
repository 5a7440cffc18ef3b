"""Test suite for DOMForm.

This package contains tests for:
- Datetime parsing (datetime-local, month, week, time)
- Field validators (required, readonly, disabled, pattern, url, email,
  number/range, color, date and time ranges, selects)
- Error policy (fail fast, collect, suppression, display handler)
- Serialization of form state
- Population engine and Form facade over a sample form
"""
