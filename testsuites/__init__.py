"""
Test suites package.

Kept importable so unit tests can share fakes (``testsuites.unit.fakes``)
and IDEs resolve fixtures across suites.
"""
