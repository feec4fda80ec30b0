"""
Property-based testing using Hypothesis.

This package contains property tests that verify projection invariants
hold across randomly generated inputs.

Modules:
    test_projection_properties: rate lookup, benefit base, scenario totals
    test_lifo_properties: LIFO tax allocation conservation
"""
