"""
Property-based testing using Hypothesis.

Property tests check invariants across randomly generated policies,
rider requests and rate inputs.

Modules:
    test_rider_premium_properties: rider clamps, quote additivity,
        paid-up addition growth and illustration schedules
"""
