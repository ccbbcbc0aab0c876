"""
Business logic for the betting pool.

odds_calculator and settlement are pure functions over already-loaded rows;
pool_service wires them to the repositories.
"""
