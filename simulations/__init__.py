# simulations/__init__.py
"""
Headless experiments for the probability lab engine.

Run a single experiment via:
    python -m simulations.run --device die --trials 100000 --seed demo

Compare two relationship modes via:
    python -m simulations.compare --relationship-a independent --relationship-b dependent --trials ...
"""
