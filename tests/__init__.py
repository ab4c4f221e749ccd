"""
BayesianINT — Test Suite
========================

Test modules:
- test_ornstein_uhlenbeck.py: OU simulator tests
- test_sumstats.py: ACF / PSD reducers and timescale estimates
- test_distances.py: Distance functions
- test_priors.py: Prior specifications and informed priors
- test_models.py: Shared model contract
- test_one_timescale.py: OneTimescaleModel
- test_one_timescale_and_osc.py: OneTimescaleAndOscModel
- test_plotting.py: Diagnostic figures
"""
