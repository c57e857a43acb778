"""
Test Data Factories for descentfit
==================================

Models and measurement sets with known optimal parameters:
- LinearModel, SaddleModel, TanModel (numeric gradients only)
- Linear, Gaussian and saddle measurement sets, perfect and noisy
"""
