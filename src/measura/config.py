"""
measura.config
==============

Library-wide defaults. Plain module constants; callers that need different
behaviour pass explicit arguments (e.g. a `decimal.Context`) instead of
mutating these values.
"""

from decimal import ROUND_HALF_EVEN, Context

# Decimal evaluation of converters (IEEE 754 decimal128: 34 digits, half-even).
DECIMAL_PRECISION = 34
DECIMAL_CONTEXT = Context(prec=DECIMAL_PRECISION, rounding=ROUND_HALF_EVEN)

# Continued-fraction approximation of doubles (BigRational.from_double_approx).
APPROX_EPSILON = 0.0
APPROX_MAX_ITERATIONS = 100
APPROX_OVERFLOW = 2**31 - 1  # bound on convergent numerators/denominators

# Float exponents (e.g. ``unit ** 0.5``) are rationalized with these limits.
EXPONENT_MAX_DENOMINATOR = 1000
EXPONENT_TOLERANCE = 1e-12

# Fixed-width range of `Rational` (signed 64 bit).
RATIONAL_MIN = -(2**63)
RATIONAL_MAX = 2**63 - 1
