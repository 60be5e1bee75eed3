"""
WeightGraph: body-weight and BMI history charting over week, month and year spans.
"""

from weightgraph.constants import app as _app

__version__ = _app.VERSION
