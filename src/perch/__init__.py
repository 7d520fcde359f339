"""Perch: anchored overlay positioning for tooltips and popovers.

Places floating overlay content next to a trigger element so that it stays
inside the viewport, and drives its show/hide lifecycle.
"""

__version__ = "0.1.0"
