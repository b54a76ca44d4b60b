"""State/store layer.

A versioned key/value store plus memoized selectors derived from it. This
is the substrate the loader builds its current-frame and time-domain views
on.
"""
