"""Tour guide reservation back end.

The package holds the reservation fan-out pipeline, the tiered email delivery
stack and the dashboard aggregation used by the administrative screens.
"""
