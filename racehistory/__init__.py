"""
Endurance-racing timing history preprocessor.

Turns semicolon-delimited lap timing exports into ranked, best-stamped cars
and a time-ordered stream of race events.
"""
