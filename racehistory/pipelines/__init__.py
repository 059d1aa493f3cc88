"""
Preprocessing stages.

aggregation -> best_times -> positions -> timeline, orchestrated by preprocess;
output shapes the result into the viewer document.
"""
