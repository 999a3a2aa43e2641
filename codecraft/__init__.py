"""
CodeCraft Estimator: PERT estimation, cost aggregation and critical path scheduling
for software projects.
"""
